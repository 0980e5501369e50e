"""
属性文法解析模块
从文本中解析属性文法：先逐行解析产生式和属性方程，再整理属性并计算强无环性

文法格式（每行一个产生式）：
    <非终结符> -> <符号> <符号> ... : <属性>[<下标>] = <属性>[<下标>]; ...
"""

import logging
from typing import List, Optional

from attrsys.config.analysis_config import analysis_config
from attrsys.core.attribute_reconciler import AttributeReconciler
from attrsys.core.dependency import AttributeCoordinate, Dependency
from attrsys.core.grammar import Attribute, Grammar, ProductionRule, Symbol
from attrsys.core.strong_acyclicity import StrongAcyclicityCalculator
from attrsys.core.text_utils import (
    ARROW,
    EQUALS_SIGN,
    EQUATION_SEPARATOR,
    AttributeReferenceScanner,
    contains_any,
    split_into_rows,
    split_into_words,
    split_row,
    text_is_empty,
)


logger = logging.getLogger('attrsys.parser')

FORBIDDEN_SYMBOLS_TEXT = ' '.join(Grammar.FORBIDDEN_SYMBOLS)


class GrammarParser:
    """属性文法解析器类"""

    @staticmethod
    def parse_from_file(filename: str, analyze: bool = True) -> Grammar:
        """
        从文件中解析属性文法
        :param filename: 文法文件路径
        :param analyze: 是否在解析后计算强无环性
        :return: Grammar对象
        """
        # 使用 utf-8-sig 自动处理 BOM
        with open(filename, 'r', encoding='utf-8-sig') as f:
            text = f.read()
        return GrammarParser.parse_from_text(text, analyze)

    @staticmethod
    def parse_from_lines(lines: List[str], analyze: bool = True) -> Grammar:
        """
        从字符串列表解析属性文法，每个元素是一个产生式
        """
        if lines and lines[0].startswith('\ufeff'):
            lines = [lines[0][1:]] + list(lines[1:])
        return GrammarParser.parse_from_text('\n'.join(lines), analyze)

    @staticmethod
    def parse_from_text(text: str, analyze: bool = True) -> Grammar:
        """
        解析属性文法文本
        某一行出错时只放弃这一行，其余各行照常解析，以便一次显示所有错误
        :param text: 文法文本
        :param analyze: 是否在解析后计算强无环性
        :return: Grammar对象，错误保存在 grammar.errors 中
        """
        grammar = Grammar()

        if text_is_empty(text):
            grammar.errors.append("文法输入为空。")
            return grammar

        # 第一阶段：逐行解析
        for line_index, row in enumerate(split_into_rows(text)):
            if text_is_empty(row):
                continue
            GrammarParser._parse_row(grammar, line_index, row)

        # 第二阶段：补全并排序属性，确定依赖中的属性下标
        AttributeReconciler(grammar).reconcile()

        if not analyze:
            return grammar

        if grammar.has_errors() and not analysis_config.analyze_grammar_with_errors:
            logger.info("文法中有 %d 个错误，跳过强无环性计算", len(grammar.errors))
            return grammar

        StrongAcyclicityCalculator(grammar).calculate_all()
        return grammar

    @staticmethod
    def _parse_row(grammar: Grammar, line_index: int, row: str):
        """
        解析一行：产生式部分和可选的属性方程部分
        """
        production_rule_text, attributes_text, too_many_separators = split_row(row)

        if too_many_separators:
            GrammarParser._report(grammar, line_index, row.strip(),
                                  "一行中只能有一个分隔符 ':'。")

        production_rule = GrammarParser._parse_production_rule(grammar, line_index, production_rule_text)
        if production_rule is None:
            return

        grammar.add_production_rule(production_rule)

        # 产生式不一定带有属性方程
        if attributes_text is not None:
            GrammarParser._parse_attributes(grammar, line_index, attributes_text, production_rule)

    @staticmethod
    def _parse_production_rule(grammar: Grammar, line_index: int,
                               production_rule_text: str) -> Optional[ProductionRule]:
        """
        解析产生式，左右两部分都会检查，以便同时报告两边的错误
        解析成功的一边会登记它的符号，即使另一边出错
        :return: 解析成功的产生式，出错时返回None
        """
        halves = production_rule_text.split(ARROW)
        if len(halves) != 2:
            GrammarParser._report(grammar, line_index, production_rule_text.strip(),
                                  "产生式必须由一个箭头 '->' 分隔。")
            return None

        production_rule = ProductionRule()
        left_parsed = GrammarParser._parse_left_side(
            grammar, line_index, production_rule_text, halves[0], production_rule)
        right_parsed = GrammarParser._parse_right_side(
            grammar, line_index, halves[1], production_rule)

        if not (left_parsed and right_parsed):
            return None
        return production_rule

    @staticmethod
    def _parse_left_side(grammar: Grammar, line_index: int, production_rule_text: str,
                         left_text: str, production_rule: ProductionRule) -> bool:
        """左部必须恰好是一个非终结符"""
        left_symbols = split_into_words(left_text)
        left_nonterminal = left_symbols[0]

        if text_is_empty(left_nonterminal):
            GrammarParser._report(grammar, line_index, production_rule_text.strip(),
                                  "产生式左部缺少非终结符。")
            return False

        if contains_any(left_nonterminal, Grammar.FORBIDDEN_SYMBOLS):
            GrammarParser._report(grammar, line_index, left_nonterminal,
                                  f"字符 '{FORBIDDEN_SYMBOLS_TEXT}' 不能用作（非）终结符。")
            return False

        if len(left_symbols) > 1:
            GrammarParser._report(grammar, line_index, production_rule_text.strip(),
                                  "产生式左部只能有一个非终结符。")
            return False

        grammar.all_symbol_names.add(left_nonterminal)
        grammar.all_nonterminal_names.add(left_nonterminal)
        production_rule.add_symbol(Symbol(left_nonterminal))
        return True

    @staticmethod
    def _parse_right_side(grammar: Grammar, line_index: int, right_text: str,
                          production_rule: ProductionRule) -> bool:
        """右部为空表示空串（ε），此时不添加任何符号"""
        if text_is_empty(right_text):
            return True

        # 这里出现 '=' 多半是忘了写 ':'
        if contains_any(right_text, Grammar.FORBIDDEN_SYMBOLS):
            GrammarParser._report(grammar, line_index, right_text.strip(),
                                  f"字符 '{FORBIDDEN_SYMBOLS_TEXT}' 不能用作（非）终结符。"
                                  "是否忘记了用 ':' 分隔产生式和属性方程？")
            return False

        for symbol_name in split_into_words(right_text):
            grammar.all_symbol_names.add(symbol_name)
            production_rule.add_symbol(Symbol(symbol_name))
        return True

    @staticmethod
    def _parse_attributes(grammar: Grammar, line_index: int, attributes_text: str,
                          production_rule: ProductionRule):
        """
        解析以 ';' 分隔的属性方程
        一个方程出错只放弃这个方程，继续解析下一个
        """
        for equation in attributes_text.split(EQUATION_SEPARATOR):

            if text_is_empty(equation) and analysis_config.ignore_blank_equations:
                continue

            halves = equation.split(EQUALS_SIGN)
            if len(halves) == 1:
                GrammarParser._report(grammar, line_index, equation.strip(),
                                      "属性方程必须包含 '='。")
                continue
            if len(halves) > 2:
                GrammarParser._report(grammar, line_index, equation.strip(),
                                      "一个方程中只能有一个等号 '='。")
                continue

            left_attribute = GrammarParser._parse_left_attribute(
                grammar, line_index, equation, halves[0], production_rule)
            if left_attribute is None:
                continue

            GrammarParser._parse_right_attributes(
                grammar, line_index, equation, halves[1], left_attribute, production_rule)

    @staticmethod
    def _parse_left_attribute(grammar: Grammar, line_index: int, equation: str, left_half: str,
                              production_rule: ProductionRule) -> Optional[AttributeCoordinate]:
        """
        方程左边必须恰好有一个属性
        :return: 左边属性的坐标，出错时返回None
        """
        references = AttributeReferenceScanner.scan_all(left_half)

        if len(references) == 0:
            GrammarParser._report(grammar, line_index, equation.strip(),
                                  "方程左边的属性格式错误。")
            return None
        if len(references) > 1:
            GrammarParser._report(grammar, line_index, equation.strip(),
                                  "方程左边只能有一个属性。")
            return None

        reference = references[0]
        if reference.symbol_index > production_rule.max_index():
            GrammarParser._report(grammar, line_index, equation.strip(),
                                  f"'{left_half.strip()}' 中的下标超出了产生式的符号个数。")
            return None

        grammar.all_attribute_names.add(reference.name)
        symbol = production_rule.symbols[reference.symbol_index]
        symbol.add_attribute(Attribute(reference.name))

        return AttributeCoordinate(reference.symbol_index, reference.name)

    @staticmethod
    def _parse_right_attributes(grammar: Grammar, line_index: int, equation: str, right_half: str,
                                left_attribute: AttributeCoordinate, production_rule: ProductionRule):
        """
        方程右边可以没有属性（如 z[0] = 0），也可以有多个（如 z[0] = max(z[1], z[2])），
        每个属性都建立一条指向左边属性的依赖。
        遇到下标越界时报告错误，并停止处理后面的属性，已经处理的保留。
        """
        for reference in AttributeReferenceScanner.scan_all(right_half):

            if reference.symbol_index > production_rule.max_index():
                GrammarParser._report(grammar, line_index, equation.strip(),
                                      f"'{right_half.strip()}' 中的下标超出了产生式的符号个数。")
                return

            grammar.all_attribute_names.add(reference.name)

            dependency = Dependency.unresolved(reference.name, reference.symbol_index,
                                               left_attribute.attribute_name, left_attribute.symbol_index)
            symbol = production_rule.symbols[reference.symbol_index]
            symbol.add_attribute_and_dependency(Attribute(reference.name), dependency)

    @staticmethod
    def _report(grammar: Grammar, line_index: int, fragment: str, message: str):
        grammar.add_error(line_index, fragment, message)
        logger.debug("第 %d 行解析错误: %s", line_index + 1, message)
