"""
属性整理模块
所有行都解析完之后执行：
1. 同一个（非）终结符可以出现在多个产生式中，并在不同产生式中声明不同的属性，
   而画局部依赖图时每个符号旁边必须画出它的全部属性，所以要把缺少的属性补上；
   为了让同名符号的属性顺序处处一致，补全后按属性名排序
2. 排序完成后才能确定依赖两端的属性下标，顺便统计每个产生式的结点数
3. 计算终结符集合
"""

import logging
from typing import Dict

from attrsys.core.grammar import Attribute, Grammar
from attrsys.core.indexed_map import IndexedMap


logger = logging.getLogger('attrsys.reconciler')


class AttributeReconciler:
    """属性整理器"""

    def __init__(self, grammar: Grammar):
        """
        :param grammar: 已完成逐行解析的文法
        """
        self.grammar = grammar

    def reconcile(self):
        """按顺序执行全部整理步骤"""
        self.grammar.attributes_by_symbol = self._collect_attributes_by_symbol()
        self._merge_missing_attributes_and_sort()
        self._resolve_attribute_indexes_and_count_elements()
        self._compute_terminals()

    def _collect_attributes_by_symbol(self) -> Dict[str, IndexedMap[str, Attribute]]:
        """
        收集每个符号名在所有产生式中出现过的属性
        保存的是不带依赖的副本，并标记为间接识别
        """
        attributes_by_symbol: Dict[str, IndexedMap[str, Attribute]] = {}

        for production_rule in self.grammar.production_rules:
            for symbol in production_rule.symbols:
                collected = attributes_by_symbol.setdefault(symbol.name, IndexedMap())
                for attribute in symbol.attributes.values():
                    if not collected.has(attribute.name):
                        collected.add(attribute.name, attribute.clean_copy())

        return attributes_by_symbol

    def _merge_missing_attributes_and_sort(self):
        """为每个符号实例补上在其他产生式中声明的属性，并按属性名排序"""
        for production_rule in self.grammar.production_rules:
            for symbol in production_rule.symbols:
                collected = self.grammar.attributes_by_symbol.get(symbol.name)
                if collected is None:
                    continue

                for name, attribute in collected.items():
                    if not symbol.has(name):
                        # 每个实例需要自己的属性对象
                        symbol.attributes.add(name, attribute.clean_copy())
                symbol.attributes.sort()

    def _resolve_attribute_indexes_and_count_elements(self):
        """
        确定每条依赖两端的属性下标
        同时统计每个产生式中的结点数（符号数 + 属性数）
        """
        self.grammar.number_of_elements_per_rule = []

        for rule_index, production_rule in enumerate(self.grammar.production_rules):
            number_of_elements = 0

            for symbol in production_rule.symbols:
                number_of_elements += 1

                for attribute_index, attribute in enumerate(symbol.attributes.values()):
                    number_of_elements += 1

                    resolved = []
                    for dependency in attribute.dependencies.values():
                        to_symbol = production_rule.symbols[dependency.to_symbol_index]
                        to_attribute_index = to_symbol.attributes.index_of(dependency.to_attribute_name)

                        if to_attribute_index is None:
                            self.grammar.add_rule_error(
                                rule_index, '_resolve_attribute_indexes_and_count_elements()',
                                "这个函数中出现了意外的错误，请连同所用的文法一起报告。")
                            logger.error("产生式 %s 中找不到依赖 %s 的目标属性", production_rule, dependency)
                            resolved.append(dependency)
                            continue

                        resolved.append(dependency.resolved(attribute_index, to_attribute_index))

                    attribute.dependencies = {dependency.key: dependency for dependency in resolved}

            self.grammar.number_of_elements_per_rule.append(number_of_elements)

    def _compute_terminals(self):
        """
        非终结符是出现在某个产生式左部的符号，在解析产生式时已经确定，
        其余符号都是终结符
        """
        self.grammar.all_terminal_names = {
            name for name in self.grammar.all_symbol_names
            if name not in self.grammar.all_nonterminal_names
        }
