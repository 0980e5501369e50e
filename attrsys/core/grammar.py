"""
属性文法类定义模块
用于表示属性文法：产生式、符号、属性及属性之间的依赖
"""

from typing import Dict, List, Optional, Set

from attrsys.core.dependency import Dependency, DependencyKey
from attrsys.core.indexed_map import IndexedMap
from attrsys.core.iterations import Nonterminal, ProductionRuleIteration, StrongAcyclicity


class Attribute:
    """
    属性类

    属性之间的依赖只保存在源属性中：
    对依赖 a -> b，属性 a 保存这条依赖，属性 b 不保存。
    """

    def __init__(self, name: str, indirectly_identified: bool = False):
        """
        初始化属性
        :param name: 属性名
        :param indirectly_identified: 是否是在其他产生式中为同名符号声明、在这里补充的属性
        """
        self.name = name
        self.dependencies: Dict[DependencyKey, Dependency] = {}
        # 重新装饰得到的依赖，只在当前这一轮迭代中使用
        self.redecorated_dependencies: List[Dependency] = []
        self.indirectly_identified = indirectly_identified

    def add_dependency(self, dependency: Dependency):
        self.dependencies[dependency.key] = dependency

    def has_dependency(self, dependency: Dependency) -> bool:
        return dependency.key in self.dependencies

    def add_redecorated_dependency(self, dependency: Dependency):
        self.redecorated_dependencies.append(dependency)

    def empty_redecorated_dependencies(self):
        self.redecorated_dependencies.clear()

    def get_all_dependencies(self) -> List[Dependency]:
        """声明的依赖加上本轮重新装饰的依赖"""
        return list(self.dependencies.values()) + self.redecorated_dependencies

    def clean_copy(self) -> 'Attribute':
        """不带任何依赖的副本，标记为间接识别"""
        return Attribute(self.name, indirectly_identified=True)

    def __str__(self):
        if not self.dependencies:
            return self.name
        return self.name + '->{' + ', '.join(str(d) for d in self.dependencies.values()) + '}'

    def __repr__(self):
        return self.__str__()


class Symbol:
    """
    符号类
    符号可以是终结符或非终结符，每次出现在产生式中都是一个独立的实例，
    它的属性保存在按属性名排序的带下标映射中
    """

    def __init__(self, name: str):
        self.name = name
        self.attributes: IndexedMap[str, Attribute] = IndexedMap()

    def add_attribute(self, attribute: Attribute) -> Attribute:
        return self.add_attribute_and_dependency(attribute)

    def add_attribute_and_dependency(self, attribute: Attribute,
                                     dependency: Optional[Dependency] = None) -> Attribute:
        """
        添加属性（及依赖）
        同名属性已存在时合并到已有属性上，不会删除已有的依赖
        :return: 符号上实际保存的属性对象
        """
        existing = self.attributes.get(attribute.name)
        if existing is None:
            self.attributes.add(attribute.name, attribute)
            existing = attribute

        if dependency is not None:
            existing.add_dependency(dependency)
        return existing

    def has(self, attribute_name: str) -> bool:
        return self.attributes.has(attribute_name)

    def is_nonterminal(self, nonterminal_names: Set[str]) -> bool:
        return self.name in nonterminal_names

    def __str__(self):
        if len(self.attributes) == 0:
            return f"({self.name})"
        return f"({self.name}: {self.attributes})"

    def __repr__(self):
        return self.__str__()


class ProductionRule:
    """
    产生式类
    产生式是一个非终结符与一串符号之间的关系，例如 S -> S T a b
    符号按声明顺序从0开始编号，下标0是左部
    """

    def __init__(self, index: int = 0):
        """
        :param index: 产生式在文法中的编号
        """
        self.index = index
        self.symbols: List[Symbol] = []
        self.iterations: List[ProductionRuleIteration] = []

    def add_symbol(self, symbol: Symbol):
        self.symbols.append(symbol)

    @property
    def symbol_names(self) -> List[str]:
        return [symbol.name for symbol in self.symbols]

    def has(self, symbol_name: str) -> bool:
        return symbol_name in self.symbol_names

    def number_of_symbols(self) -> int:
        return len(self.symbols)

    def max_index(self) -> int:
        return self.number_of_symbols() - 1

    def empty_word_on_the_right(self) -> bool:
        """右部是否为空串（ε）"""
        return self.number_of_symbols() == 1

    def left_side(self) -> Symbol:
        return self.symbols[0]

    def right_side(self) -> List[Symbol]:
        return self.symbols[1:]

    def right_side_length(self) -> int:
        return len(self.right_side())

    def add_iteration(self) -> ProductionRuleIteration:
        iteration = ProductionRuleIteration()
        self.iterations.append(iteration)
        return iteration

    def attribute_at(self, symbol_index: int, attribute_index: int) -> Attribute:
        return self.symbols[symbol_index].attributes.get_at(attribute_index)

    def __str__(self):
        output = self.symbols[0].name + ' ->'
        if self.empty_word_on_the_right():
            return output + ' ε'
        return output + ' ' + ' '.join(symbol.name for symbol in self.right_side())

    def __repr__(self):
        return self.__str__()


class Grammar:
    """
    属性文法类
    由文法文本解析一次得到，保存练习所需的全部信息
    """

    FORBIDDEN_SYMBOLS = ('[', ']', ';', '=')

    def __init__(self):
        """初始化文法"""
        self.all_symbol_names: Set[str] = set()
        self.all_nonterminal_names: Set[str] = set()
        self.all_terminal_names: Set[str] = set()
        self.all_attribute_names: Set[str] = set()
        self.production_rules: List[ProductionRule] = []
        # 每个符号名在所有产生式中出现过的属性（不带依赖），由属性整理阶段计算
        self.attributes_by_symbol: Dict[str, IndexedMap[str, Attribute]] = {}
        self.number_of_elements_per_rule: List[int] = []
        self.errors: List[str] = []
        self.strong_acyclicity = StrongAcyclicity()

    @property
    def all_attribute_names_list(self) -> List[str]:
        return sorted(self.all_attribute_names)

    def add_production_rule(self, production_rule: ProductionRule):
        """
        添加产生式，并把它加入左部非终结符的产生式列表
        符号名在解析产生式两边时已经登记
        :param production_rule: 已成功解析的产生式
        """
        production_rule.index = len(self.production_rules)
        self.production_rules.append(production_rule)

        left_name = production_rule.left_side().name

        nonterminals = self.strong_acyclicity.nonterminals
        if not nonterminals.has(left_name):
            nonterminals.add(left_name, Nonterminal(left_name))
        nonterminals.get(left_name).production_rules.append(production_rule)

    def get_production_rules_for(self, nonterminal_name: str) -> List[ProductionRule]:
        """获取某个非终结符的所有产生式"""
        return [rule for rule in self.production_rules if rule.left_side().name == nonterminal_name]

    def get_nonterminal(self, name: str) -> Optional[Nonterminal]:
        return self.strong_acyclicity.nonterminals.get(name)

    def add_error(self, line_index: int, fragment: str, message: str):
        """
        记录文法文本中的错误
        :param line_index: 从0开始的行号，显示时加1
        :param fragment: 出错的文本片段
        :param message: 错误说明
        """
        self.errors.append(f"第 {line_index + 1} 行: '{fragment}'  {message}")

    def add_rule_error(self, rule_index: int, fragment: str, message: str):
        """记录内部错误（与某个产生式相关）"""
        self.errors.append(f"产生式 {rule_index + 1}: '{fragment}'  {message}")

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def __str__(self):
        result = "属性文法：\n"
        for rule in self.production_rules:
            result += f"  {rule}\n"
        return result
