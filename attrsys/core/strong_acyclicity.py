"""
强无环性计算模块

对每个非终结符，在它的每个产生式中计算属性依赖的传递闭包，检测环，
并求出根投影（根符号属性之间由传递链蕴含的直接关系）。
非终结符的根投影会被“重新装饰”到它作为子符号出现的所有产生式中，
因此需要反复迭代，直到没有任何非终结符的关系集合再发生变化。
"""

import logging
from typing import Dict, List, Optional

from attrsys.core.dependency import AttributeCoordinate, Dependency, DependencyKey
from attrsys.core.grammar import Grammar, ProductionRule
from attrsys.core.iterations import Nonterminal, NonterminalIteration


logger = logging.getLogger('attrsys.acyclicity')


class StrongAcyclicityCalculator:
    """强无环性计算器"""

    def __init__(self, grammar: Grammar):
        """
        初始化计算器
        :param grammar: 已完成属性整理的文法
        """
        self.grammar = grammar
        self.strong_acyclicity = grammar.strong_acyclicity

    def calculate_all(self):
        """
        不动点迭代
        第0轮总是视为不稳定，以保证至少还有一轮；
        某一轮中所有非终结符都稳定时结束，最后这一轮就是最终结果
        关系的键只能取自有限的 (符号, 属性) 组合，所以迭代一定会终止
        """
        iteration_index = 0
        some_nonterminal_is_unstable = True

        while some_nonterminal_is_unstable:
            some_nonterminal_is_unstable = False
            self.strong_acyclicity.add_iteration()

            for nonterminal in self.strong_acyclicity.nonterminals.values():

                nonterminal.add_iteration()
                previous_iteration = nonterminal.get_previous_iteration(iteration_index)

                for production_rule in nonterminal.production_rules:
                    production_rule.add_iteration()
                    self._empty_redecorated_dependencies(production_rule)
                    self._redecorate(production_rule, iteration_index)
                    self._calculate_transitive_closure(production_rule, nonterminal, iteration_index)

                if self._nonterminal_is_unstable(nonterminal, iteration_index, previous_iteration):
                    some_nonterminal_is_unstable = True
                    self.strong_acyclicity.set_iteration_unstable(iteration_index)

            logger.debug("第 %d 轮迭代结束，%s", iteration_index,
                         "不稳定" if some_nonterminal_is_unstable else "稳定")
            iteration_index += 1

        logger.info("共 %d 轮迭代，文法%s强无环的", iteration_index,
                    "是" if self.strong_acyclicity.is_strongly_acyclic else "不是")

    def _empty_redecorated_dependencies(self, production_rule: ProductionRule):
        """上一轮重新装饰的依赖不能带到新的一轮"""
        for symbol in production_rule.symbols:
            for attribute in symbol.attributes.values():
                attribute.empty_redecorated_dependencies()

    def _redecorate(self, production_rule: ProductionRule, iteration_index: int):
        """
        把子非终结符上一轮的传递关系搬到它在本产生式中的位置
        终结符不会是产生式的左部，没有传递关系，直接跳过
        """
        iteration = production_rule.iterations[iteration_index]

        for symbol_index in range(1, production_rule.number_of_symbols()):
            symbol = production_rule.symbols[symbol_index]

            if not symbol.is_nonterminal(self.grammar.all_nonterminal_names):
                continue

            child = self.grammar.get_nonterminal(symbol.name)
            # 左部登记过、但产生式本身有错而被丢弃的非终结符没有迭代快照
            if child is None:
                continue
            previous_iteration = child.get_previous_iteration(iteration_index)

            for relation in previous_iteration.transitive_relations.values():
                redecorated = Dependency.redecorate_to(relation, symbol_index)
                source_attribute = symbol.attributes.get(relation.from_attribute_name)

                # 产生式中已经有这条依赖时不再重复添加
                if source_attribute.has_dependency(redecorated):
                    continue

                source_attribute.add_redecorated_dependency(redecorated)
                iteration.add_redecorated_relation(redecorated)

    def _calculate_transitive_closure(self, production_rule: ProductionRule,
                                      nonterminal: Nonterminal, iteration_index: int):
        """
        从每个属性出发做深度优先搜索（用栈，不用递归）
        回到出发属性说明有环；到达根符号的属性时沿父结点往回走，
        每遇到一个根符号的属性就得到一个根投影
        """
        iteration = production_rule.iterations[iteration_index]

        for symbol_index, symbol in enumerate(production_rule.symbols):
            for attribute in symbol.attributes.values():

                start = AttributeCoordinate(symbol_index, attribute.name)
                visited = set()
                # 对依赖 a -> b，把 a 记为 b 的父结点，以便沿搜索路径往回走
                parents: Dict[AttributeCoordinate, AttributeCoordinate] = {}
                dependency_stack: List[Dependency] = attribute.get_all_dependencies()

                while dependency_stack:
                    dependency = dependency_stack.pop()
                    target = dependency.target

                    # 回到了出发的属性
                    if target == start:
                        iteration.cycle_found = True
                        self.strong_acyclicity.is_strongly_acyclic = False
                        logger.debug("产生式 %s 中属性 %s 处于环上", production_rule, start)
                        break

                    if target in visited:
                        continue

                    visited.add(target)
                    parents[target] = dependency.source

                    target_attribute = production_rule.symbols[target.symbol_index].attributes.get(
                        target.attribute_name)
                    dependency_stack.extend(target_attribute.get_all_dependencies())

                    if target.is_at_root():
                        self._add_root_projections(production_rule, nonterminal, iteration_index,
                                                   target, parents)

    def _add_root_projections(self, production_rule: ProductionRule, nonterminal: Nonterminal,
                              iteration_index: int, target: AttributeCoordinate,
                              parents: Dict[AttributeCoordinate, AttributeCoordinate]):
        """沿搜索路径往回走，路径上每个根符号的属性都与 target 构成一个根投影"""
        root = production_rule.left_side()
        target_index = root.attributes.index_of(target.attribute_name)

        parent = parents.get(target)
        while parent is not None:
            if parent.is_at_root():
                projection = Dependency(parent.attribute_name, 0, root.attributes.index_of(parent.attribute_name),
                                        target.attribute_name, 0, target_index)
                production_rule.iterations[iteration_index].add_root_projection(projection)
                nonterminal.iterations[iteration_index].add_transitive_relation(projection)

            parent = parents.get(parent)

    def _nonterminal_is_unstable(self, nonterminal: Nonterminal, iteration_index: int,
                                 previous_iteration: NonterminalIteration) -> bool:
        """
        第0轮总是不稳定；之后比较本轮与上一轮传递关系的键集合
        """
        if iteration_index == 0:
            return True

        current_iteration = nonterminal.iterations[iteration_index]
        if current_iteration.relation_keys() == previous_iteration.relation_keys():
            current_iteration.is_stable = True
            return False
        return True

    def is_strongly_acyclic(self) -> bool:
        return self.strong_acyclicity.is_strongly_acyclic

    def get_transitive_relations(self, nonterminal_name: str,
                                 iteration_index: Optional[int] = None) -> Dict[DependencyKey, Dependency]:
        """
        获取非终结符在某一轮的传递关系
        :param nonterminal_name: 非终结符
        :param iteration_index: 轮次下标，默认为最后一轮
        """
        nonterminal = self.grammar.get_nonterminal(nonterminal_name)
        if nonterminal is None or not nonterminal.iterations:
            return {}
        if iteration_index is None:
            iteration_index = len(nonterminal.iterations) - 1
        return dict(nonterminal.iterations[iteration_index].transitive_relations)

    def get_root_projections(self, rule_index: int,
                             iteration_index: Optional[int] = None) -> Dict[DependencyKey, Dependency]:
        """
        获取产生式在某一轮的根投影
        :param rule_index: 产生式编号
        :param iteration_index: 轮次下标，默认为最后一轮
        """
        production_rule = self.grammar.production_rules[rule_index]
        if not production_rule.iterations:
            return {}
        if iteration_index is None:
            iteration_index = len(production_rule.iterations) - 1
        return dict(production_rule.iterations[iteration_index].root_projections)
