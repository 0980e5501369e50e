"""
依赖图导出工具
把一个产生式在某一轮迭代中的依赖图导出为 Graphviz DOT 文本
"""

from typing import Optional

from graphviz import Digraph

from attrsys.core.grammar import Grammar, ProductionRule


class DependencyGraphExporter:
    """依赖图导出器"""

    def __init__(self, grammar: Grammar, rule_index: int, iteration_index: Optional[int] = None):
        """
        初始化导出器
        :param grammar: 文法对象
        :param rule_index: 产生式编号
        :param iteration_index: 轮次下标；为None时只导出局部依赖图（不含迭代结果）
        """
        self.grammar = grammar
        self.rule: ProductionRule = grammar.production_rules[rule_index]
        self.iteration_index = iteration_index

        if iteration_index is not None and not 0 <= iteration_index < len(self.rule.iterations):
            raise IndexError(f"产生式 {rule_index} 没有第 {iteration_index} 轮迭代")

    @staticmethod
    def _node_id(symbol_index: int, attribute_name: str) -> str:
        return f"s{symbol_index}_{attribute_name}"

    def build_digraph(self) -> Digraph:
        """
        构建图：每个符号一个子图，属性是其中的结点
        实线为声明的依赖，虚线为重新装饰的关系，点线为根投影
        """
        title = str(self.rule)
        if self.iteration_index is not None:
            title += f" (第 {self.iteration_index} 轮)"

        dot = Digraph(comment=title)
        dot.attr(rankdir='BT', label=title)
        dot.attr('node', fontname='Microsoft YaHei')
        dot.attr('edge', fontname='Microsoft YaHei')

        for symbol_index, symbol in enumerate(self.rule.symbols):
            with dot.subgraph(name=f"cluster_{symbol_index}") as cluster:
                cluster.attr(label=f"{symbol.name}[{symbol_index}]", style='rounded')
                # 没有属性的符号也要显示出来
                cluster.node(f"s{symbol_index}", symbol.name, shape='plaintext')
                for attribute in symbol.attributes.values():
                    cluster.node(
                        self._node_id(symbol_index, attribute.name),
                        attribute.name,
                        shape='ellipse',
                        style='dashed' if attribute.indirectly_identified else 'solid',
                    )

        for symbol_index, symbol in enumerate(self.rule.symbols):
            for attribute in symbol.attributes.values():
                for dependency in attribute.dependencies.values():
                    dot.edge(
                        self._node_id(dependency.from_symbol_index, dependency.from_attribute_name),
                        self._node_id(dependency.to_symbol_index, dependency.to_attribute_name),
                    )

        if self.iteration_index is not None:
            iteration = self.rule.iterations[self.iteration_index]

            for relation in iteration.redecorated_relations.values():
                dot.edge(
                    self._node_id(relation.from_symbol_index, relation.from_attribute_name),
                    self._node_id(relation.to_symbol_index, relation.to_attribute_name),
                    style='dashed', color='orange',
                )

            for projection in iteration.root_projections.values():
                dot.edge(
                    self._node_id(projection.from_symbol_index, projection.from_attribute_name),
                    self._node_id(projection.to_symbol_index, projection.to_attribute_name),
                    style='dotted', color='blue', constraint='false',
                )

        return dot

    def to_dot(self) -> str:
        """返回 DOT 源文本"""
        return self.build_digraph().source
