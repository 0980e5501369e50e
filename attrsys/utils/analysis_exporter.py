"""
分析结果导出工具
将文法及每一轮强无环性迭代的快照导出为JSON格式，供练习界面读取
"""

import json
from typing import Any, Dict, List

from attrsys.core.dependency import Dependency
from attrsys.core.grammar import Grammar, ProductionRule


class AnalysisExporter:
    """分析结果导出器"""

    def __init__(self, grammar: Grammar):
        """
        :param grammar: 文法对象（可以尚未计算强无环性）
        """
        self.grammar = grammar

    def export_to_json(self, indent: int = 2) -> str:
        """
        导出为JSON字符串
        :param indent: 缩进
        """
        return json.dumps(self.build_analysis_data(), indent=indent, ensure_ascii=False)

    def build_analysis_data(self) -> Dict[str, Any]:
        """
        构建导出的数据结构
        :return: 可直接序列化为JSON的字典
        """
        strong_acyclicity = self.grammar.strong_acyclicity
        return {
            "errors": list(self.grammar.errors),
            "allSymbolNames": sorted(self.grammar.all_symbol_names),
            "allNonterminalNames": sorted(self.grammar.all_nonterminal_names),
            "allTerminalNames": sorted(self.grammar.all_terminal_names),
            "allAttributeNames": self.grammar.all_attribute_names_list,
            "numberOfElementsPerRule": list(self.grammar.number_of_elements_per_rule),
            "productionRules": [self._build_rule_data(rule) for rule in self.grammar.production_rules],
            "nonterminals": [self._build_nonterminal_data(name) for name in strong_acyclicity.nonterminals],
            "isStronglyAcyclic": strong_acyclicity.is_strongly_acyclic,
            "isIterationStable": list(strong_acyclicity.is_iteration_stable),
        }

    def _build_rule_data(self, rule: ProductionRule) -> Dict[str, Any]:
        symbols = []
        for symbol in rule.symbols:
            attributes = []
            for attribute in symbol.attributes.values():
                attributes.append({
                    "name": attribute.name,
                    "indirectlyIdentified": attribute.indirectly_identified,
                    "dependencies": [self._dependency_data(d) for d in attribute.dependencies.values()],
                })
            symbols.append({"name": symbol.name, "attributes": attributes})

        iterations = []
        for iteration in rule.iterations:
            iterations.append({
                "cycleFound": iteration.cycle_found,
                "rootProjections": self._dependencies_data(iteration.root_projections),
                "redecoratedRelations": self._dependencies_data(iteration.redecorated_relations),
            })

        return {
            "index": rule.index,
            "text": str(rule),
            "symbols": symbols,
            "iterations": iterations,
        }

    def _build_nonterminal_data(self, name: str) -> Dict[str, Any]:
        nonterminal = self.grammar.get_nonterminal(name)
        return {
            "name": name,
            "productionRules": [rule.index for rule in nonterminal.production_rules],
            "iterations": [
                {
                    "isStable": iteration.is_stable,
                    "transitiveRelations": self._dependencies_data(iteration.transitive_relations),
                }
                for iteration in nonterminal.iterations
            ],
        }

    def _dependencies_data(self, dependencies: Dict) -> List[Dict[str, Any]]:
        # 按键排序，保证导出结果稳定
        return [self._dependency_data(dependencies[key]) for key in sorted(dependencies)]

    @staticmethod
    def _dependency_data(dependency: Dependency) -> Dict[str, Any]:
        return {
            "from": {
                "attributeName": dependency.from_attribute_name,
                "symbolIndex": dependency.from_symbol_index,
                "attributeIndex": dependency.from_attribute_index,
            },
            "to": {
                "attributeName": dependency.to_attribute_name,
                "symbolIndex": dependency.to_symbol_index,
                "attributeIndex": dependency.to_attribute_index,
            },
        }

    @staticmethod
    def validate_format(data: Dict[str, Any]) -> bool:
        """
        验证数据是否符合导出格式
        :param data: 待验证的数据
        :return: 是否符合规范
        """
        if not isinstance(data, dict):
            return False

        required_fields = ["errors", "productionRules", "nonterminals",
                           "isStronglyAcyclic", "isIterationStable"]
        if not all(field in data for field in required_fields):
            return False

        if not isinstance(data["isStronglyAcyclic"], bool):
            return False
        if not isinstance(data["isIterationStable"], list):
            return False

        number_of_iterations = len(data["isIterationStable"])

        for rule in data["productionRules"]:
            if not isinstance(rule, dict):
                return False
            if not all(field in rule for field in ["index", "symbols", "iterations"]):
                return False
            if len(rule["iterations"]) != number_of_iterations:
                return False

        for nonterminal in data["nonterminals"]:
            if not isinstance(nonterminal, dict):
                return False
            if "name" not in nonterminal or "iterations" not in nonterminal:
                return False
            if len(nonterminal["iterations"]) != number_of_iterations:
                return False

        return True
