"""
强无环性迭代快照模块
每一轮不动点迭代为每个非终结符、每个产生式保存一份快照，供练习界面只读查询
"""

from typing import Dict, List, Optional

from attrsys.core.dependency import Dependency, DependencyKey
from attrsys.core.indexed_map import IndexedMap


class NonterminalIteration:
    """非终结符在一轮迭代中的状态"""

    def __init__(self):
        self.is_stable = False
        # 本轮找到的传递关系（根到根的关系）
        self.transitive_relations: Dict[DependencyKey, Dependency] = {}

    def add_transitive_relation(self, relation: Dependency):
        self.transitive_relations[relation.key] = relation

    def relation_keys(self):
        return set(self.transitive_relations.keys())

    def transitive_relations_string(self) -> str:
        """
        传递关系的规范字符串，例如 "(a,b),(b,c)"
        学生的答案会被规范化成同样的形式后再比较
        """
        relations = sorted(relation.to_relation_string()
                           for relation in self.transitive_relations.values())
        return ','.join(relations)


# 第0轮的“上一轮”：没有任何传递关系
EMPTY_NONTERMINAL_ITERATION = NonterminalIteration()


class ProductionRuleIteration:
    """产生式在一轮迭代中的状态"""

    def __init__(self):
        self.cycle_found = False
        # 本轮发现的根投影（两端都在下标0的符号上）
        self.root_projections: Dict[DependencyKey, Dependency] = {}
        # 本轮重新装饰到子非终结符上的关系
        self.redecorated_relations: Dict[DependencyKey, Dependency] = {}

    def add_root_projection(self, projection: Dependency):
        self.root_projections[projection.key] = projection

    def add_redecorated_relation(self, relation: Dependency):
        self.redecorated_relations[relation.key] = relation


class Nonterminal:
    """非终结符：名字、以它为左部的产生式，以及每一轮的迭代快照"""

    def __init__(self, name: str):
        self.name = name
        self.production_rules: List = []
        self.iterations: List[NonterminalIteration] = []

    def add_iteration(self) -> NonterminalIteration:
        iteration = NonterminalIteration()
        self.iterations.append(iteration)
        return iteration

    def get_previous_iteration(self, current_iteration_index: int) -> NonterminalIteration:
        """
        获取“本轮更新之前”的迭代快照，无论本轮是否已经处理过这个非终结符

        每一轮按顺序遍历所有非终结符，先追加本轮快照再计算：
        - 情况1：第0轮没有上一轮，返回空快照
        - 情况2：重新装饰时需要查询子非终结符B的上一轮关系，而B在本轮还没有被处理，
                 此时快照数量等于当前轮次下标，上一轮就是最后一个快照
        - 情况3：本轮已经追加了快照，快照数量为当前轮次下标+1，上一轮是倒数第二个快照
        :param current_iteration_index: 正在计算的轮次下标
        """
        if current_iteration_index < 0:
            raise ValueError(f"迭代下标不能为负数: {current_iteration_index}")

        # 情况1
        if current_iteration_index == 0:
            return EMPTY_NONTERMINAL_ITERATION

        # 情况2
        if len(self.iterations) == current_iteration_index:
            return self.iterations[-1]

        # 情况3
        if len(self.iterations) == current_iteration_index + 1:
            return self.iterations[-2]

        raise ValueError(
            f"非终结符 {self.name} 有 {len(self.iterations)} 个迭代快照，"
            f"无法确定第 {current_iteration_index} 轮的上一轮"
        )

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Nonterminal({self.name!r})"


class StrongAcyclicity:
    """强无环性计算的整体结果"""

    def __init__(self):
        # 按第一次作为产生式左部出现的顺序编号
        self.nonterminals: IndexedMap[str, Nonterminal] = IndexedMap()
        self.is_strongly_acyclic = True
        self.is_iteration_stable: List[bool] = []

    def add_iteration(self):
        """追加一轮，默认稳定，发现不稳定的非终结符后再改为不稳定"""
        self.is_iteration_stable.append(True)

    def set_iteration_unstable(self, iteration_index: int):
        self.is_iteration_stable[iteration_index] = False

    def iteration_is_unstable(self, iteration_index: int) -> bool:
        return not self.is_iteration_stable[iteration_index]

    def number_of_iterations(self) -> int:
        return len(self.is_iteration_stable)

    def final_iteration_index(self) -> Optional[int]:
        """最后一轮（全局稳定的那一轮）的下标，尚未计算时返回None"""
        if not self.is_iteration_stable:
            return None
        return len(self.is_iteration_stable) - 1
