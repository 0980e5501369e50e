"""
依赖关系模块
依赖是同一个产生式中两个属性之间的有向边（“由……计算得到”）
属性通过坐标（符号下标 + 属性名）引用，而不是直接引用属性对象
"""

from typing import Optional, Tuple


class AttributeCoordinate:
    """
    属性坐标
    在一个产生式中唯一确定一个属性：(符号下标, 属性名)
    """

    def __init__(self, symbol_index: int, attribute_name: str):
        self.symbol_index = symbol_index
        self.attribute_name = attribute_name

    def is_at_root(self) -> bool:
        """判断属性是否属于产生式的左部（下标0）"""
        return self.symbol_index == 0

    def __eq__(self, other):
        if not isinstance(other, AttributeCoordinate):
            return False
        return (self.symbol_index == other.symbol_index and
                self.attribute_name == other.attribute_name)

    def __hash__(self):
        return hash((self.symbol_index, self.attribute_name))

    def __lt__(self, other: 'AttributeCoordinate'):
        return (self.symbol_index, self.attribute_name) < (other.symbol_index, other.attribute_name)

    def __str__(self):
        return f"{self.attribute_name}[{self.symbol_index}]"

    def __repr__(self):
        return self.__str__()


# 依赖的键：(源坐标, 目标坐标)
DependencyKey = Tuple[AttributeCoordinate, AttributeCoordinate]


class Dependency:
    """
    依赖类

    对依赖 a -> b，只在源属性 a 中保存。两端各保存：
    - 属性名
    - 符号在产生式中的下标
    - 属性在该符号（排序后）属性映射中的下标

    属性下标要等到所有属性都已知并排序后才能确定，
    因此依赖分两个阶段：先由解析器创建未解析的依赖，再由属性整理阶段解析下标。
    例如 S -> T a 中 T 的属性为 [a, b, c, d]，依赖 z[0] -> c[1] 的目标下标为 2。
    """

    def __init__(self, from_attribute_name: str, from_symbol_index: int, from_attribute_index: Optional[int],
                 to_attribute_name: str, to_symbol_index: int, to_attribute_index: Optional[int]):
        self.from_attribute_name = from_attribute_name
        self.from_symbol_index = from_symbol_index
        self.from_attribute_index = from_attribute_index
        self.to_attribute_name = to_attribute_name
        self.to_symbol_index = to_symbol_index
        self.to_attribute_index = to_attribute_index

    @classmethod
    def unresolved(cls, from_attribute_name: str, from_symbol_index: int,
                   to_attribute_name: str, to_symbol_index: int) -> 'Dependency':
        """创建属性下标尚未确定的依赖"""
        return cls(from_attribute_name, from_symbol_index, None,
                   to_attribute_name, to_symbol_index, None)

    @classmethod
    def redecorate_to(cls, relation: 'Dependency', new_symbol_index: int) -> 'Dependency':
        """
        重新装饰：把非终结符自身的根投影关系搬到它作为子符号出现的位置
        两端保留属性名和属性下标，符号下标都换成新的下标
        :param relation: 非终结符的传递关系（两端都在下标0）
        :param new_symbol_index: 该非终结符在当前产生式中的下标
        """
        return cls(relation.from_attribute_name, new_symbol_index, relation.from_attribute_index,
                   relation.to_attribute_name, new_symbol_index, relation.to_attribute_index)

    def resolved(self, from_attribute_index: int, to_attribute_index: int) -> 'Dependency':
        """返回确定了属性下标的依赖"""
        return Dependency(self.from_attribute_name, self.from_symbol_index, from_attribute_index,
                          self.to_attribute_name, self.to_symbol_index, to_attribute_index)

    def is_resolved(self) -> bool:
        return self.from_attribute_index is not None and self.to_attribute_index is not None

    @property
    def source(self) -> AttributeCoordinate:
        return AttributeCoordinate(self.from_symbol_index, self.from_attribute_name)

    @property
    def target(self) -> AttributeCoordinate:
        return AttributeCoordinate(self.to_symbol_index, self.to_attribute_name)

    @property
    def key(self) -> DependencyKey:
        """依赖的键，用于去重以及比较不同迭代之间的关系集合"""
        return self.source, self.target

    def to_relation_string(self) -> str:
        """以 (from,to) 的形式表示关系"""
        return f"({self.from_attribute_name},{self.to_attribute_name})"

    def __eq__(self, other):
        if not isinstance(other, Dependency):
            return False
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __str__(self):
        return (f"{self.from_attribute_name}_{self.from_attribute_index}[{self.from_symbol_index}]"
                f" -> {self.to_attribute_name}_{self.to_attribute_index}[{self.to_symbol_index}]")

    def __repr__(self):
        return self.__str__()
