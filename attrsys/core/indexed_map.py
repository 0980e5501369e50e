"""
带下标的有序映射
用于保存符号的属性：既可以按名字查找，也可以按位置查找
"""

from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar


K = TypeVar('K')
V = TypeVar('V')


class IndexedMap(Generic[K, V]):
    """按插入顺序（或排序后的顺序）编号的映射"""

    def __init__(self):
        self._keys: List[K] = []
        self._map: Dict[K, V] = {}

    def add(self, key: K, value: V):
        """
        添加键值对，键已存在时只替换值，位置不变
        """
        if key not in self._map:
            self._keys.append(key)
        self._map[key] = value

    def has(self, key: K) -> bool:
        return key in self._map

    def get(self, key: K) -> Optional[V]:
        return self._map.get(key)

    def get_at(self, index: int) -> V:
        """按位置获取值"""
        return self._map[self._keys[index]]

    def index_of(self, key: K) -> Optional[int]:
        """
        获取键的位置
        :return: 下标，键不存在时返回None
        """
        try:
            return self._keys.index(key)
        except ValueError:
            return None

    def sort(self):
        """按键升序重新排列"""
        self._keys.sort()

    def keys(self) -> List[K]:
        return list(self._keys)

    def values(self) -> List[V]:
        return [self._map[key] for key in self._keys]

    def items(self) -> List[Tuple[K, V]]:
        return [(key, self._map[key]) for key in self._keys]

    def __len__(self):
        return len(self._keys)

    def __contains__(self, key):
        return key in self._map

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._keys))

    def __str__(self):
        return '[' + ', '.join(str(value) for value in self.values()) + ']'

    def __repr__(self):
        return self.__str__()
