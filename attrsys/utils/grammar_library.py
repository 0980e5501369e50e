"""
属性文法示例库
读取形如 [{"title": ..., "productionRules": [...]}] 的JSON文件
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional


logger = logging.getLogger('attrsys.library')

DEFAULT_LIBRARY_PATH = Path(__file__).resolve().parent.parent / 'resources' / 'attribute_grammars.json'

# 示例库无法读取时使用的文法
DEFAULT_GRAMMAR_TITLE = '编译原理课程讲义中的例子'
DEFAULT_GRAMMAR_PRODUCTION_RULES = [
    'S -> L : h[0] = h[1]; i[1] = j[1]; j[0] = j[1]; k[1] = h[1]; i[0] = 0; k[0] = 0',
    'L -> a : j[0] = k[0]; h[0] = 0; i[0] = 0',
    'L -> b : h[0] = i[0]; j[0] = 0; k[0] = 0',
]


class GrammarLibraryError(ValueError):
    """示例库文件格式错误"""


class GrammarEntry:
    """示例库中的一个文法"""

    def __init__(self, title: str, production_rules: List[str]):
        self.title = title
        self.production_rules = production_rules

    @property
    def text(self) -> str:
        """拼接成文法文本，每行一个产生式"""
        return '\n'.join(self.production_rules)

    def __str__(self):
        return self.title

    def __repr__(self):
        return f"GrammarEntry({self.title!r})"


class GrammarLibrary:
    """属性文法示例库"""

    def __init__(self, entries: List[GrammarEntry]):
        self.entries = entries

    @staticmethod
    def load_from_file(filepath: Optional[str] = None) -> 'GrammarLibrary':
        """
        从JSON文件加载示例库
        :param filepath: 文件路径，默认使用包内自带的示例库
        """
        path = Path(filepath) if filepath is not None else DEFAULT_LIBRARY_PATH
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise GrammarLibraryError(f"JSON文件格式错误: {e}") from e

        library = GrammarLibrary.from_data(data)
        logger.debug("从 %s 加载了 %d 个文法", path, len(library.entries))
        return library

    @staticmethod
    def load_or_default(filepath: Optional[str] = None) -> 'GrammarLibrary':
        """
        加载示例库；文件无法读取或格式错误时只返回默认文法
        """
        try:
            return GrammarLibrary.load_from_file(filepath)
        except (OSError, GrammarLibraryError) as e:
            logger.warning("无法加载示例库，使用默认文法: %s", e)
            return GrammarLibrary.default()

    @staticmethod
    def default() -> 'GrammarLibrary':
        return GrammarLibrary([GrammarEntry(DEFAULT_GRAMMAR_TITLE, list(DEFAULT_GRAMMAR_PRODUCTION_RULES))])

    @staticmethod
    def from_data(data: Any) -> 'GrammarLibrary':
        """
        检查数据格式并创建示例库
        :param data: json.load 的结果
        """
        if not isinstance(data, list):
            raise GrammarLibraryError("JSON文件的顶层必须是数组。")
        if len(data) == 0:
            raise GrammarLibraryError("没有提供任何属性文法。")

        entries = []
        for index, item in enumerate(data):
            if not isinstance(item, dict) or 'title' not in item:
                raise GrammarLibraryError(f"第 {index + 1} 个文法缺少标题 'title'。")
            if 'productionRules' not in item:
                raise GrammarLibraryError(f"第 {index + 1} 个文法缺少产生式 'productionRules'。")
            if not isinstance(item['productionRules'], list):
                raise GrammarLibraryError(f"第 {index + 1} 个文法的产生式必须是数组。")

            entries.append(GrammarEntry(str(item['title']), [str(rule) for rule in item['productionRules']]))

        return GrammarLibrary(entries)

    def titles(self) -> List[str]:
        return [entry.title for entry in self.entries]

    def get(self, index: int) -> GrammarEntry:
        return self.entries[index]

    def __len__(self):
        return len(self.entries)
