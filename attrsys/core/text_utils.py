"""
文本处理模块
将属性文法文本拆分为行、单词，并扫描形如 name[index] 的属性引用
"""

from typing import List, Optional, Tuple


# 属性名允许的字符（与正则表达式中的 \w 一致，仅限 ASCII）
WORD_CHARACTERS = frozenset(
    'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_'
)
DIGITS = frozenset('0123456789')

RULE_SEPARATOR = ':'
ARROW = '->'
EQUATION_SEPARATOR = ';'
EQUALS_SIGN = '='


def text_is_empty(text: Optional[str]) -> bool:
    """判断文本是否为空（只包含空白字符）"""
    return text is None or text.strip() == ''


def replace_multiple_white_spaces_by_one(text: str) -> str:
    """将连续的空格和制表符替换为一个空格"""
    result = []
    in_white_space = False
    for char in text:
        if char in ' \t':
            if not in_white_space:
                result.append(' ')
            in_white_space = True
        else:
            result.append(char)
            in_white_space = False
    return ''.join(result)


def split_into_rows(text: str) -> List[str]:
    """
    将文法文本拆分为行
    空行也会保留，以便错误信息中的行号与输入一致
    :param text: 文法文本
    :return: 规范化后的行列表
    """
    normalized = replace_multiple_white_spaces_by_one(text)
    return [row.rstrip('\r') for row in normalized.split('\n')]


def split_into_words(text: str) -> List[str]:
    """
    按空格拆分单词
    注意：空文本返回 ['']，调用方据此判断是否缺少符号
    """
    return text.strip().split(' ')


def contains_any(text: str, substrings) -> bool:
    """判断文本是否包含任意一个子串"""
    return any(substring in text for substring in substrings)


def split_row(row: str) -> Tuple[str, Optional[str], bool]:
    """
    将一行拆分为产生式部分和属性方程部分
    :param row: 一行文法文本
    :return: (产生式文本, 属性方程文本或None, 分隔符是否多于一个)
             分隔符多于一个时只使用第一段作为产生式，且不解析属性方程
    """
    halves = row.split(RULE_SEPARATOR)
    too_many_separators = len(halves) > 2
    attributes_text = halves[1] if len(halves) == 2 else None
    return halves[0], attributes_text, too_many_separators


class AttributeReference:
    """属性引用，即方程中出现的 name[index]"""

    def __init__(self, name: str, symbol_index: int, start: int, end: int):
        """
        :param name: 属性名
        :param symbol_index: 符号在产生式中的下标
        :param start: 在文本中的起始位置
        :param end: 在文本中的结束位置（不含）
        """
        self.name = name
        self.symbol_index = symbol_index
        self.start = start
        self.end = end

    def __eq__(self, other):
        if not isinstance(other, AttributeReference):
            return False
        return self.name == other.name and self.symbol_index == other.symbol_index

    def __hash__(self):
        return hash((self.name, self.symbol_index))

    def __str__(self):
        return f"{self.name}[{self.symbol_index}]"

    def __repr__(self):
        return self.__str__()


class AttributeReferenceScanner:
    """
    属性引用扫描器
    从左到右扫描文本，识别 “一个或多个单词字符，紧跟方括号中的整数” 的模式。
    扫描结果之间互不重叠，与全局正则匹配的语义一致：
    属性名取 '[' 之前、上一次匹配结束之后的最长单词字符序列。
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.last_match_end = 0

    @staticmethod
    def scan_all(text: str) -> List[AttributeReference]:
        """
        找出文本中所有的属性引用
        :param text: 方程的一侧
        :return: 属性引用列表（按出现顺序）
        """
        scanner = AttributeReferenceScanner(text)
        references = []
        reference = scanner.next_reference()
        while reference is not None:
            references.append(reference)
            reference = scanner.next_reference()
        return references

    def next_reference(self) -> Optional[AttributeReference]:
        """
        返回下一个属性引用，没有更多引用时返回None
        """
        while self.position < len(self.text):
            if self.text[self.position] == '[':
                reference = self._try_reference_at_bracket()
                if reference is not None:
                    return reference
            self.position += 1
        return None

    def _try_reference_at_bracket(self) -> Optional[AttributeReference]:
        """尝试在当前的 '[' 处识别一个属性引用"""
        bracket = self.position
        name_start = self._word_start_before(bracket)
        if name_start == bracket:
            return None

        index_end = self._digits_end_after(bracket + 1)
        if index_end == bracket + 1:
            return None
        if index_end >= len(self.text) or self.text[index_end] != ']':
            return None

        name = self.text[name_start:bracket]
        symbol_index = int(self.text[bracket + 1:index_end])
        end = index_end + 1

        self.position = end
        self.last_match_end = end
        return AttributeReference(name, symbol_index, name_start, end)

    def _word_start_before(self, bracket: int) -> int:
        """向左查找单词字符序列的起点，不越过上一次匹配的结尾"""
        start = bracket
        while start > self.last_match_end and self.text[start - 1] in WORD_CHARACTERS:
            start -= 1
        return start

    def _digits_end_after(self, position: int) -> int:
        """向右查找数字序列的终点"""
        end = position
        while end < len(self.text) and self.text[end] in DIGITS:
            end += 1
        return end
