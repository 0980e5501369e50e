import json

import pytest

from attrsys.core.grammar_parser import GrammarParser
from attrsys.utils.grammar_library import (
    DEFAULT_GRAMMAR_TITLE,
    GrammarLibrary,
    GrammarLibraryError,
)


def test_bundled_library():
    library = GrammarLibrary.load_from_file()

    assert len(library) == 6
    assert library.titles()[0] == DEFAULT_GRAMMAR_TITLE


def test_bundled_grammars_parse_without_errors():
    library = GrammarLibrary.load_from_file()

    for entry in library.entries:
        grammar = GrammarParser.parse_from_text(entry.text)
        assert grammar.errors == [], entry.title
        assert grammar.strong_acyclicity.number_of_iterations() >= 2


def test_bundled_verdicts():
    library = GrammarLibrary.load_from_file()

    verdicts = [GrammarParser.parse_from_text(entry.text).strong_acyclicity.is_strongly_acyclic
                for entry in library.entries]
    assert verdicts == [False, True, True, False, False, True]


def test_entry_text_joins_rules():
    library = GrammarLibrary.from_data([{"title": "t", "productionRules": ["S -> a", "S -> b"]}])

    assert library.get(0).text == "S -> a\nS -> b"


@pytest.mark.parametrize("data,message", [
    ({"title": "t"}, "顶层必须是数组"),
    ([], "没有提供任何属性文法"),
    ([{"productionRules": []}], "缺少标题"),
    ([{"title": "t"}], "缺少产生式"),
    ([{"title": "t", "productionRules": "S -> a"}], "必须是数组"),
])
def test_from_data_errors(data, message):
    with pytest.raises(GrammarLibraryError, match=message):
        GrammarLibrary.from_data(data)


def test_load_from_file(tmp_path):
    path = tmp_path / "grammars.json"
    path.write_text(json.dumps([{"title": "一个", "productionRules": ["S -> a"]}], ensure_ascii=False),
                    encoding="utf-8")

    library = GrammarLibrary.load_from_file(str(path))

    assert library.titles() == ["一个"]


def test_load_invalid_json(tmp_path):
    path = tmp_path / "grammars.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(GrammarLibraryError):
        GrammarLibrary.load_from_file(str(path))


def test_load_or_default_falls_back(tmp_path, caplog):
    library = GrammarLibrary.load_or_default(str(tmp_path / "missing.json"))

    assert library.titles() == [DEFAULT_GRAMMAR_TITLE]
    assert any(record.name == "attrsys.library" for record in caplog.records)
