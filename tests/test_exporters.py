import json

import pytest

from attrsys.core.grammar_parser import GrammarParser
from attrsys.utils.analysis_exporter import AnalysisExporter
from attrsys.utils.dependency_graph_exporter import DependencyGraphExporter


LECTURE_EXAMPLE = "\n".join([
    "S -> L : h[0] = h[1]; i[1] = j[1]; j[0] = j[1]; k[1] = h[1]; i[0] = 0; k[0] = 0",
    "L -> a : j[0] = k[0]; h[0] = 0; i[0] = 0",
    "L -> b : h[0] = i[0]; j[0] = 0; k[0] = 0",
])


@pytest.fixture
def lecture_grammar():
    return GrammarParser.parse_from_text(LECTURE_EXAMPLE)


def test_export_to_json(lecture_grammar):
    data = json.loads(AnalysisExporter(lecture_grammar).export_to_json())

    assert AnalysisExporter.validate_format(data)
    assert data["errors"] == []
    assert data["isStronglyAcyclic"] is False
    assert data["isIterationStable"] == [False, True]
    assert data["allNonterminalNames"] == ["L", "S"]
    assert data["allTerminalNames"] == ["a", "b"]
    assert data["allAttributeNames"] == ["h", "i", "j", "k"]
    assert [n["name"] for n in data["nonterminals"]] == ["S", "L"]
    assert data["nonterminals"][1]["productionRules"] == [1, 2]

    rule = data["productionRules"][0]
    assert rule["text"] == "S -> L"
    assert [iteration["cycleFound"] for iteration in rule["iterations"]] == [False, True]


def test_exported_dependencies_carry_indexes(lecture_grammar):
    data = AnalysisExporter(lecture_grammar).build_analysis_data()

    relations = data["nonterminals"][1]["iterations"][0]["transitiveRelations"]
    assert relations == [
        {
            "from": {"attributeName": "i", "symbolIndex": 0, "attributeIndex": 1},
            "to": {"attributeName": "h", "symbolIndex": 0, "attributeIndex": 0},
        },
        {
            "from": {"attributeName": "k", "symbolIndex": 0, "attributeIndex": 3},
            "to": {"attributeName": "j", "symbolIndex": 0, "attributeIndex": 2},
        },
    ]


def test_export_grammar_with_errors():
    grammar = GrammarParser.parse_from_text("S -> A : z[0] = z[1]\nA = a")
    data = AnalysisExporter(grammar).build_analysis_data()

    assert len(data["errors"]) == 1
    assert data["isIterationStable"] == []
    assert AnalysisExporter.validate_format(data)


@pytest.mark.parametrize("data", [
    [],
    {"errors": []},
    {"errors": [], "productionRules": [], "nonterminals": [],
     "isStronglyAcyclic": "yes", "isIterationStable": []},
    {"errors": [], "productionRules": [{"index": 0, "symbols": [], "iterations": [{}]}],
     "nonterminals": [], "isStronglyAcyclic": True, "isIterationStable": []},
])
def test_validate_format_rejects(data):
    assert not AnalysisExporter.validate_format(data)


def test_dependency_graph_with_redecoration(lecture_grammar):
    source = DependencyGraphExporter(lecture_grammar, 0, 1).to_dot()

    assert source.startswith("// S -> L")
    assert "digraph" in source
    assert "s1_h -> s0_h" in source
    assert "s1_k -> s1_j [color=orange style=dashed]" in source


def test_dependency_graph_without_iteration(lecture_grammar):
    source = DependencyGraphExporter(lecture_grammar, 0).to_dot()

    assert "s1_h -> s0_h" in source
    assert "orange" not in source


def test_dependency_graph_with_root_projections():
    grammar = GrammarParser.parse_from_text("S -> a : x[0] = y[0]; y[0] = x[0]")

    source = DependencyGraphExporter(grammar, 0, 0).to_dot()

    assert "style=dotted" in source
    assert "s1 [label=a shape=plaintext]" in source


def test_dependency_graph_unknown_iteration(lecture_grammar):
    with pytest.raises(IndexError):
        DependencyGraphExporter(lecture_grammar, 0, 5)
