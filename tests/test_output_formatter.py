from rich.console import Console

from attrsys.core.grammar_parser import GrammarParser
from attrsys.utils.output_formatter import OutputFormatter, format_relations


LECTURE_EXAMPLE = "\n".join([
    "S -> L : h[0] = h[1]; i[1] = j[1]; j[0] = j[1]; k[1] = h[1]; i[0] = 0; k[0] = 0",
    "L -> a : j[0] = k[0]; h[0] = 0; i[0] = 0",
    "L -> b : h[0] = i[0]; j[0] = 0; k[0] = 0",
])


def make_formatter():
    console = Console(record=True, width=200, color_system=None)
    return OutputFormatter(console), console


def test_format_relations():
    grammar = GrammarParser.parse_from_text(LECTURE_EXAMPLE)
    relations = grammar.get_nonterminal("L").iterations[0].transitive_relations

    assert format_relations(relations) == "(i,h), (k,j)"
    assert format_relations({}) == "∅"


def test_print_grammar():
    formatter, console = make_formatter()
    grammar = GrammarParser.parse_from_text(LECTURE_EXAMPLE)

    formatter.print_grammar(grammar)

    output = console.export_text()
    assert "属性文法信息" in output
    assert "S -> L" in output
    assert "L[1]: h, i, j, k" in output


def test_print_all_iterations():
    formatter, console = make_formatter()
    grammar = GrammarParser.parse_from_text(LECTURE_EXAMPLE)

    formatter.print_all_iterations(grammar)

    output = console.export_text()
    assert "第 0 轮迭代" in output
    assert "第 1 轮迭代" in output
    assert "(i,h), (k,j)" in output
    assert "k[1] → j[1]" in output


def test_print_result():
    formatter, console = make_formatter()

    formatter.print_strong_acyclicity_result(GrammarParser.parse_from_text(LECTURE_EXAMPLE))
    formatter.print_strong_acyclicity_result(GrammarParser.parse_from_text("S -> A : z[0] = z[1]\nA -> a : z[0] = 0"))

    output = console.export_text()
    assert "经过 2 轮迭代，该属性文法不是强无环的。" in output
    assert "经过 2 轮迭代，该属性文法是强无环的。" in output


def test_print_result_before_analysis():
    formatter, console = make_formatter()

    formatter.print_strong_acyclicity_result(GrammarParser.parse_from_text("S -> a", analyze=False))

    assert "尚未计算强无环性" in console.export_text()


def test_print_errors_keeps_brackets():
    formatter, console = make_formatter()
    grammar = GrammarParser.parse_from_text("S -> a[0]")

    formatter.print_errors(grammar.errors)

    output = console.export_text()
    assert "文法错误" in output
    assert "第 1 行:" in output
