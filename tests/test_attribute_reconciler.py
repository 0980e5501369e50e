from attrsys.core.attribute_reconciler import AttributeReconciler
from attrsys.core.dependency import Dependency
from attrsys.core.grammar import Attribute, Grammar, ProductionRule, Symbol
from attrsys.core.grammar_parser import GrammarParser


LECTURE_EXAMPLE = "\n".join([
    "S -> L : h[0] = h[1]; i[1] = j[1]; j[0] = j[1]; k[1] = h[1]; i[0] = 0; k[0] = 0",
    "L -> a : j[0] = k[0]; h[0] = 0; i[0] = 0",
    "L -> b : h[0] = i[0]; j[0] = 0; k[0] = 0",
])


def test_missing_attributes_are_merged():
    """在一个产生式中为 A 声明的属性，会补到所有出现 A 的地方"""
    grammar = GrammarParser.parse_from_text("S -> A : z[0] = z[1]\nA -> a : y[0] = 0")

    child = grammar.production_rules[0].symbols[1]
    assert child.attributes.keys() == ["y", "z"]
    assert child.attributes.get("y").indirectly_identified
    assert not child.attributes.get("z").indirectly_identified

    root = grammar.production_rules[1].left_side()
    assert root.attributes.keys() == ["y", "z"]
    assert not root.attributes.get("y").indirectly_identified
    assert root.attributes.get("z").indirectly_identified


def test_merged_attributes_are_separate_objects():
    grammar = GrammarParser.parse_from_text("S -> A A : z[0] = z[1]\nA -> a : y[0] = 0")

    rule = grammar.production_rules[0]
    assert rule.symbols[1].attributes.get("y") is not rule.symbols[2].attributes.get("y")
    assert rule.symbols[2].attributes.keys() == ["y", "z"]


def test_attributes_are_sorted_by_name():
    grammar = GrammarParser.parse_from_text("S -> a : z[0] = 1; b[0] = 2; m[0] = 3")

    assert grammar.production_rules[0].left_side().attributes.keys() == ["b", "m", "z"]


def test_attributes_by_symbol():
    grammar = GrammarParser.parse_from_text("S -> A : z[0] = z[1]\nA -> a : y[0] = 0")

    assert set(grammar.attributes_by_symbol["A"].keys()) == {"y", "z"}
    assert set(grammar.attributes_by_symbol["S"].keys()) == {"z"}
    assert grammar.attributes_by_symbol["a"].keys() == []
    for attribute in grammar.attributes_by_symbol["A"].values():
        assert attribute.dependencies == {}
        assert attribute.indirectly_identified


def test_attribute_indexes_are_resolved():
    grammar = GrammarParser.parse_from_text("S -> A : z[0] = z[1]\nA -> a : y[0] = 0")

    z = grammar.production_rules[0].symbols[1].attributes.get("z")
    [dependency] = z.dependencies.values()
    assert dependency.from_attribute_index == 1
    assert dependency.to_attribute_index == 0
    assert str(dependency) == "z_1[1] -> z_0[0]"


def test_every_dependency_is_resolved():
    grammar = GrammarParser.parse_from_text(LECTURE_EXAMPLE)

    assert grammar.errors == []
    for rule in grammar.production_rules:
        for symbol_index, symbol in enumerate(rule.symbols):
            for attribute_index, attribute in enumerate(symbol.attributes.values()):
                for dependency in attribute.dependencies.values():
                    assert dependency.is_resolved()
                    assert dependency.from_symbol_index == symbol_index
                    assert dependency.from_attribute_index == attribute_index
                    target = rule.attribute_at(dependency.to_symbol_index, dependency.to_attribute_index)
                    assert target.name == dependency.to_attribute_name


def test_number_of_elements_per_rule():
    grammar = GrammarParser.parse_from_text("S -> A : z[0] = z[1]\nA -> a : y[0] = 0")

    # S, z | A, y, z 以及 A, y, z | a
    assert grammar.number_of_elements_per_rule == [5, 4]


def test_terminals_can_carry_attributes():
    grammar = GrammarParser.parse_from_text("S -> a : x[0] = v[1]")

    assert grammar.all_terminal_names == {"a"}
    assert grammar.production_rules[0].symbols[1].attributes.keys() == ["v"]


def _rule(*symbol_names):
    rule = ProductionRule()
    for name in symbol_names:
        rule.add_symbol(Symbol(name))
    return rule


def test_missing_dependency_target_is_reported_and_other_rules_resolved():
    """依赖的目标属性不存在时记录带产生式编号的错误，其余产生式照常整理"""
    grammar = Grammar()
    grammar.all_symbol_names.update({"S", "T", "a", "b"})
    grammar.all_nonterminal_names.update({"S", "T"})

    broken = _rule("S", "a")
    broken.symbols[0].add_attribute_and_dependency(Attribute("x"), Dependency.unresolved("x", 0, "q", 1))
    grammar.add_production_rule(broken)

    healthy = _rule("T", "b")
    healthy.symbols[0].add_attribute(Attribute("y"))
    healthy.symbols[1].add_attribute_and_dependency(Attribute("v"), Dependency.unresolved("v", 1, "y", 0))
    grammar.add_production_rule(healthy)

    AttributeReconciler(grammar).reconcile()

    assert len(grammar.errors) == 1
    assert grammar.errors[0].startswith("产生式 1: ")

    [unresolved] = broken.symbols[0].attributes.get("x").dependencies.values()
    assert not unresolved.is_resolved()

    [dependency] = healthy.symbols[1].attributes.get("v").dependencies.values()
    assert dependency.is_resolved()
    assert dependency.to_attribute_index == 0
    assert grammar.number_of_elements_per_rule == [3, 4]
    assert grammar.all_terminal_names == {"a", "b"}
