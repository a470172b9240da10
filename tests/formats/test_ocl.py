"""
Tests for the constraint language tokenizer, parser and printer.

Run with:
    pytest tests/formats/test_ocl.py -v
"""

import pytest

from ecore_dl.core.exceptions import ConstraintError, ConstraintSyntaxError, UnsupportedConstraintError
from ecore_dl.formats.ocl import (
    CollectionLiteralExp,
    ConstraintParser,
    IteratorExp,
    LiteralExp,
    OperationCallExp,
    PropertyCallExp,
    TypeExp,
    VariableExp,
    print_expression,
)
from ecore_dl.formats.ocl.ast import expression_depth, free_variables, substitute
from ecore_dl.formats.ocl.lexer import quote, tokenize, unquote

SELF = VariableExp("self")


def parse(text):
    return ConstraintParser().parse(text)


# =============================================================================
# TOKENIZER
# =============================================================================

@pytest.mark.unit
class TestTokenizer:

    def test_symbols_and_names(self):
        tokens = tokenize("self.items->size() >= 1")
        assert [t.value for t in tokens] == ["self", ".", "items", "->", "size", "(", ")", ">=", "1", ""]

    def test_comment_is_skipped(self):
        tokens = tokenize("self.a -- trailing note")
        assert [t.value for t in tokens] == ["self", ".", "a", ""]

    def test_positions(self):
        tokens = tokenize("not  x")
        assert [t.position for t in tokens] == [0, 5, 6]

    def test_unexpected_character(self):
        with pytest.raises(ConstraintSyntaxError) as exc_info:
            tokenize("self.a # 1")
        assert exc_info.value.position == 7

    def test_quote_round_trip(self):
        value = "it's a\ttab"
        assert unquote(quote(value)) == value


# =============================================================================
# PARSER
# =============================================================================

@pytest.mark.unit
class TestParser:

    def test_navigation_and_arrow_call(self):
        assert parse("self.items->isEmpty()") == OperationCallExp(
            PropertyCallExp(SELF, "items"), "isEmpty", (), arrow=True
        )

    def test_implicit_self(self):
        assert parse("items->notEmpty()") == parse("self.items->notEmpty()")

    def test_iterator_with_variable(self):
        tree = parse("self.children->forAll(c | c.active)")
        assert tree == IteratorExp(
            PropertyCallExp(SELF, "children"), "forAll", "c", PropertyCallExp(VariableExp("c"), "active")
        )

    def test_iterator_with_typed_variable(self):
        tree = parse("self.items->select(i : shop::Item | i.active)")
        assert tree.variable == "i"
        assert tree.variable_type == "shop::Item"

    def test_implicit_iterator_variable(self):
        tree = parse("self.items->forAll(active)")
        assert tree.variable == "temp1"
        assert tree.body == PropertyCallExp(VariableExp("temp1"), "active")

    def test_nested_implicit_variables(self):
        tree = parse("self.children->exists(children->exists(active))")
        inner = tree.body
        assert tree.variable == "temp1"
        assert inner.source == PropertyCallExp(VariableExp("temp1"), "children")
        assert inner.variable == "temp2"
        assert inner.body == PropertyCallExp(VariableExp("temp2"), "active")

    def test_bound_variable_is_not_navigated_from_self(self):
        tree = parse("self.items->forAll(i | i.active and active)")
        assert tree.body == OperationCallExp(
            PropertyCallExp(VariableExp("i"), "active"), "and", (PropertyCallExp(SELF, "active"),)
        )

    def test_precedence(self):
        a, b, c = (PropertyCallExp(SELF, n) for n in "abc")
        assert parse("a and b or c") == OperationCallExp(OperationCallExp(a, "and", (b,)), "or", (c,))
        assert parse("a or b and c") == OperationCallExp(a, "or", (OperationCallExp(b, "and", (c,)),))
        assert parse("not a and b") == OperationCallExp(OperationCallExp(a, "not"), "and", (b,))

    def test_binary_operators_associate_left(self):
        a, b, c = (PropertyCallExp(SELF, n) for n in "abc")
        assert parse("a implies b implies c") == OperationCallExp(
            OperationCallExp(a, "implies", (b,)), "implies", (c,)
        )

    def test_literals(self):
        assert parse("true") == LiteralExp(True)
        assert parse("42") == LiteralExp(42)
        assert parse("2.5") == LiteralExp(2.5)
        assert parse("'open'") == LiteralExp("open")
        assert parse("null") == LiteralExp(None)

    def test_boolean_and_integer_literals_differ(self):
        assert LiteralExp(True) != LiteralExp(1)
        assert LiteralExp(True).type_name == "Boolean"
        assert LiteralExp(1).type_name == "Integer"

    def test_type_argument(self):
        tree = parse("self.oclIsKindOf(shop::Item)")
        assert tree.arguments == (TypeExp("shop::Item"),)
        assert tree.arguments[0].simple_name == "Item"

    def test_enumeration_literal_path(self):
        tree = parse("self.status = Status::OPEN")
        assert tree.arguments == (TypeExp("Status::OPEN"),)

    def test_collection_literal(self):
        assert parse("Set{true}") == CollectionLiteralExp("Set", (LiteralExp(True),))

    def test_operation_arguments(self):
        tree = parse("self.between(1, 2)")
        assert tree == OperationCallExp(SELF, "between", (LiteralExp(1), LiteralExp(2)))

    @pytest.mark.parametrize("text", [
        "",
        "self.items->",
        "self.items->isEmpty(",
        "(self.a",
        "and self.a",
        "self.a self.b",
        "if self.a then true else false endif",
        "let x = 1 in x",
        "self.items->forAll(a, b | a = b)",
    ])
    def test_syntax_errors(self, text):
        with pytest.raises(ConstraintSyntaxError) as exc_info:
            parse(text)
        assert exc_info.value.position is not None
        assert isinstance(exc_info.value, ConstraintError)

    def test_depth_limit(self):
        with pytest.raises(ConstraintSyntaxError, match="nested too deeply"):
            ConstraintParser(max_depth=5).parse("((((((((self.a))))))))")

    @pytest.mark.parametrize("text", [
        " and ".join(["self.a"] * 20),
        "self" + ".children" * 30 + "->notEmpty()",
    ])
    def test_tree_depth_limit(self, text):
        with pytest.raises(UnsupportedConstraintError, match="levels deep") as exc_info:
            ConstraintParser(max_tree_depth=10).parse(text)
        assert exc_info.value.expression == text

    def test_long_chain_within_default_limit(self):
        tree = parse(" and ".join(["self.a"] * 50))
        assert expression_depth(tree) == 51

    def test_parser_is_reusable(self):
        parser = ConstraintParser()
        first = parser.parse("self.items->forAll(active)")
        second = parser.parse("self.items->forAll(active)")
        assert first == second


# =============================================================================
# PRINTER
# =============================================================================

@pytest.mark.unit
class TestPrinter:

    @pytest.mark.parametrize("text", [
        "self.items->isEmpty()",
        "self.children->select(c | not c.active)->isEmpty()",
        "self.items->select(i : Item | i.active and not i.active)->notEmpty()",
        "self.a implies self.b or self.c",
        "not (self.a and self.b)",
        "self.a - (self.b - self.c)",
        "-(-1)",
        "self.name = 'it\\'s'",
        "self.oclIsTypeOf(shop::Item)",
        "Set{true, false}",
        "self.total >= 2.5",
    ])
    def test_normalized_text_is_stable(self, text):
        assert print_expression(parse(text)) == text

    def test_redundant_parentheses_are_dropped(self):
        assert print_expression(parse("((self.a) and (self.b))")) == "self.a and self.b"

    def test_implicit_forms_are_made_explicit(self):
        assert print_expression(parse("items->forAll(active)")) == "self.items->forAll(temp1 | temp1.active)"

    def test_printed_text_parses_to_equal_tree(self):
        tree = parse("self.children->exists(c | c.children->forAll(d | d.active or not (d.active)))")
        assert parse(print_expression(tree)) == tree

    def test_not_of_navigation_has_no_parentheses(self):
        assert print_expression(OperationCallExp(PropertyCallExp(VariableExp("c"), "active"), "not")) == "not c.active"


# =============================================================================
# TREE HELPERS
# =============================================================================

@pytest.mark.unit
class TestTreeHelpers:

    def test_free_variables(self):
        assert free_variables(parse("self.items->select(i | i.active)")) == {"self"}
        tree = IteratorExp(VariableExp("x"), "select", "i", PropertyCallExp(VariableExp("i"), "active"))
        assert free_variables(tree) == {"x"}

    def test_substitute_respects_binding(self):
        c = VariableExp("c")
        tree = IteratorExp(PropertyCallExp(c, "items"), "select", "c", PropertyCallExp(c, "active"))
        replaced = substitute(tree, "c", VariableExp("d"))
        assert replaced.source == PropertyCallExp(VariableExp("d"), "items")
        assert replaced.body == PropertyCallExp(c, "active")

    def test_expression_depth(self):
        assert expression_depth(SELF) == 1
        assert expression_depth(parse("self.items->notEmpty()")) == 3
        assert expression_depth(parse("self.a and self.b.c")) == 4
