"""Tests for symbol lookup under the cursor."""

import pytest

from ols.analysis.extractor import SymbolExtractor
from ols.analysis.symbols import SourcePosition
from ols.resolution.resolver import find_symbol
from ols.resolution.resolver import hover_text
from ols.resolution.resolver import resolve_definition
from ols.resolution.resolver import symbol_at

EXTRACTOR = SymbolExtractor()


@pytest.mark.parametrize(
    "text, line, character, name",
    [
        ("  $sum = a + b", 0, 2, "$sum"),
        ("  $sum = a + b", 0, 4, "$sum"),
        ("  $sum = a + b", 0, 6, "$sum"),  # directly after the token
        ("  $sum = a + b", 0, 0, ""),
        ("a + b", 0, 2, ""),  # between two non-identifier characters
        ("x = add(1)", 0, 4, "add"),
        ("x = add(1)", 0, 7, "add"),
        ("abc", 0, 3, ""),  # at end of line
        ("abc", 0, 10, ""),
        ("abc", 1, 0, ""),
        ("abc\n  foo", 1, 3, "foo"),
        ("obj->name", 0, 6, "name"),
    ],
)
def test_symbol_at(text: str, line: int, character: int, name: str) -> None:
    """The token enclosing the cursor is found by expanding over identifier characters."""

    assert symbol_at(text, line, character) == name


def test_priority_function_over_variable() -> None:
    """A function outranks a variable of the same name."""

    symbols = EXTRACTOR.extract("$x = 1\nfunction x() {}\n")

    assert resolve_definition(symbols, "x") == SourcePosition(line=1, column=0)


def test_priority_variable_over_class() -> None:
    """A variable outranks a class of the same name."""

    symbols = EXTRACTOR.extract("class Foo {}\n$Foo = 1\n")

    assert resolve_definition(symbols, "Foo") == SourcePosition(line=1, column=0)


def test_first_declaration_wins() -> None:
    """Within one kind, the first declaration is returned."""

    symbols = EXTRACTOR.extract("function f() {}\n  function f() {}\n")

    assert resolve_definition(symbols, "f") == SourcePosition(line=0, column=0)


def test_sigil_resolves_variable() -> None:
    """The token `$sum` finds the variable `sum`."""

    symbols = EXTRACTOR.extract("function add(a, b) {\n  $sum = a + b\n}\n")

    assert resolve_definition(symbols, "$sum") == SourcePosition(line=1, column=2)
    assert resolve_definition(symbols, "sum") == SourcePosition(line=1, column=2)


@pytest.mark.parametrize("name", ["", "missing", "ADD"])
def test_unresolved(name: str) -> None:
    """Unknown, empty or differently cased names resolve to nothing."""

    symbols = EXTRACTOR.extract("function add(a, b) {}\n")

    assert resolve_definition(symbols, name) is None
    assert find_symbol(symbols, name) is None


def test_class_members_are_not_top_level() -> None:
    """Methods are only reachable through their class."""

    symbols = EXTRACTOR.extract("class A {\n    public function run() {\n    }\n}\n")

    assert resolve_definition(symbols, "run") is None
    assert resolve_definition(symbols, "A") == SourcePosition(line=0, column=0)


def test_hover_text() -> None:
    """Hovers name the symbol, summarize it and give the 1-based line."""

    symbols = EXTRACTOR.extract("\nfunction add(a, b): int {}\n$s = 'x'\nclass C {}\n")

    assert hover_text("add", symbols.functions[0]) == "**add**\n\n`function add(a, b): int`\n\nDefined at line 2"
    assert hover_text("$s", symbols.variables[0]) == "**$s**\n\n`string variable`\n\nDefined at line 3"
    assert hover_text("C", symbols.classes[0]) == "**C**\n\n`class C`\n\nDefined at line 4"
