"""Tests for the symbol extraction."""

import pytest

from ols.analysis.extractor import SymbolExtractor
from ols.analysis.extractor import extract_params
from ols.analysis.extractor import extract_return_type
from ols.analysis.extractor import find_class_body
from ols.analysis.extractor import infer_variable_type
from ols.analysis.symbols import FunctionSymbol
from ols.analysis.symbols import SourcePosition
from ols.analysis.symbols import SymbolTable
from ols.analysis.symbols import VariableSymbol

EXTRACTOR = SymbolExtractor()

CLASS_SOURCE = """类 Counter {
    var $count = 0
    public function increment($step) {
        $count = $count + $step
    }
    方法 reset() {
    }
}
function outside() {
}
"""


def test_end_to_end_example() -> None:
    """A function with one variable in its body."""

    table = EXTRACTOR.extract("function add(a, b) {\n  $sum = a + b\n}\n")

    assert table.functions == (
        FunctionSymbol(name="add", position=SourcePosition(line=0, column=0), params=("a", "b")),
    )
    assert table.variables == (VariableSymbol(name="sum", position=SourcePosition(line=1, column=2), type="mixed"),)
    assert not table.classes


@pytest.mark.parametrize(
    "source, name, column",
    [
        ("function foo() {}", "foo", 0),
        ("函数 打印名字() {}", None, 0),
        ("函数 greet(name) {}", "greet", 0),
        ("func main() {}", "main", 0),
        ("    function indented() {}", "indented", 4),
        ("\tfunction tabbed () {}", "tabbed", 1),
        ("function $dollar() {}", "$dollar", 0),
    ],
)
def test_function_shapes(source: str, name: str | None, column: int) -> None:
    """All function keywords are recognized; names are ASCII."""

    functions = EXTRACTOR.extract(source).functions
    if name is None:
        assert not functions
    else:
        assert [f.name for f in functions] == [name]
        assert functions[0].position == SourcePosition(line=0, column=column)


@pytest.mark.parametrize(
    "source",
    [
        "x = function foo() {}",
        "functionfoo() {}",
        "function foo {}",
        "// call function",
    ],
)
def test_not_functions(source: str) -> None:
    """Function keywords not at line start, without whitespace or without parenthesis do not count."""

    assert not EXTRACTOR.extract(source).functions


@pytest.mark.parametrize(
    "line, params",
    [
        ("function add(a, b) {", ("a", "b")),
        ("function none() {", ()),
        ("function spaced(  a ,b  ) {", ("a", "b")),
        ("function typed($a: int, $b = 1) {", ("$a: int", "$b = 1")),
        ("function broken) (", ()),
        ("function open(a", ()),
    ],
)
def test_extract_params(line: str, params: tuple[str, ...]) -> None:
    """Parameters are read between the first parentheses."""

    assert extract_params(line) == params


@pytest.mark.parametrize(
    "line, return_type",
    [
        ("function add(a, b): int {", "int"),
        ("function add(a, b) -> string {", "string"),
        ("function add(a, b) {", None),
        ("function add(a, b) { return x: y }", None),
    ],
)
def test_extract_return_type(line: str, return_type: str | None) -> None:
    """Return types directly follow the parameter list."""

    assert extract_return_type(line) == return_type


@pytest.mark.parametrize(
    "line, variable_type",
    [
        ('$s = "text"', "string"),
        ("$s = 'text'", "string"),
        ('$s = "1"', "string"),
        ("$a = [1, 2]", "array"),
        ("$a = array(1, 2)", "array"),
        ("$i = 42", "int"),
        ("$f = 3.14", "float"),
        ("$b = true", "bool"),
        ("$b = false", "bool"),
        ("$m = foo()", "mixed"),
        ("$m=1", "int"),
        ("var $x", "mixed"),
    ],
)
def test_infer_variable_type(line: str, variable_type: str) -> None:
    """The first matching heuristic determines the type."""

    assert infer_variable_type(line) == variable_type


@pytest.mark.parametrize(
    "source, name, column",
    [
        ("$x = 1", "x", 0),
        ("  $x: 1", "x", 2),
        ("var $x = 1", "x", 0),
        ("var $x", "x", 0),
        ("变量 $名字", None, 0),
        ("变量 $name", "name", 0),
        ("if (true) { var $inner }", "inner", 12),
    ],
)
def test_variable_shapes(source: str, name: str | None, column: int) -> None:
    """Assignments at line start and keyword declarations anywhere are variables."""

    variables = EXTRACTOR.extract(source).variables
    if name is None:
        assert not variables
    else:
        assert [v.name for v in variables] == [name]
        assert variables[0].position == SourcePosition(line=0, column=column)


@pytest.mark.parametrize("source", ["echo $x", "$x", "$x + 1", "print(var_x)"])
def test_not_variables(source: str) -> None:
    """Uses of a variable are not declarations."""

    assert not EXTRACTOR.extract(source).variables


def test_class_members() -> None:
    """Methods and fields come from inside the class braces only."""

    table = EXTRACTOR.extract(CLASS_SOURCE)

    assert len(table.classes) == 1
    counter = table.classes[0]
    assert counter.name == "Counter"
    assert counter.position == SourcePosition(line=0, column=0)

    assert [(m.name, m.params, m.position) for m in counter.methods] == [
        ("increment", ("$step",), SourcePosition(line=2, column=4)),
        ("reset", (), SourcePosition(line=5, column=4)),
    ]
    assert [(f.name, f.type, f.position.line) for f in counter.fields] == [
        ("count", "int", 1),
        ("count", "mixed", 3),
    ]

    # top level passes run over the whole text
    assert [f.name for f in table.functions] == ["outside"]


def test_class_without_body() -> None:
    """A class header without braces has no members."""

    table = EXTRACTOR.extract("class Empty\n$x = 1\n")

    assert table.classes[0].name == "Empty"
    assert not table.classes[0].methods
    assert not table.classes[0].fields


def test_unbalanced_class_runs_to_end() -> None:
    """A class body that never closes extends to the end of the document."""

    table = EXTRACTOR.extract("class Open {\n    function a() {\n    }\n    function b() {\n")

    assert [m.name for m in table.classes[0].methods] == ["a", "b"]


@pytest.mark.parametrize(
    "lines, body",
    [
        (["class A {", "}"], (0, 1)),
        (["class A", "{", "  x", "}"], (1, 3)),
        (["class A { }"], (0, 0)),
        (["class A {", "  if (x) {", "  }", "}", "}"], (0, 3)),
        (["class A {", "  x"], (0, 2)),
        (["class A"], None),
    ],
)
def test_find_class_body(lines: list[str], body: tuple[int, int] | None) -> None:
    """Class bodies close where the brace depth returns to zero."""

    assert find_class_body(lines, 0) == body


def test_multiple_classes() -> None:
    """Several classes each keep their own members, in textual order."""

    source = "class A {\n  function a() {}\n}\nclass B {\n  function b() {}\n}\n"
    classes = EXTRACTOR.extract(source).classes

    assert [c.name for c in classes] == ["A", "B"]
    assert [m.name for m in classes[0].methods] == ["a"]
    assert [m.name for m in classes[1].methods] == ["b"]


def test_textual_order() -> None:
    """Within each kind, symbols appear in the order they are written."""

    source = "function b() {}\n$y = 1\nfunction a() {}\n$x = 2\n"
    table = EXTRACTOR.extract(source)

    assert [f.name for f in table.functions] == ["b", "a"]
    assert [v.name for v in table.variables] == ["y", "x"]


def test_crlf_positions() -> None:
    """Windows line endings do not shift columns."""

    table = EXTRACTOR.extract("$a = 1\r\n  $b = 2\r\n")

    assert [v.position for v in table.variables] == [
        SourcePosition(line=0, column=0),
        SourcePosition(line=1, column=2),
    ]


@pytest.mark.parametrize("source", ["", "just some words", "}}}{{{", "function (", "$ = 1"])
def test_no_symbols(source: str) -> None:
    """Text matching nothing yields an empty table."""

    assert EXTRACTOR.extract(source) == SymbolTable()


def test_idempotent() -> None:
    """Extracting the same text twice yields equal tables."""

    assert EXTRACTOR.extract(CLASS_SOURCE) == EXTRACTOR.extract(CLASS_SOURCE)


def test_signature() -> None:
    """Signatures include the return type when there is one."""

    table = EXTRACTOR.extract("function add(a, b): int {\n}\nfunction log(msg) {\n}\n")

    assert [f.signature for f in table.functions] == ["function add(a, b): int", "function log(msg)"]
