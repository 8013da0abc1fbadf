"""
Pattern based extraction of declarations from Origami source text.

There is no grammar: each declaration kind is recognized by a fixed regular expression, and everything else about a
declaration (parameters, variable type, class members) is read off the declaring line(s) with simple heuristics.

Known limitations:
- Nested classes are not supported, brace counting assumes non-nested class bodies.
- Unbalanced braces keep a class body open until the end of the document.
- Braces inside strings and comments are counted like any other brace.
"""

import re

from ols.logger import OLS_LOGGER

from .position import offset_to_position
from .position import split_lines
from .symbols import ClassSymbol
from .symbols import FunctionSymbol
from .symbols import SourcePosition
from .symbols import SymbolTable
from .symbols import VariableSymbol

log = OLS_LOGGER.getChild(__name__)

NAME = r"[a-zA-Z_$][a-zA-Z0-9_$]*"
VARIABLE_NAME = r"[a-zA-Z_][a-zA-Z0-9_]*"

# Every pattern names the declaration itself "decl"; leading indentation is matched but not part of the position.
FUNCTION_PATTERN = re.compile(rf"^[ \t]*(?P<decl>(?:function|函数|func)\s+(?P<name>{NAME})\s*\()", re.MULTILINE)
VARIABLE_PATTERN = re.compile(
    rf"^[ \t]*(?P<decl>(?:var\s+)?\$(?P<name>{VARIABLE_NAME})\s*[=:])"
    rf"|(?P<kwdecl>(?:变量|var)\s+\$(?P<kwname>{VARIABLE_NAME}))",
    re.MULTILINE,
)
CLASS_PATTERN = re.compile(rf"^[ \t]*(?P<decl>(?:class|类)\s+(?P<name>{NAME}))", re.MULTILINE)
METHOD_PATTERN = re.compile(
    rf"^[ \t]*(?P<decl>(?:(?:public|private|protected)\s+)?(?:function|函数|方法)\s+(?P<name>{NAME})\s*\()"
)

RETURN_TYPE_PATTERN = re.compile(r"\s*(?::|->)\s*([a-zA-Z_][a-zA-Z0-9_]*)")
INT_PATTERN = re.compile(r"=\s*\d+(?![\d.])")
FLOAT_PATTERN = re.compile(r"=\s*\d+\.\d+")


def _variable_name_and_start(match: re.Match[str]) -> tuple[str, int]:
    "Return the captured name and the offset of the declaration for either alternative of VARIABLE_PATTERN."
    if match.group("name") is not None:
        return match.group("name"), match.start("decl")
    return match.group("kwname"), match.start("kwdecl")


def extract_params(line: str) -> tuple[str, ...]:
    """
    Read the parameter list of a function header.

    Uses the first `(` and the first `)` of the line; nested parentheses are not understood.
    """
    start = line.find("(")
    end = line.find(")")
    if start == -1 or end == -1 or end <= start:
        return ()

    inner = line[start + 1 : end].strip()
    if not inner:
        return ()
    return tuple(param.strip() for param in inner.split(","))


def extract_return_type(line: str) -> str | None:
    "Read a `: type` or `-> type` annotation directly after the first parameter list of the line."
    start = line.find("(")
    end = line.find(")")
    if start == -1 or end == -1 or end <= start:
        return None

    m = RETURN_TYPE_PATTERN.match(line, end + 1)
    return m.group(1) if m else None


def infer_variable_type(line: str) -> str:
    """
    Guess the type of a variable from the assignment on its declaring line.

    The checks run in a fixed order and the first hit wins, so `$a = "1"` is a string and not an int.
    """
    if '= "' in line or "= '" in line:
        return "string"
    if "= [" in line or "= array(" in line:
        return "array"
    if INT_PATTERN.search(line):
        return "int"
    if FLOAT_PATTERN.search(line):
        return "float"
    if "= true" in line or "= false" in line:
        return "bool"
    return "mixed"


def find_class_body(lines: list[str], header_line: int) -> tuple[int, int] | None:
    """
    Find the lines delimiting a class body by counting braces, starting at the header line.

    Returns (opening line, closing line), where the opening line holds the first `{` and the closing line is where
    the brace depth drops back to zero. If the braces never balance, the closing line is len(lines).
    Returns None if there is no `{` at all after the header.
    """
    depth = 0
    opening: int | None = None

    for i in range(header_line, len(lines)):
        line = lines[i]
        opens = line.count("{")
        if opening is None:
            if opens == 0:
                continue
            opening = i

        depth += opens - line.count("}")
        if depth <= 0:
            return opening, i

    if opening is None:
        return None
    return opening, len(lines)


class SymbolExtractor:
    """
    Builds the SymbolTable of a document.

    Extraction is a pure function of the text: the same text always yields an equal, identically ordered table, and
    text that matches none of the patterns yields an empty table instead of an error.
    """

    def extract(self, text: str) -> SymbolTable:
        """Extract functions, variables and classes (in three independent passes, in that order)."""
        lines = split_lines(text)

        table = SymbolTable(
            functions=tuple(self._extract_functions(text, lines)),
            variables=tuple(self._extract_variables(text, lines)),
            classes=tuple(self._extract_classes(text, lines)),
        )

        log.debug(
            f"Extracted {len(table.functions)} functions, {len(table.variables)} variables "
            f"and {len(table.classes)} classes from {len(lines)} lines"
        )
        return table

    def _extract_functions(self, text: str, lines: list[str]) -> list[FunctionSymbol]:
        functions: list[FunctionSymbol] = []
        for match in FUNCTION_PATTERN.finditer(text):
            position = offset_to_position(text, match.start("decl"))
            declaring_line = lines[position.line]
            functions.append(
                FunctionSymbol(
                    name=match.group("name"),
                    position=position,
                    params=extract_params(declaring_line),
                    return_type=extract_return_type(declaring_line),
                )
            )
        return functions

    def _extract_variables(self, text: str, lines: list[str]) -> list[VariableSymbol]:
        variables: list[VariableSymbol] = []
        for match in VARIABLE_PATTERN.finditer(text):
            name, start = _variable_name_and_start(match)
            position = offset_to_position(text, start)
            variables.append(
                VariableSymbol(name=name, position=position, type=infer_variable_type(lines[position.line]))
            )
        return variables

    def _extract_classes(self, text: str, lines: list[str]) -> list[ClassSymbol]:
        classes: list[ClassSymbol] = []
        for match in CLASS_PATTERN.finditer(text):
            position = offset_to_position(text, match.start("decl"))
            methods, fields = self._extract_members(lines, position.line)
            classes.append(ClassSymbol(name=match.group("name"), position=position, methods=methods, fields=fields))
        return classes

    def _extract_members(
        self, lines: list[str], header_line: int
    ) -> tuple[tuple[FunctionSymbol, ...], tuple[VariableSymbol, ...]]:
        """Collect methods and fields declared on the lines strictly inside the class body."""
        body = find_class_body(lines, header_line)
        if body is None:
            return (), ()

        methods: list[FunctionSymbol] = []
        fields: list[VariableSymbol] = []
        opening, closing = body

        for i in range(opening + 1, closing):
            line = lines[i]

            method = METHOD_PATTERN.match(line)
            if method is not None:
                methods.append(
                    FunctionSymbol(
                        name=method.group("name"),
                        position=SourcePosition(line=i, column=method.start("decl")),
                        params=extract_params(line),
                        return_type=extract_return_type(line),
                    )
                )

            field = VARIABLE_PATTERN.search(line)
            if field is not None:
                name, column = _variable_name_and_start(field)
                fields.append(
                    VariableSymbol(
                        name=name,
                        position=SourcePosition(line=i, column=column),
                        type=infer_variable_type(line),
                    )
                )

        return tuple(methods), tuple(fields)
