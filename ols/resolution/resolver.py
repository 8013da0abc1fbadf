"""Find the identifier under the cursor and the declaration it refers to."""

from ols.analysis.position import SIGIL
from ols.analysis.position import get_line
from ols.analysis.position import is_identifier_char
from ols.analysis.symbols import SourcePosition
from ols.analysis.symbols import Symbol
from ols.analysis.symbols import SymbolTable
from ols.analysis.symbols import symbol_detail


def symbol_at(text: str, line: int, character: int) -> str:
    """
    Return the identifier enclosing the cursor, or "" if there is none.

    The token extends left and right of the cursor over identifier characters (sigil included), so a cursor
    anywhere in `$sum` (or directly after it) yields `$sum`. A cursor at or past the end of the line yields "".
    """
    current_line = get_line(text, line)
    if current_line is None or character < 0 or character >= len(current_line):
        return ""

    start = character
    while start > 0 and is_identifier_char(current_line[start - 1]):
        start -= 1

    end = character
    while end < len(current_line) and is_identifier_char(current_line[end]):
        end += 1

    return current_line[start:end]


def find_symbol(symbols: SymbolTable, name: str) -> Symbol | None:
    """
    Look up a top-level declaration by exact name.

    Functions win over variables, variables over classes; within a kind the first declaration wins. There are no
    scopes. Variables also match their sigil-prefixed name, since that is what symbol_at() returns for `$sum`.
    """
    if not name:
        return None

    for function in symbols.functions:
        if function.name == name:
            return function

    for variable in symbols.variables:
        if variable.name == name or SIGIL + variable.name == name:
            return variable

    for cls in symbols.classes:
        if cls.name == name:
            return cls

    return None


def resolve_definition(symbols: SymbolTable, name: str) -> SourcePosition | None:
    """Return where name is declared, or None."""
    symbol = find_symbol(symbols, name)
    return symbol.position if symbol is not None else None


def hover_text(name: str, symbol: Symbol) -> str:
    """Markdown blurb naming the symbol and its (one-based) declaration line."""
    return f"**{name}**\n\n`{symbol_detail(symbol)}`\n\nDefined at line {symbol.position.line + 1}"
