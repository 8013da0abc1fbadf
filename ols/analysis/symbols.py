"""Types for the symbols extracted from a document."""

from pydantic import BaseModel
from pydantic import ConfigDict


class SourcePosition(BaseModel):
    """Start of a declaration in a document."""

    model_config = ConfigDict(frozen=True)

    line: int  # zero based
    column: int  # zero based, counted in characters


class FunctionSymbol(BaseModel):
    """A function (or class method) declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    position: SourcePosition
    params: tuple[str, ...] = ()  # as written between the parentheses, whitespace trimmed
    return_type: str | None = None

    @property
    def signature(self) -> str:
        "Signature as shown in completion details and hovers, e.g. `function add(a, b): int`."
        signature = f"function {self.name}({', '.join(self.params)})"
        if self.return_type is not None:
            signature += f": {self.return_type}"
        return signature


class VariableSymbol(BaseModel):
    """A variable (or class field) declaration."""

    model_config = ConfigDict(frozen=True)

    name: str  # without the sigil
    position: SourcePosition
    type: str = "mixed"  # string, array, int, float, bool or mixed


class ClassSymbol(BaseModel):
    """A class declaration with the members found inside its braces."""

    model_config = ConfigDict(frozen=True)

    name: str
    position: SourcePosition
    methods: tuple[FunctionSymbol, ...] = ()
    fields: tuple[VariableSymbol, ...] = ()


class SymbolTable(BaseModel):
    """
    All declarations of one document.

    Each sequence is in textual order. Tables are rebuilt from scratch for every new text, never patched.
    """

    model_config = ConfigDict(frozen=True)

    functions: tuple[FunctionSymbol, ...] = ()
    variables: tuple[VariableSymbol, ...] = ()
    classes: tuple[ClassSymbol, ...] = ()


Symbol = FunctionSymbol | VariableSymbol | ClassSymbol


def symbol_detail(symbol: Symbol) -> str:
    "One-line summary of a symbol: the signature of a function, the type of a variable, `class X` for classes."
    if isinstance(symbol, FunctionSymbol):
        return symbol.signature
    if isinstance(symbol, VariableSymbol):
        return f"{symbol.type} variable"
    return f"class {symbol.name}"
