"""Completion candidates for a cursor position."""

from typing import Iterable

from ols.analysis.position import SIGIL
from ols.analysis.position import get_line
from ols.analysis.position import is_identifier_char
from ols.analysis.symbols import SymbolTable
from ols.analysis.symbols import symbol_detail
from olscommon.lsp.lsp_types import CompletionItem
from olscommon.lsp.lsp_types import CompletionItemKind
from olscommon.lsp.lsp_types import InsertTextFormat

from . import vocabulary


def extract_prefix(line: str, character: int) -> str:
    """
    Return the part of the token left of the cursor, e.g. `fu` for `x = fu|`.

    A cursor past the end of the line has no prefix.
    """
    if character > len(line) or character < 0:
        return ""

    start = character
    while start > 0 and is_identifier_char(line[start - 1]):
        start -= 1
    return line[start:character]


def is_member_access(line: str, character: int) -> bool:
    """True if the cursor directly follows `->`, `::` or `.`."""
    if character > len(line) or character < 1:
        return False
    if line[max(character - 2, 0) : character] in vocabulary.MEMBER_ACCESS_OPERATORS:
        return True
    return line[character - 1] == vocabulary.MEMBER_ACCESS_CHAR


class CompletionProvider:
    """
    Produces completion items from the fixed vocabularies and a document's symbols.

    Every source is filtered independently by a case-sensitive "label starts with prefix" test. The results are
    concatenated as they are: no de-duplication, ranking or limit.
    """

    def get_completions(
        self, text: str, symbols: SymbolTable | None, line: int, character: int
    ) -> list[CompletionItem]:
        """Return the candidates for the cursor at (line, character); none if the line does not exist."""
        current_line = get_line(text, line)
        if current_line is None:
            return []

        prefix = extract_prefix(current_line, character)

        items = self.keyword_completions(prefix)
        items += self.builtin_completions(prefix)
        if symbols is not None:
            items += self.symbol_completions(symbols, prefix)
        if is_member_access(current_line, character):
            items += self.member_completions()
        items += self.snippet_completions(prefix)
        return items

    def keyword_completions(self, prefix: str) -> list[CompletionItem]:
        """Keywords in both spellings."""
        return [
            CompletionItem(label=keyword, kind=CompletionItemKind.Keyword, detail="Origami keyword")
            for keyword in _matching(vocabulary.KEYWORDS, prefix)
        ]

    def builtin_completions(self, prefix: str) -> list[CompletionItem]:
        """Built-in functions, callable PHP functions and Go keywords, each labelled with its origin."""
        items = [
            CompletionItem(
                label=name, kind=CompletionItemKind.Function, detail="Built-in function", insertText=f"{name}()"
            )
            for name in _matching(vocabulary.BUILTIN_FUNCTIONS, prefix)
        ]
        items += [
            CompletionItem(label=name, kind=CompletionItemKind.Function, detail="PHP function", insertText=f"{name}()")
            for name in _matching(vocabulary.PHP_FUNCTIONS, prefix)
        ]
        items += [
            CompletionItem(label=keyword, kind=CompletionItemKind.Keyword, detail="Go keyword")
            for keyword in _matching(vocabulary.GO_KEYWORDS, prefix)
        ]
        return items

    def symbol_completions(self, symbols: SymbolTable, prefix: str) -> list[CompletionItem]:
        """
        Functions, variables and classes declared in the document.

        Variables are labelled with the sigil and match the prefix with or without it.
        """
        items: list[CompletionItem] = []

        for function in symbols.functions:
            if function.name.startswith(prefix):
                items.append(
                    CompletionItem(
                        label=function.name,
                        kind=CompletionItemKind.Function,
                        detail=symbol_detail(function),
                        documentation=f"User-defined function at line {function.position.line + 1}",
                        insertText=f"{function.name}()",
                    )
                )

        for variable in symbols.variables:
            label = SIGIL + variable.name
            if label.startswith(prefix) or variable.name.startswith(prefix):
                items.append(
                    CompletionItem(
                        label=label,
                        kind=CompletionItemKind.Variable,
                        detail=symbol_detail(variable),
                        documentation=f"Variable defined at line {variable.position.line + 1}",
                    )
                )

        for cls in symbols.classes:
            if cls.name.startswith(prefix):
                items.append(
                    CompletionItem(
                        label=cls.name,
                        kind=CompletionItemKind.Class,
                        detail=symbol_detail(cls),
                        documentation=f"Class defined at line {cls.position.line + 1}",
                    )
                )

        return items

    def member_completions(self) -> list[CompletionItem]:
        """Generic member names, offered regardless of the receiver's type."""
        return [
            CompletionItem(
                label=method, kind=CompletionItemKind.Method, detail="Common method", insertText=f"{method}()"
            )
            for method in vocabulary.MEMBER_METHODS
        ]

    def snippet_completions(self, prefix: str) -> list[CompletionItem]:
        """Code templates whose trigger word starts with the prefix."""
        return [
            CompletionItem(
                label=trigger,
                kind=CompletionItemKind.Snippet,
                detail="Code snippet",
                insertText=body,
                insertTextFormat=InsertTextFormat.Snippet,
            )
            for trigger, body in vocabulary.SNIPPETS.items()
            if trigger.startswith(prefix)
        ]


def _matching(words: Iterable[str], prefix: str) -> list[str]:
    return [word for word in words if word.startswith(prefix)]
