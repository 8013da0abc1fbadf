"""Document intelligence entry points called by the protocol layer."""

from ols.analysis.extractor import SymbolExtractor
from ols.completion.provider import CompletionProvider
from ols.documents.store import DocumentStore
from ols.logger import OLS_LOGGER
from ols.resolution.resolver import find_symbol
from ols.resolution.resolver import hover_text
from ols.resolution.resolver import resolve_definition
from ols.resolution.resolver import symbol_at
from olscommon.lsp.lsp_types import CompletionList
from olscommon.lsp.lsp_types import Location
from olscommon.lsp.lsp_types import Position
from olscommon.lsp.lsp_types import Range

log = OLS_LOGGER.getChild(__name__)


class LanguageServer:
    """
    Answers completion, definition and hover queries over the open documents.

    Lifecycle calls take the store's lock exclusively; queries hold it shared while they look at one document.
    Queries on a URI that is not open return the same empty result as a query that finds nothing.
    """

    def __init__(self, store: DocumentStore | None = None, completion: CompletionProvider | None = None) -> None:
        self.store = store or DocumentStore(SymbolExtractor())
        self.completion = completion or CompletionProvider()

    def open_document(self, uri: str, text: str) -> None:
        """Open (or reopen) a document."""
        self.store.open(uri, text)

    def update_document(self, uri: str, text: str) -> None:
        """Replace the full text of a document."""
        self.store.update(uri, text)

    def close_document(self, uri: str) -> None:
        """Close a document."""
        self.store.close(uri)

    def get_completions(self, uri: str, line: int, character: int) -> CompletionList:
        """Completion candidates at the position; an empty list for unknown documents."""
        with self.store.reading(uri) as doc:
            if doc is None:
                log.debug(f"No completions for {uri}: document is not open")
                return CompletionList(isIncomplete=False, items=[])
            items = self.completion.get_completions(doc.text, doc.symbols, line, character)

        log.debug(f"Found {len(items)} completions for {uri} at {line + 1}:{character + 1}")
        return CompletionList(isIncomplete=False, items=items)

    def get_definition(self, uri: str, line: int, character: int) -> Location | None:
        """
        Location of the declaration of the identifier under the cursor.

        The range starts at the declaration and spans as many columns as the identifier under the cursor has.
        """
        with self.store.reading(uri) as doc:
            if doc is None:
                log.debug(f"No definition in {uri}: document is not open")
                return None
            name = symbol_at(doc.text, line, character)
            start = resolve_definition(doc.symbols, name)

        if start is None:
            log.debug(f"No definition for {name!r} in {uri} at {line + 1}:{character + 1}")
            return None

        log.debug(f"Definition of {name!r} is at {uri}:{start.line + 1}:{start.column + 1}")
        return Location(
            uri=uri,
            range=Range(
                start=Position(line=start.line, character=start.column),
                end=Position(line=start.line, character=start.column + len(name)),
            ),
        )

    def get_hover(self, uri: str, line: int, character: int) -> str | None:
        """Markdown text describing the identifier under the cursor, or None."""
        with self.store.reading(uri) as doc:
            if doc is None:
                return None
            name = symbol_at(doc.text, line, character)
            symbol = find_symbol(doc.symbols, name)

        if symbol is None:
            return None

        log.debug(f"Hover for {name!r} in {uri} at {line + 1}:{character + 1}")
        return hover_text(name, symbol)
