"""In-memory store of the documents the client has opened."""

from contextlib import contextmanager
from typing import Iterator

from pydantic import BaseModel
from pydantic import ConfigDict

from ols.analysis.extractor import SymbolExtractor
from ols.analysis.symbols import SymbolTable
from ols.logger import OLS_LOGGER

from .rwlock import ReadWriteLock

log = OLS_LOGGER.getChild(__name__)


class Document(BaseModel):
    """An open document and the symbols extracted from its current text."""

    model_config = ConfigDict(frozen=True)

    uri: str
    text: str
    symbols: SymbolTable


class DocumentStore:
    """
    Owns all open documents, keyed by URI.

    All documents share one readers-writer lock. Mutations take it exclusively and run the symbol extraction while
    holding it, so a document's symbols always match its text; queries only need it shared. Documents are immutable,
    a mutation installs a new Document under the same URI.
    """

    def __init__(self, extractor: SymbolExtractor | None = None) -> None:
        self.extractor = extractor or SymbolExtractor()
        self.lock = ReadWriteLock()
        self._documents: dict[str, Document] = {}

    def open(self, uri: str, text: str) -> None:
        """Install a document, replacing any document already open at the same URI."""
        with self.lock.write_locked():
            replaced = uri in self._documents
            self._documents[uri] = self._build(uri, text)

        log.debug(f"Opened {uri} ({len(text)} characters{', replacing the open document' if replaced else ''})")

    def update(self, uri: str, text: str) -> None:
        """
        Replace the text (and symbols) of a document.

        Updating a document that is not open opens it, the client's view of the text is authoritative.
        """
        with self.lock.write_locked():
            created = uri not in self._documents
            self._documents[uri] = self._build(uri, text)

        if created:
            log.debug(f"Update for {uri} which is not open, opened it ({len(text)} characters)")
        else:
            log.debug(f"Updated {uri} ({len(text)} characters)")

    def close(self, uri: str) -> None:
        """Forget a document. Closing a document that is not open does nothing."""
        with self.lock.write_locked():
            removed = self._documents.pop(uri, None)

        if removed is None:
            log.debug(f"Close for {uri} which is not open, ignored")
        else:
            log.debug(f"Closed {uri}")

    def snapshot(self, uri: str) -> Document | None:
        """Return the current document at uri, or None if it is not open."""
        with self.lock.read_locked():
            return self._documents.get(uri)

    @contextmanager
    def reading(self, uri: str) -> Iterator[Document | None]:
        """
        Hold the lock shared while the caller looks at the document at uri (None if it is not open).

        Do not call other store methods inside the block, the lock is not reentrant.
        """
        with self.lock.read_locked():
            yield self._documents.get(uri)

    def uris(self) -> list[str]:
        """URIs of all open documents, in the order they were first opened."""
        with self.lock.read_locked():
            return list(self._documents)

    def _build(self, uri: str, text: str) -> Document:
        return Document(uri=uri, text=text, symbols=self.extractor.extract(text))
