"""Maps LSP methods onto the language server."""

import typing
from typing import Callable

from pydantic import BaseModel
from pydantic import ValidationError

from ols.analysis.position import position_to_offset
from ols.server.language_server import LanguageServer
from olscommon.lsp.exceptions import LspInvalidParams
from olscommon.lsp.exceptions import LspMethodNotFound
from olscommon.lsp.logger import LSP_LOGGER
from olscommon.lsp.lsp_types import CompletionParams
from olscommon.lsp.lsp_types import DefinitionParams
from olscommon.lsp.lsp_types import DidChangeTextDocumentParams
from olscommon.lsp.lsp_types import DidCloseTextDocumentParams
from olscommon.lsp.lsp_types import DidOpenTextDocumentParams
from olscommon.lsp.lsp_types import DidSaveTextDocumentParams
from olscommon.lsp.lsp_types import Hover
from olscommon.lsp.lsp_types import HoverParams
from olscommon.lsp.lsp_types import IncomingMessage
from olscommon.lsp.lsp_types import InitializeParams
from olscommon.lsp.lsp_types import InitializeResult
from olscommon.lsp.lsp_types import MarkupContent
from olscommon.lsp.lsp_types import ReferenceParams
from olscommon.lsp.lsp_types import ServerInfo
from olscommon.lsp.lsp_types import TextDocumentContentChangeEvent
from olscommon.lsp.lsp_types import TextDocumentSyncKind

log = LSP_LOGGER.getChild(__name__)

SERVER_NAME = "Origami Language Server"
SERVER_VERSION = "0.0.1"

COMPLETION_TRIGGER_CHARACTERS = [".", "$", ":", ">"]

P = typing.TypeVar("P", bound=BaseModel)


def apply_change(text: str, change: TextDocumentContentChangeEvent) -> str:
    """Apply one content change: replace the whole text, or splice the new text into the given range."""
    if change.range is None:
        return change.text

    start = position_to_offset(text, change.range.start.line, change.range.start.character)
    end = position_to_offset(text, change.range.end.line, change.range.end.character)
    if end < start:
        start, end = end, start
    return text[:start] + change.text + text[end:]


class RequestHandler:
    """
    Dispatches incoming messages by method name.

    Requests return a JSON-ready result (None for an empty one). Unknown requests raise LspMethodNotFound, unknown
    notifications are ignored. Params that do not validate raise LspInvalidParams.
    """

    def __init__(self, server: LanguageServer) -> None:
        self.server = server
        self.shutdown_requested = False
        self.exit_requested = False

        self.requests: dict[str, Callable[[IncomingMessage], typing.Any]] = {
            "initialize": self.initialize,
            "shutdown": self.shutdown,
            "textDocument/completion": self.completion,
            "textDocument/definition": self.definition,
            "textDocument/hover": self.hover,
            "textDocument/references": self.references,
        }
        self.notifications: dict[str, Callable[[IncomingMessage], None]] = {
            "initialized": self.initialized,
            "exit": self.exit,
            "textDocument/didOpen": self.did_open,
            "textDocument/didChange": self.did_change,
            "textDocument/didSave": self.did_save,
            "textDocument/didClose": self.did_close,
        }

    def handle(self, message: IncomingMessage) -> typing.Any:
        """Handle one message and return the result for requests."""
        if message.is_request:
            request = self.requests.get(message.method)
            if request is None:
                raise LspMethodNotFound(f"Method not found: {message.method}")
            log.debug(f"Request {message.id}: {message.method}")
            return request(message)

        notification = self.notifications.get(message.method)
        if notification is None:
            log.debug(f"Ignoring notification {message.method}")
            return None
        log.debug(f"Notification: {message.method}")
        notification(message)
        return None

    @staticmethod
    def parse_params(message: IncomingMessage, params_type: type[P]) -> P:
        """Validate the params of a message against the model of its method."""
        try:
            return params_type.model_validate(message.params if message.params is not None else {})
        except ValidationError as exc:
            raise LspInvalidParams(f"Invalid params for {message.method}: {exc}") from exc

    ### Lifecycle ###

    def initialize(self, message: IncomingMessage) -> dict:
        """Announce the server capabilities."""
        params = self.parse_params(message, InitializeParams)
        client = params.clientInfo.name if params.clientInfo is not None else "unknown client"
        log.info(f"Initializing for {client} (root {params.rootUri})")

        result = InitializeResult(
            capabilities={
                "textDocumentSync": {
                    "openClose": True,
                    "change": TextDocumentSyncKind.Full.value,
                    "save": {"includeText": True},
                },
                "completionProvider": {
                    "triggerCharacters": COMPLETION_TRIGGER_CHARACTERS,
                    "resolveProvider": False,
                },
                "hoverProvider": True,
                "definitionProvider": True,
                "referencesProvider": True,
            },
            serverInfo=ServerInfo(name=SERVER_NAME, version=SERVER_VERSION),
        )
        return result.model_dump(mode="json", exclude_none=True)

    def initialized(self, _message: IncomingMessage) -> None:
        log.info("Client initialized")

    def shutdown(self, _message: IncomingMessage) -> None:
        self.shutdown_requested = True
        log.info("Shutdown requested")

    def exit(self, _message: IncomingMessage) -> None:
        self.exit_requested = True
        log.info("Exit requested")

    ### Document sync ###

    def did_open(self, message: IncomingMessage) -> None:
        params = self.parse_params(message, DidOpenTextDocumentParams)
        self.server.open_document(params.textDocument.uri, params.textDocument.text)

    def did_change(self, message: IncomingMessage) -> None:
        """Apply the changes in order, then reparse once."""
        params = self.parse_params(message, DidChangeTextDocumentParams)
        uri = params.textDocument.uri
        if not params.contentChanges:
            return

        document = self.server.store.snapshot(uri)
        text = document.text if document is not None else ""
        for change in params.contentChanges:
            text = apply_change(text, change)
        self.server.update_document(uri, text)

    def did_save(self, message: IncomingMessage) -> None:
        """A save only matters if the client sent the saved text along."""
        params = self.parse_params(message, DidSaveTextDocumentParams)
        if params.text is not None:
            self.server.update_document(params.textDocument.uri, params.text)

    def did_close(self, message: IncomingMessage) -> None:
        params = self.parse_params(message, DidCloseTextDocumentParams)
        self.server.close_document(params.textDocument.uri)

    ### Queries ###

    def completion(self, message: IncomingMessage) -> dict:
        params = self.parse_params(message, CompletionParams)
        completions = self.server.get_completions(
            params.textDocument.uri, params.position.line, params.position.character
        )
        return completions.model_dump(mode="json", exclude_none=True)

    def definition(self, message: IncomingMessage) -> dict | None:
        params = self.parse_params(message, DefinitionParams)
        location = self.server.get_definition(params.textDocument.uri, params.position.line, params.position.character)
        if location is None:
            return None
        return location.model_dump(mode="json", exclude_none=True)

    def hover(self, message: IncomingMessage) -> dict | None:
        params = self.parse_params(message, HoverParams)
        text = self.server.get_hover(params.textDocument.uri, params.position.line, params.position.character)
        if text is None:
            return None
        return Hover(contents=MarkupContent(kind="markdown", value=text)).model_dump(mode="json", exclude_none=True)

    def references(self, message: IncomingMessage) -> list:
        """References are not tracked; the request is answered with an empty list."""
        self.parse_params(message, ReferenceParams)
        return []
