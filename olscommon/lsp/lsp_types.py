"""
Subset of the Language Server Protocol spoken by the server.

See https://microsoft.github.io/language-server-protocol/specifications/lsp/3.17/specification/.
"""

from __future__ import annotations

import json
import typing
from enum import IntEnum
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict


class CompletionItemKind(IntEnum):
    """
    The kind of a completion entry.

    https://microsoft.github.io/language-server-protocol/specifications/lsp/3.17/specification/#completionItemKind
    """

    # pylint: disable=invalid-name
    Text = 1
    Method = 2
    Function = 3
    Constructor = 4
    Field = 5
    Variable = 6
    Class = 7
    Interface = 8
    Module = 9
    Property = 10
    Unit = 11
    Value = 12
    Enum = 13
    Keyword = 14
    Snippet = 15
    Color = 16
    File = 17
    Reference = 18
    Folder = 19
    EnumMember = 20
    Constant = 21
    Struct = 22
    Event = 23
    Operator = 24
    TypeParameter = 25


class InsertTextFormat(IntEnum):
    """How the insertText of a completion item is interpreted."""

    # pylint: disable=invalid-name
    PlainText = 1
    Snippet = 2


class TextDocumentSyncKind(IntEnum):
    """How documents are synced to the server."""

    # pylint: disable=invalid-name
    None_ = 0
    Full = 1
    Incremental = 2


class ErrorCodes(IntEnum):
    """JSON-RPC error codes used in responses."""

    ParseError = -32700
    InvalidRequest = -32600
    MethodNotFound = -32601
    InvalidParams = -32602
    InternalError = -32603


### Basic structures ###


class Position(BaseModel):
    """Position."""

    model_config = ConfigDict(frozen=True)

    line: int
    """Line position in a document (zero-based)"""

    character: int
    """Character offset on a line in a document (zero-based)."""


class Range(BaseModel):
    """Range."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position


class Location(BaseModel):
    """Location."""

    model_config = ConfigDict(frozen=True)

    uri: str
    """Kept verbatim, documents are keyed by the exact URI string the client sent."""

    range: Range


class TextDocumentItem(BaseModel):
    """A Text Document Item."""

    uri: str
    """The text document's URI."""

    languageId: str = ""
    """The text document's language identifier."""

    version: int = 0
    """
    The version number of this document
    (it will increase after each change, including undo/redo)
    """

    text: str
    """The content of the opened text document."""


class TextDocumentIdentifier(BaseModel):
    """A Text Document Identifier."""

    uri: str
    """The text document's URI."""


class VersionedTextDocumentIdentifier(TextDocumentIdentifier):
    """A Text Document Identifier with a version."""

    version: int | None = None


class TextDocumentContentChangeEvent(BaseModel):
    """
    TextDocumentContentChangeEvent.

    Without a range, text is the new text of the whole document.
    """

    range: Range | None = None
    """The range of the document that changed."""

    rangeLength: int | None = None
    """Deprecated by the protocol, ignored."""

    text: str
    """The new text for the provided range (or the whole document)."""


class MarkupContent(BaseModel):
    """MarkupContent."""

    kind: Literal["plaintext", "markdown"] = "markdown"
    value: str


class Hover(BaseModel):
    """The result of a hover request."""

    contents: MarkupContent
    range: Range | None = None


class CompletionItem(BaseModel):
    """A completion suggestion."""

    label: str
    """The label shown in the completion list, also the text inserted by default."""

    kind: CompletionItemKind | None = None

    detail: str | None = None
    """A human-readable string with additional information, like a signature."""

    documentation: str | None = None

    insertText: str | None = None

    insertTextFormat: InsertTextFormat | None = None


class CompletionList(BaseModel):
    """A collection of completion items presented in the editor."""

    isIncomplete: bool = False
    """Further typing never produces new items, the server always sends the complete list."""

    items: list[CompletionItem]


class ServerInfo(BaseModel):
    """Information about the server."""

    name: str
    version: str | None = None


class InitializeResult(BaseModel):
    """InitializeResult"""

    capabilities: dict  # Far too complex to define exact type. Maybe later...

    serverInfo: ServerInfo | None = None


class ClientInfo(BaseModel):
    """Information about the client."""

    name: str
    version: str | None = None


### Parameter definitions ###


class InitializeParams(BaseModel):
    """InitializeParams"""

    processId: int | None = None
    """The process Id of the parent process that started the server."""

    clientInfo: ClientInfo | None = None

    rootUri: str | None = None
    """The rootUri of the workspace."""

    capabilities: dict = {}
    """The capabilities provided by the client (editor or tool)."""


class DidOpenTextDocumentParams(BaseModel):
    """DidOpenTextDocumentParams."""

    textDocument: TextDocumentItem
    """The document that was opened."""


class DidChangeTextDocumentParams(BaseModel):
    """DidChangeTextDocumentParams."""

    textDocument: VersionedTextDocumentIdentifier
    """The document that did change."""

    contentChanges: list[TextDocumentContentChangeEvent]
    """
    The actual content changes, to be applied in order.
    """


class DidSaveTextDocumentParams(BaseModel):
    """DidSaveTextDocumentParams."""

    textDocument: TextDocumentIdentifier
    """The document that was saved."""

    text: str | None = None
    """The content when saved, present if the client was asked to include it."""


class DidCloseTextDocumentParams(BaseModel):
    """DidCloseTextDocumentParams."""

    textDocument: TextDocumentIdentifier
    """The document that was closed."""


class TextDocumentPositionParams(BaseModel):
    """TextDocumentPositionParams"""

    textDocument: TextDocumentIdentifier
    """The text document."""

    position: Position
    """The position inside the text document."""


class CompletionContext(BaseModel):
    """How the completion was triggered."""

    triggerKind: int
    triggerCharacter: str | None = None


class CompletionParams(TextDocumentPositionParams):
    """CompletionParams"""

    context: CompletionContext | None = None


class DefinitionParams(TextDocumentPositionParams):
    """DefinitionParams"""


class HoverParams(TextDocumentPositionParams):
    """HoverParams"""


class ReferenceContext(BaseModel):
    """ReferenceContext"""

    includeDeclaration: bool
    """Include the declaration of the current symbol."""


class ReferenceParams(TextDocumentPositionParams):
    """ReferenceParams."""

    context: ReferenceContext


### Messages ###


class ResponseError(BaseModel):
    """Response Error."""

    code: int
    message: str
    data: dict | None = None


class IncomingMessage(BaseModel):
    """
    A request (with id) or notification (without id) received from the client.

    Params stay untyped here; the handler validates them per method.
    """

    jsonrpc: Literal["2.0"] = "2.0"
    id: int | str | None = None
    method: str
    params: dict | list | None = None

    @property
    def is_request(self) -> bool:
        "Requests get a response, notifications do not."
        return self.id is not None


class ResponseMessage(BaseModel):
    """
    Response Message.

    result is always serialized (null included) since a response has either a result or an error.
    """

    jsonrpc: Literal["2.0"] = "2.0"
    id: int | str | None
    result: typing.Any = None
    error: ResponseError | None = None

    def to_json(self) -> str:
        "Serialize, keeping a null id and null result but dropping unset optional fields everywhere else."
        data = self.model_dump(mode="json", exclude_none=True)
        data["id"] = self.id
        if self.error is None:
            data.setdefault("result", None)
        else:
            data.pop("result", None)
        return json.dumps(data, ensure_ascii=False)
