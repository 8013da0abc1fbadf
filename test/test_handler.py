"""Tests for the LSP method dispatch."""

import typing

import pytest

from ols.server.handler import RequestHandler
from ols.server.handler import apply_change
from olscommon.lsp.exceptions import LspInvalidParams
from olscommon.lsp.exceptions import LspMethodNotFound
from olscommon.lsp.lsp_types import IncomingMessage
from olscommon.lsp.lsp_types import Position
from olscommon.lsp.lsp_types import Range
from olscommon.lsp.lsp_types import TextDocumentContentChangeEvent

URI = "file:///tmp/doc.ori"


def request(method: str, params: typing.Any = None, msg_id: int = 1) -> IncomingMessage:
    "Build a request message."
    return IncomingMessage(id=msg_id, method=method, params=params)


def notification(method: str, params: typing.Any = None) -> IncomingMessage:
    "Build a notification message."
    return IncomingMessage(method=method, params=params)


def position_params(line: int, character: int) -> dict:
    "Params of a positional query on the test document."
    return {"textDocument": {"uri": URI}, "position": {"line": line, "character": character}}


def open_document(handler: RequestHandler, text: str) -> None:
    "Open the test document."
    document = {"uri": URI, "languageId": "origami", "version": 1, "text": text}
    handler.handle(notification("textDocument/didOpen", {"textDocument": document}))


def text_range(start_line: int, start_character: int, end_line: int, end_character: int) -> dict:
    "A range in wire format."
    return {
        "start": {"line": start_line, "character": start_character},
        "end": {"line": end_line, "character": end_character},
    }


def document_text(handler: RequestHandler) -> str | None:
    "Current text of the test document."
    doc = handler.server.store.snapshot(URI)
    return doc.text if doc is not None else None


def test_initialize(handler: RequestHandler) -> None:
    """The server announces full sync and its providers."""

    result = handler.handle(request("initialize", {"processId": None, "clientInfo": {"name": "pytest"}}))

    assert result["serverInfo"] == {"name": "Origami Language Server", "version": "0.0.1"}
    capabilities = result["capabilities"]
    assert capabilities["textDocumentSync"]["change"] == 1
    assert capabilities["textDocumentSync"]["save"] == {"includeText": True}
    assert capabilities["completionProvider"]["triggerCharacters"] == [".", "$", ":", ">"]
    assert capabilities["hoverProvider"] is True
    assert capabilities["definitionProvider"] is True
    assert capabilities["referencesProvider"] is True


def test_lifecycle(handler: RequestHandler) -> None:
    """Shutdown and exit are recorded."""

    assert handler.handle(notification("initialized", {})) is None
    assert handler.handle(request("shutdown")) is None
    assert handler.shutdown_requested
    assert not handler.exit_requested
    handler.handle(notification("exit"))
    assert handler.exit_requested


def test_document_sync(handler: RequestHandler) -> None:
    """Open, full change, save with text and close reach the store."""

    open_document(handler, "$a = 1\n")
    assert document_text(handler) == "$a = 1\n"

    handler.handle(
        notification(
            "textDocument/didChange",
            {"textDocument": {"uri": URI, "version": 2}, "contentChanges": [{"text": "$b = 2\n"}]},
        )
    )
    assert document_text(handler) == "$b = 2\n"

    handler.handle(notification("textDocument/didSave", {"textDocument": {"uri": URI}}))
    assert document_text(handler) == "$b = 2\n"

    handler.handle(notification("textDocument/didSave", {"textDocument": {"uri": URI}, "text": "$c = 3\n"}))
    assert document_text(handler) == "$c = 3\n"

    handler.handle(notification("textDocument/didClose", {"textDocument": {"uri": URI}}))
    assert document_text(handler) is None


def test_ranged_changes_apply_in_order(handler: RequestHandler) -> None:
    """Range changes are spliced into the text one after the other."""

    open_document(handler, "function foo() {}\n")
    handler.handle(
        notification(
            "textDocument/didChange",
            {
                "textDocument": {"uri": URI, "version": 2},
                "contentChanges": [
                    {"range": text_range(0, 9, 0, 12), "text": "bar"},
                    {"range": text_range(1, 0, 1, 0), "text": "$x = 1\n"},
                ],
            },
        )
    )

    assert document_text(handler) == "function bar() {}\n$x = 1\n"
    result = handler.handle(request("textDocument/definition", position_params(0, 10)))
    assert result["range"]["start"] == {"line": 0, "character": 0}


@pytest.mark.parametrize(
    "text, start, end, new_text, result",
    [
        ("hello world", (0, 6), (0, 11), "there", "hello there"),
        ("a\nb\nc", (1, 0), (2, 0), "", "a\nc"),
        ("abc", (0, 3), (0, 3), "d", "abcd"),
        ("abc", (0, 2), (0, 1), "", "ac"),
        ("abc", (5, 0), (5, 0), "!", "abc!"),
    ],
)
def test_apply_change(
    text: str, start: tuple[int, int], end: tuple[int, int], new_text: str, result: str
) -> None:
    """Ranged changes replace the text between their positions."""

    change = TextDocumentContentChangeEvent(
        range=Range(
            start=Position(line=start[0], character=start[1]), end=Position(line=end[0], character=end[1])
        ),
        text=new_text,
    )
    assert apply_change(text, change) == result


def test_queries(handler: RequestHandler) -> None:
    """Query results are JSON-ready dicts."""

    open_document(handler, "function add(a, b) {\n  $sum = a + b\n}\nadd(1, 2)\n")

    definition = handler.handle(request("textDocument/definition", position_params(3, 1)))
    assert definition == {
        "uri": URI,
        "range": {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 3}},
    }

    hover = handler.handle(request("textDocument/hover", position_params(1, 3)))
    assert hover == {
        "contents": {"kind": "markdown", "value": "**$sum**\n\n`mixed variable`\n\nDefined at line 2"}
    }

    completion = handler.handle(request("textDocument/completion", position_params(3, 2)))
    assert completion["isIncomplete"] is False
    assert {"label": "add", "kind": 3, "detail": "function add(a, b)"}.items() <= completion["items"][0].items()

    references = handler.handle(
        request("textDocument/references", {**position_params(3, 1), "context": {"includeDeclaration": True}})
    )
    assert references == []


def test_empty_query_results(handler: RequestHandler) -> None:
    """Nothing found is answered with null."""

    open_document(handler, "x\n")

    assert handler.handle(request("textDocument/definition", position_params(0, 0))) is None
    assert handler.handle(request("textDocument/hover", position_params(0, 0))) is None


def test_unknown_request(handler: RequestHandler) -> None:
    """Unknown requests are an error."""

    with pytest.raises(LspMethodNotFound):
        handler.handle(request("workspace/symbol", {"query": ""}))


def test_unknown_notification(handler: RequestHandler) -> None:
    """Unknown notifications are ignored."""

    assert handler.handle(notification("$/setTrace", {"value": "off"})) is None


@pytest.mark.parametrize(
    "method, params",
    [
        ("textDocument/definition", {"textDocument": {"uri": URI}}),
        ("textDocument/hover", {"position": {"line": 0, "character": 0}}),
        ("textDocument/completion", None),
        ("textDocument/references", position_params(0, 0)),
    ],
)
def test_invalid_params(handler: RequestHandler, method: str, params: typing.Any) -> None:
    """Params not fitting the method are rejected."""

    with pytest.raises(LspInvalidParams):
        handler.handle(request(method, params))
