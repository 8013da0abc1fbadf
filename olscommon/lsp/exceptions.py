"""Exceptions for the LSP code."""


class LspProtocolError(Exception):
    """Exception raised when the client sends unparseable garbage."""


class LspMethodNotFound(Exception):
    """The client called a method the server does not implement."""


class LspInvalidParams(Exception):
    """The params of a request do not fit the method."""
