"""Pytest config."""

from pathlib import Path

import pytest

# Importing these declares every setting before they are loaded below.
import ols.settings  # noqa: F401 pylint: disable=unused-import
from ols.documents.store import DocumentStore
from ols.server.handler import RequestHandler
from ols.server.language_server import LanguageServer
from olscommon.logging.logging_provider import LOGGING_PROVIDER
from olscommon.settings.settings import SETTINGS


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Test env setup."""

    SETTINGS.apply({"verbose": "true"})
    LOGGING_PROVIDER.init_logging(Path("test_log"))


# pylint: disable=redefined-outer-name
# because of fixtures


@pytest.fixture
def store() -> DocumentStore:
    """An empty document store."""
    return DocumentStore()


@pytest.fixture
def server(store: DocumentStore) -> LanguageServer:
    """A language server without open documents."""
    return LanguageServer(store)


@pytest.fixture
def handler(server: LanguageServer) -> RequestHandler:
    """A request handler on a fresh server."""
    return RequestHandler(server)
