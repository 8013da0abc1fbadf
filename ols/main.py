"""Main module."""

import argparse

from ols.logger import OLS_LOGGER
from ols.server.handler import SERVER_NAME
from ols.server.handler import SERVER_VERSION
from ols.server.language_server import LanguageServer
from ols.server.transport import serve_stdio
from ols.server.transport import serve_tcp
from ols.settings import HOST
from ols.settings import PORT
from olscommon.logging.dump_config import dump_config
from olscommon.logging.logging_provider import LOGGING_PROVIDER
from olscommon.settings import init_settings
from olscommon.settings import load_settings

log = OLS_LOGGER.getChild(__name__)


def main() -> None:
    "The main function!"

    parser = argparse.ArgumentParser(description=f"{SERVER_NAME} for the Origami language")
    parser.add_argument("--version", action="version", version=f"{SERVER_NAME} {SERVER_VERSION}")

    init_settings(parser)

    args = parser.parse_args()

    # load settings before initializing logging, because the logger uses the settings
    load_settings(args)

    LOGGING_PROVIDER.init_logging()

    # log settings after initializing logging
    dump_config(log)

    server = LanguageServer()
    port = PORT.get()
    try:
        if port:
            serve_tcp(server, port, HOST.get())
        else:
            serve_stdio(server)
    except KeyboardInterrupt:
        log.info("Interrupted")

    log.info(f"{SERVER_NAME} stopped")


if __name__ == "__main__":
    main()
