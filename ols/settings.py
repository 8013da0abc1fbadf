"""Settings for the language server."""

from olscommon.settings import setting

PORT = setting(
    "port",
    int,
    description="TCP port to accept clients on. 0 (the default) speaks the protocol on stdin/stdout instead",
    default=0,
    cli_option="--port",
)

HOST = setting(
    "host",
    str,
    description="Address to bind to in TCP mode",
    default="127.0.0.1",
    cli_option="--host",
)
