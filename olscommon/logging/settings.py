"""Settings for the server logger."""

from pathlib import Path

from olscommon.settings import setting

LOG_FILE = setting(
    "log-file",
    Path | None,
    description=(
        "File to append the server log to. "
        "Default is to log to stderr (stdout carries the protocol and is never used for logs)."
    ),
    cli_option="--log",
)

VERBOSE = setting(
    "verbose",
    bool,
    description="Log every request and document event at DEBUG level",
    default=False,
    cli_option="--verbose",
)

DUMP_ALL_CONFIG = setting(
    "dump-all-config",
    bool,
    description="Spend extra effort to gather more information about the server's environment",
    default=False,
    cli_option="--dump-all-config",
)
