"""Logger for the language server."""

from olscommon.logging.logging_provider import LOGGING_PROVIDER

OLS_LOGGER = LOGGING_PROVIDER.new_logger("ols", hook_exception=True)
