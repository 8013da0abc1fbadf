"""
Repository for server tuning knobs.

Settings are declared using setting(), bound to CLI arguments using init_settings(), and loaded from CLI arguments and
environment variables by load_settings().
By default, a setting has no corresponding CLI option, use "cli_option=" to specify one.
By default, a setting's environment variable is derived from its name (e.g., the setting "log-file" is mapped to
"OLS_LOG_FILE"), but settings may specify custom environment variable names.

Entry points call init_settings() before parse_args() and load_settings() after it.
Consumers declare their settings in a settings.py file in their package and import them where they are used.
"""

from olscommon.settings.settings import Setting
from olscommon.settings.settings import init_settings
from olscommon.settings.settings import load_settings
from olscommon.settings.settings import setting

# WARNING: Use the setting() function (not the Setting class) to declare settings.
#          Setting may be used to type-hint optional settings like Setting[int | None].
__all__ = ["init_settings", "load_settings", "setting", "Setting"]
