"""Display the current configuration of the server at startup."""

import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import TypedDict

from git import InvalidGitRepositoryError
from git import NoSuchPathError
from git import Repo

from ..settings.settings import SETTINGS
from .settings import DUMP_ALL_CONFIG


class GitInfo(TypedDict):
    "Information about a Git repository for get_git_info()."

    repo: Path | None
    commit: str | None
    branch: str | None


def str_or_na(v: object) -> str:
    "Convert a Python value to a string, with a special case for None."
    return "N/A" if v is None else str(v)


def get_git_info() -> GitInfo:
    """
    Identify the Git checkout the server runs from, if any.

    Installed (non-editable) servers have no repository; all fields are None then.
    """
    result: GitInfo = {"repo": None, "commit": None, "branch": None}
    try:
        repo = Repo(Path(__file__), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return result
    result["repo"] = Path(repo.git_dir)
    if repo.head.is_valid():
        result["commit"] = repo.head.commit.hexsha
    if not repo.head.is_detached:
        result["branch"] = repo.active_branch.name
    return result


def get_pip_info() -> list[str]:
    """
    Get information about the currently installed Python packages.
    """
    return subprocess.run(
        [sys.executable, "-m", "pip", "freeze"], check=True, capture_output=True, text=True
    ).stdout.splitlines()


def dump_config(log: logging.Logger) -> None:
    """
    Record the current configuration and environment of the server.

    Must be called after the logging is initialized and settings are loaded.
    """

    log_lines = [
        "Process configuration:",
        f"    Command line: {shlex.join(sys.argv)}",
        f"    Python: {sys.executable}",
        f"    PID: {os.getpid()}",
        f"    Working dir: {os.getcwd()}",
    ]
    log.info("\n".join(log_lines))

    git_info = get_git_info()
    log_lines = [
        "Git info:",
        f"    Repository: {str_or_na(git_info['repo'])}",
        f"    Branch: {str_or_na(git_info['branch'])}",
        f"    Commit: {str_or_na(git_info['commit'])}",
    ]
    log.info("\n".join(log_lines))

    if DUMP_ALL_CONFIG.get():
        # pip freeze takes a noticeable moment, editors wait for the initialize reply meanwhile
        pip_info = get_pip_info()
        log.info(f"Installed Python packages: {shlex.join(pip_info)}")

    log_lines = ["Effective settings:"]
    for name, value in sorted(SETTINGS.values.items()):
        log_lines.append(f"    {name}: {value}")
    log.info("\n".join(log_lines))
