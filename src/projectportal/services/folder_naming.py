"""Filesystem-safe, timestamped folder names for project submissions."""

import re
from datetime import datetime

MAX_NAME_LENGTH = 50
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_FORBIDDEN_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RUN = re.compile(r"\s+")


def clean_project_name(project_name: str) -> str:
    """Replace path-illegal characters and whitespace runs with underscores.

    The result is truncated to ``MAX_NAME_LENGTH`` characters.
    """
    cleaned = _FORBIDDEN_CHARS.sub("_", project_name)
    cleaned = _WHITESPACE_RUN.sub("_", cleaned)
    return cleaned[:MAX_NAME_LENGTH]


def generate_folder_name(project_name: str, now: datetime | None = None) -> str:
    """
    Build ``<cleaned-name>_<timestamp>`` for a new project folder.

    Two calls in the same second for the same cleaned name return the same
    folder name.

    Args:
        project_name: Name as typed by the team
        now: Timestamp to use (defaults to current local time)

    Returns:
        Folder name such as ``Library_System_2025-03-01_14-05-09``
    """
    now = now or datetime.now()
    return f"{clean_project_name(project_name)}_{now.strftime(TIMESTAMP_FORMAT)}"
