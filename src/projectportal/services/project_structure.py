"""Creates the numbered folder layout for a project submission."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .folder_naming import generate_folder_name

logger = logging.getLogger(__name__)

INSTALLATION_DIR = "1.INSTALLATION"
README_DIR = "2.README"
SOURCE_DIR = "3.SOURCE"
SUBFOLDERS = (INSTALLATION_DIR, README_DIR, SOURCE_DIR)

STUDENT_INFO_FILE = "student-info.txt"
PROJECT_INFO_FILE = "project-info.json"


@dataclass
class ProjectFolder:
    """Location of a created project folder."""

    project_path: Path
    folder_name: str


def create_project_structure(
    base_path: Path, project_name: str, now: datetime | None = None
) -> ProjectFolder:
    """
    Create ``<base>/<folder>/{1.INSTALLATION,2.README,3.SOURCE}``.

    Directories that already exist are left alone, so files inside them are
    never overwritten.

    Args:
        base_path: Root directory (created if missing)
        project_name: Human-supplied project name
        now: Timestamp used for the folder name

    Returns:
        ProjectFolder with the absolute folder path and its name

    Raises:
        OSError: If the directories cannot be created
    """
    folder_name = generate_folder_name(project_name, now)
    project_path = Path(base_path).resolve() / folder_name

    for subfolder in SUBFOLDERS:
        (project_path / subfolder).mkdir(parents=True, exist_ok=True)

    logger.info("Project folder ready: %s", project_path)
    return ProjectFolder(project_path=project_path, folder_name=folder_name)
