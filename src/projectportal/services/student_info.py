"""Renders the ``student-info.txt`` file kept at each project folder root."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

from ..models.project import TeamMember
from .project_structure import STUDENT_INFO_FILE

logger = logging.getLogger(__name__)

_env = Environment(
    loader=PackageLoader("projectportal", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_student_info(
    project_name: str,
    team_members: Iterable[TeamMember],
    now: datetime | None = None,
) -> str:
    """Render the student info text for a team."""
    template = _env.get_template("student-info.txt.j2")
    return template.render(
        project_name=project_name,
        team_members=list(team_members),
        generated_at=(now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S"),
    )


def write_student_info(
    project_path: Path, project_name: str, team_members: Iterable[TeamMember]
) -> Path:
    """Write (or overwrite) ``student-info.txt`` in the project folder.

    Returns:
        Path of the written file
    """
    info_path = Path(project_path) / STUDENT_INFO_FILE
    info_path.write_text(
        render_student_info(project_name, team_members), encoding="utf-8"
    )
    logger.info("Student info file created: %s", info_path)
    return info_path


def ensure_student_info(
    project_path: Path, project_name: str, team_members: Iterable[TeamMember]
) -> tuple[Path, int]:
    """Create ``student-info.txt`` only if it is missing.

    Returns:
        Tuple of (path, size in bytes)
    """
    info_path = Path(project_path) / STUDENT_INFO_FILE
    if not info_path.exists():
        write_student_info(project_path, project_name, team_members)
    return info_path, info_path.stat().st_size
