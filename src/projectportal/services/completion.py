"""Finalizes a submission: record upsert plus the ``project-info.json`` sidecar."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import MissingFieldError
from ..models.project import (
    INSTALLATION,
    README,
    SOURCE,
    STUDENT_INFO,
    FileMetadata,
    ProjectRecord,
    TeamMember,
)
from ..storage.base import ProjectStore
from .matching import MatchPolicy, NameAndPathPolicy, find_match
from .project_structure import (
    INSTALLATION_DIR,
    PROJECT_INFO_FILE,
    README_DIR,
    SOURCE_DIR,
    STUDENT_INFO_FILE,
)
from .student_info import ensure_student_info

logger = logging.getLogger(__name__)

DEFAULT_README_NAME = "ReadMe.txt"
DEFAULT_INSTALLATION_NAME = "installation.txt"
SOURCE_NAME = "project.zip"


@dataclass
class UploadedFile:
    """File details the client echoes back from an upload response."""

    name: str | None = None
    size: int = 0


@dataclass
class CompletionRequest:
    """Everything the client sends to finish a submission."""

    project_name: str | None
    team_members: list[TeamMember] | None
    project_path: str | None
    folder_name: str | None = None
    readme_file: UploadedFile = field(default_factory=UploadedFile)
    installation_file: UploadedFile = field(default_factory=UploadedFile)
    source_file: UploadedFile = field(default_factory=UploadedFile)


class CompletionHandler:
    """Builds and stores the final record for a submission."""

    def __init__(self, store: ProjectStore, match_policy: MatchPolicy | None = None):
        self.store = store
        self.match_policy = match_policy or NameAndPathPolicy()

    def complete(self, request: CompletionRequest) -> ProjectRecord:
        """
        Assemble the record, upsert it and write the sidecar file.

        Args:
            request: Submission details

        Returns:
            The stored ProjectRecord

        Raises:
            MissingFieldError: If project name, team members or path are absent
            OSError: If the project folder cannot be written
        """
        if not request.project_name or request.team_members is None or not request.project_path:
            raise MissingFieldError("Missing required fields")

        project_path = Path(request.project_path)
        readme_name = request.readme_file.name or DEFAULT_README_NAME
        installation_name = request.installation_file.name or DEFAULT_INSTALLATION_NAME

        info_path, info_size = ensure_student_info(
            project_path, request.project_name, request.team_members
        )

        record = ProjectRecord(
            project_name=request.project_name,
            team_members=[
                TeamMember(name=m.name, usn=m.usn) for m in request.team_members
            ],
            folder_name=request.folder_name,
            project_path=str(project_path),
            files={
                README: FileMetadata(
                    name=readme_name,
                    path=str(project_path / README_DIR / readme_name),
                    size=request.readme_file.size,
                ),
                INSTALLATION: FileMetadata(
                    name=installation_name,
                    path=str(project_path / INSTALLATION_DIR / installation_name),
                    size=request.installation_file.size,
                ),
                SOURCE: FileMetadata(
                    name=SOURCE_NAME,
                    path=str(project_path / SOURCE_DIR / SOURCE_NAME),
                    size=request.source_file.size,
                ),
                STUDENT_INFO: FileMetadata(
                    name=STUDENT_INFO_FILE, path=str(info_path), size=info_size
                ),
            },
        )

        existing = find_match(self.match_policy, self.store.get_all(), record)
        if existing is not None:
            record = record.model_copy(
                update={"id": existing.id, "timestamp": existing.timestamp}
            )
            self.store.update(existing.id, record)
            logger.info("Updated existing project: %s", record.project_name)
        else:
            self.store.create(record)
            logger.info("Created new project: %s", record.project_name)

        with open(project_path / PROJECT_INFO_FILE, "w", encoding="utf-8") as f:
            json.dump(record.to_json_dict(), f, indent=2, ensure_ascii=False)

        return record
