"""Record store interface used by the services and the HTTP layer."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any

from ..models.project import ProjectRecord

# Search type -> canonical field group; None searches every group
SEARCH_TYPES: dict[str, str | None] = {
    "": None,
    "all": None,
    "project": "project",
    "projectName": "project",
    "name": "project",
    "member": "member",
    "teamMember": "member",
    "student": "member",
    "usn": "usn",
    "studentId": "usn",
    "folder": "folder",
    "folderName": "folder",
}


def searchable_values(record: ProjectRecord, field: str | None) -> list[str]:
    """Strings of ``record`` that a search over ``field`` looks at."""
    groups = {
        "project": [record.project_name],
        "member": [m.name for m in record.team_members],
        "usn": [m.usn for m in record.team_members],
        "folder": [record.folder_name or ""],
    }
    if field is None:
        return [value for values in groups.values() for value in values]
    return groups[field]


@dataclass
class ProjectStats:
    """Aggregate usage numbers for the store."""

    total_projects: int
    total_team_members: int
    average_team_size: float
    total_file_bytes: int
    latest_submission: str | None
    database_path: str | None = None
    database_size_bytes: int = 0

    def to_json_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {
            "totalProjects": data["total_projects"],
            "totalTeamMembers": data["total_team_members"],
            "averageTeamSize": data["average_team_size"],
            "totalFileBytes": data["total_file_bytes"],
            "latestSubmission": data["latest_submission"],
            "databasePath": data["database_path"],
            "databaseSizeBytes": data["database_size_bytes"],
        }


class ProjectStore(ABC):
    """Storage capability for project records.

    Implementations decide durability; callers only rely on these methods.
    """

    @abstractmethod
    def create(self, record: ProjectRecord) -> ProjectRecord:
        """Insert a record and return it."""

    @abstractmethod
    def update(
        self, project_id: str, patch: ProjectRecord | dict
    ) -> ProjectRecord | None:
        """Overwrite fields of the record with ``project_id``.

        ``id`` and ``timestamp`` are never changed. Returns None when no
        record has that id.
        """

    @abstractmethod
    def get_by_id(self, project_id: str) -> ProjectRecord | None:
        """Return the record with ``project_id`` or None."""

    @abstractmethod
    def get_all(self) -> list[ProjectRecord]:
        """Return every record in insertion order."""

    @abstractmethod
    def search(self, query: str | None, search_type: str | None = None) -> list[ProjectRecord]:
        """Case-insensitive substring search.

        Raises:
            ValueError: If ``search_type`` is not a known search type
        """

    @abstractmethod
    def stats(self) -> ProjectStats:
        """Return aggregate counts."""

    @abstractmethod
    def compact(self) -> bool:
        """Rewrite the backing storage; True on success."""
