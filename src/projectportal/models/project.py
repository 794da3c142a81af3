"""Project record models.

Fields are snake_case in Python and camelCase on the wire and on disk, so
``projects.json`` and ``project-info.json`` files written by earlier portal
versions load unchanged.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# File-kind keys used in ProjectRecord.files
README = "readme"
INSTALLATION = "installation"
SOURCE = "source"
STUDENT_INFO = "studentInfo"
TEAM_MEMBERS = "teamMembers"  # legacy, removed by folder migration


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, ready for json.dump."""
        return self.model_dump(mode="json", by_alias=True)


class TeamMember(_CamelModel):
    """One student on a submitting team.

    ``usn`` is the student identifier (university seat number). Neither field
    is unique.
    """

    name: str = ""
    usn: str = ""


class FileMetadata(_CamelModel):
    """A file stored inside a project folder."""

    name: str
    path: str
    size: int = 0


class ProjectRecord(_CamelModel):
    """Metadata for one submitted project.

    ``id`` and ``timestamp`` are assigned on first completion and never
    change afterwards.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    project_name: str
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    team_members: list[TeamMember] = Field(default_factory=list)
    folder_name: str | None = None
    project_path: str
    files: dict[str, FileMetadata] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "ProjectRecord":
        """
        Create a record from a camelCase (or snake_case) dictionary.

        Args:
            data: Dictionary loaded from JSON

        Returns:
            ProjectRecord instance

        Raises:
            pydantic.ValidationError: If required fields are missing
        """
        return cls.model_validate(data)

    @property
    def member_count(self) -> int:
        return len(self.team_members)

    def total_file_bytes(self) -> int:
        return sum(f.size for f in self.files.values())
