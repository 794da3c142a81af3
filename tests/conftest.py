"""Shared fixtures for portal tests."""

import pytest

from projectportal.models.config import PortalConfig
from projectportal.models.project import FileMetadata, ProjectRecord, TeamMember
from projectportal.storage.json_store import JsonProjectStore


@pytest.fixture
def store(tmp_path):
    """Create an empty JSON store in a temp directory."""
    return JsonProjectStore(tmp_path / "projects.json")


@pytest.fixture
def portal_config(tmp_path):
    """Config pointing every path at the temp directory."""
    return PortalConfig(
        default_save_path=tmp_path / "default-root",
        database_path=tmp_path / "projects.json",
        upload_temp_dir=tmp_path / "upload-temp",
    )


@pytest.fixture
def make_record():
    """Factory for project records with sensible defaults."""

    def _make(
        project_name="Library System",
        project_path="/srv/projects/Library_System_2025-01-01_10-00-00",
        members=(("Asha Rao", "1RV21CS001"), ("Ben Ode", "1RV21CS002")),
        **kwargs,
    ):
        return ProjectRecord(
            project_name=project_name,
            project_path=project_path,
            folder_name=kwargs.pop("folder_name", project_path.rsplit("/", 1)[-1]),
            team_members=[TeamMember(name=n, usn=u) for n, u in members],
            files=kwargs.pop(
                "files",
                {
                    "readme": FileMetadata(
                        name="ReadMe.md", path=f"{project_path}/2.README/ReadMe.md", size=12
                    )
                },
            ),
            **kwargs,
        )

    return _make
