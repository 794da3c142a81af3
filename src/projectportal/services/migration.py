"""Upgrades project folders created with the old, unnumbered layout."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from ..models.project import STUDENT_INFO, TEAM_MEMBERS, FileMetadata, ProjectRecord
from ..storage.base import ProjectStore
from .project_structure import INSTALLATION_DIR, README_DIR, SOURCE_DIR, STUDENT_INFO_FILE
from .student_info import write_student_info

logger = logging.getLogger(__name__)

# Old subfolder name -> numbered subfolder name
LEGACY_SUBFOLDERS = {
    "INSTALLATION": INSTALLATION_DIR,
    "README": README_DIR,
    "SOURCE": SOURCE_DIR,
}
LEGACY_TEAM_MEMBERS_FILE = "team-members.txt"
LEGACY_NUMBERED_STUDENT_INFO_FILE = "4.Student-info.txt"


@dataclass
class MigrationResult:
    """Outcome of a migration run."""

    updated_count: int = 0
    skipped_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)


class LegacyFolderMigrator:
    """Renames legacy subfolders and backfills ``student-info.txt``.

    Safe to run repeatedly; projects already on the current layout are left
    untouched.
    """

    def __init__(self, store: ProjectStore):
        self.store = store

    def run(self) -> MigrationResult:
        """Migrate every stored project, isolating per-project failures."""
        result = MigrationResult()

        for project in self.store.get_all():
            if not Path(project.project_path).exists():
                result.skipped_ids.append(project.id)
                continue
            try:
                if self.migrate_project(project):
                    result.updated_count += 1
            except Exception:
                logger.exception("Error updating project %s", project.id)
                result.failed_ids.append(project.id)

        logger.info(
            "Folder migration finished: %d updated, %d skipped, %d failed",
            result.updated_count,
            len(result.skipped_ids),
            len(result.failed_ids),
        )
        return result

    def migrate_project(self, project: ProjectRecord) -> bool:
        """
        Migrate one project folder and persist the changed record.

        Args:
            project: Stored record whose folder exists

        Returns:
            True if anything changed
        """
        project_path = Path(project.project_path)
        files = dict(project.files)
        changed = False

        for old_name, new_name in LEGACY_SUBFOLDERS.items():
            old_dir = project_path / old_name
            new_dir = project_path / new_name
            if old_dir.exists() and not new_dir.exists():
                shutil.move(str(old_dir), str(new_dir))
                files = _repoint_files(files, old_dir, new_dir)
                changed = True

        info_path = project_path / STUDENT_INFO_FILE
        if not info_path.exists() and project.team_members:
            write_student_info(project_path, project.project_name, project.team_members)
            for legacy_name in (LEGACY_TEAM_MEMBERS_FILE, LEGACY_NUMBERED_STUDENT_INFO_FILE):
                (project_path / legacy_name).unlink(missing_ok=True)

            files[STUDENT_INFO] = FileMetadata(
                name=STUDENT_INFO_FILE,
                path=str(info_path),
                size=info_path.stat().st_size,
            )
            files.pop(TEAM_MEMBERS, None)
            changed = True

        if changed:
            self.store.update(
                project.id,
                {"files": {kind: meta.to_json_dict() for kind, meta in files.items()}},
            )
        return changed


def _repoint_files(
    files: dict[str, FileMetadata], old_dir: Path, new_dir: Path
) -> dict[str, FileMetadata]:
    repointed = {}
    for kind, meta in files.items():
        path = Path(meta.path)
        if path.is_relative_to(old_dir):
            meta = meta.model_copy(
                update={"path": str(new_dir / path.relative_to(old_dir))}
            )
        repointed[kind] = meta
    return repointed
