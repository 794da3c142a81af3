"""Record store backed by a single JSON document.

The whole collection is held in memory and the file is fully rewritten after
every mutation. There is no locking: two processes (or two racing requests)
writing at once can lose an update, and a crash mid-write can leave the file
truncated.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import StoreCorruptedError
from ..models.project import ProjectRecord
from .base import SEARCH_TYPES, ProjectStats, ProjectStore, searchable_values

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "timestamp")


class JsonProjectStore(ProjectStore):
    """ProjectStore persisted as ``{"projects": [...]}`` in one file."""

    def __init__(self, db_path: Path):
        """Load the database, creating an empty one if the file is missing.

        Args:
            db_path: Path of the JSON database file

        Raises:
            StoreCorruptedError: If the file is not a valid database document
        """
        self.db_path = Path(db_path)
        self._projects: list[ProjectRecord] = []

        if self.db_path.exists():
            self._projects = self._load()
            logger.info(
                "Loaded %d projects from %s", len(self._projects), self.db_path
            )
        else:
            self._save()
            logger.info("Created empty project database at %s", self.db_path)

    def _load(self) -> list[ProjectRecord]:
        try:
            with open(self.db_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(
                f"Project database {self.db_path} is not valid JSON: {e}"
            ) from e

        # Older databases stored a bare array
        if isinstance(data, dict):
            items = data.get("projects", [])
        else:
            items = data
        if not isinstance(items, list):
            raise StoreCorruptedError(
                f"Project database {self.db_path} has no project list"
            )

        try:
            return [ProjectRecord.from_dict(item) for item in items]
        except ValidationError as e:
            raise StoreCorruptedError(
                f"Project database {self.db_path} has an invalid record: {e}"
            ) from e

    def _save(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        document = {"projects": [p.to_json_dict() for p in self._projects]}
        with open(self.db_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)

    def create(self, record: ProjectRecord) -> ProjectRecord:
        self._projects.append(record)
        self._save()
        return record

    def update(
        self, project_id: str, patch: ProjectRecord | dict
    ) -> ProjectRecord | None:
        for index, existing in enumerate(self._projects):
            if existing.id != project_id:
                continue

            if isinstance(patch, ProjectRecord):
                changes = patch.to_json_dict()
            else:
                changes = {
                    (to_camel(key) if "_" in key else key): value
                    for key, value in patch.items()
                }

            merged = existing.to_json_dict()
            merged.update(changes)
            for field in IMMUTABLE_FIELDS:
                merged[field] = getattr(existing, field)

            updated = ProjectRecord.from_dict(merged)
            self._projects[index] = updated
            self._save()
            return updated

        logger.warning("Update skipped: no project with id %s", project_id)
        return None

    def get_by_id(self, project_id: str) -> ProjectRecord | None:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def get_all(self) -> list[ProjectRecord]:
        return list(self._projects)

    def search(
        self, query: str | None, search_type: str | None = None
    ) -> list[ProjectRecord]:
        key = search_type or ""
        if key not in SEARCH_TYPES:
            raise ValueError(
                f"Unknown search type '{search_type}'. "
                f"Expected one of: {', '.join(k for k in SEARCH_TYPES if k)}"
            )
        field = SEARCH_TYPES[key]

        needle = (query or "").strip().lower()
        if not needle:
            return self.get_all()

        return [
            project
            for project in self._projects
            if any(needle in value.lower() for value in searchable_values(project, field))
        ]

    def stats(self) -> ProjectStats:
        total_projects = len(self._projects)
        total_members = sum(p.member_count for p in self._projects)
        timestamps = [p.timestamp for p in self._projects if p.timestamp]

        return ProjectStats(
            total_projects=total_projects,
            total_team_members=total_members,
            average_team_size=(
                round(total_members / total_projects, 2) if total_projects else 0.0
            ),
            total_file_bytes=sum(p.total_file_bytes() for p in self._projects),
            latest_submission=max(timestamps) if timestamps else None,
            database_path=str(self.db_path),
            database_size_bytes=(
                self.db_path.stat().st_size if self.db_path.exists() else 0
            ),
        )

    def compact(self) -> bool:
        """Drop duplicate ids and rewrite the file.

        The first copy of an id is the one ``get_by_id`` and ``update`` act
        on, so it is the copy that survives.
        """
        kept: dict[str, ProjectRecord] = {}
        for project in self._projects:
            kept.setdefault(project.id, project)

        removed = len(self._projects) - len(kept)
        self._projects = list(kept.values())

        try:
            self._save()
        except OSError:
            logger.exception("Failed to compact project database %s", self.db_path)
            return False

        logger.info(
            "Compacted project database %s (%d duplicates removed)",
            self.db_path,
            removed,
        )
        return True
