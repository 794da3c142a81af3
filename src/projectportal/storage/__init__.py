"""Project record storage."""

from projectportal.storage.base import ProjectStats, ProjectStore
from projectportal.storage.json_store import JsonProjectStore

__all__ = ["JsonProjectStore", "ProjectStats", "ProjectStore"]
