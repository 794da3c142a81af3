"""Data models for project records and portal configuration."""

from projectportal.models.config import PortalConfig
from projectportal.models.project import FileMetadata, ProjectRecord, TeamMember

__all__ = ["FileMetadata", "PortalConfig", "ProjectRecord", "TeamMember"]
