"""Policies deciding whether a completed submission replaces an existing record."""

from typing import Iterable, Protocol

from ..models.project import ProjectRecord


class MatchPolicy(Protocol):
    def matches(self, existing: ProjectRecord, candidate: ProjectRecord) -> bool:
        ...


class NameAndPathPolicy:
    """Same project name and same folder path means the same submission.

    Two teams reusing a name and path pair will overwrite each other.
    """

    def matches(self, existing: ProjectRecord, candidate: ProjectRecord) -> bool:
        return (
            existing.project_name == candidate.project_name
            and existing.project_path == candidate.project_path
        )


class NeverMatchPolicy:
    """Every completion creates a new record."""

    def matches(self, existing: ProjectRecord, candidate: ProjectRecord) -> bool:
        return False


def find_match(
    policy: MatchPolicy, records: Iterable[ProjectRecord], candidate: ProjectRecord
) -> ProjectRecord | None:
    """Return the first record the policy considers the same submission."""
    for record in records:
        if policy.matches(record, candidate):
            return record
    return None
