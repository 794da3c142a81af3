"""HTTP interface for the portal."""

from projectportal.api.app import create_app

__all__ = ["create_app"]
