"""FastAPI application factory."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..models.config import PortalConfig, discover_config
from ..services.completion import CompletionHandler
from ..services.matching import MatchPolicy
from ..services.migration import LegacyFolderMigrator
from ..services.upload_staging import UploadStager
from ..storage.base import ProjectStore
from ..storage.json_store import JsonProjectStore
from .errors import register_error_handlers
from .routes import router

logger = logging.getLogger(__name__)

PACKAGE_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"

# Config file read by app_factory (set by `projectportal serve --reload`)
CONFIG_ENV_VAR = "PROJECTPORTAL_CONFIG"


@dataclass
class PortalServices:
    """Objects shared by every request, stored on ``app.state.portal``."""

    config: PortalConfig
    store: ProjectStore
    stager: UploadStager
    completion: CompletionHandler
    migrator: LegacyFolderMigrator
    public_dir: Path


def create_app(
    config: PortalConfig | None = None,
    store: ProjectStore | None = None,
    match_policy: MatchPolicy | None = None,
) -> FastAPI:
    """
    Build the portal application.

    Args:
        config: Portal settings (defaults when omitted)
        store: Record store (a JsonProjectStore at ``config.database_path``
            when omitted)
        match_policy: Rule deciding when a completion updates an existing
            record (name and path equality when omitted)

    Returns:
        Configured FastAPI app
    """
    config = config or PortalConfig()
    store = store or JsonProjectStore(config.database_path)
    public_dir = config.public_dir or PACKAGE_PUBLIC_DIR

    app = FastAPI(title="Student Project Portal", version=__version__)
    app.state.portal = PortalServices(
        config=config,
        store=store,
        stager=UploadStager(config.upload_temp_dir, config.max_upload_bytes),
        completion=CompletionHandler(store, match_policy),
        migrator=LegacyFolderMigrator(store),
        public_dir=public_dir,
    )

    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]
    )
    register_error_handlers(app)
    app.include_router(router)

    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir), name="public")
    else:
        logger.warning("Static directory %s not found; pages disabled", public_dir)

    return app


def app_factory() -> FastAPI:
    """Build the app from the config named by ``PROJECTPORTAL_CONFIG``.

    Used by uvicorn when serving with auto-reload, which needs an import
    string rather than an app instance.
    """
    config_path = os.environ.get(CONFIG_ENV_VAR)
    return create_app(
        discover_config(Path.cwd(), Path(config_path) if config_path else None)
    )
