"""HTTP routes for the submission portal.

Handlers are plain ``def`` functions: all of their work is blocking
filesystem I/O, which FastAPI runs in its thread pool.
"""

import logging
import os
from pathlib import Path

from fastapi import APIRouter, File, Form, Query, Request, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from ..exceptions import InvalidRequestError, MissingFieldError, NotFoundError
from ..models.project import STUDENT_INFO, TEAM_MEMBERS, FileMetadata, ProjectRecord
from ..services.archive import build_project_archive
from ..services.migration import LEGACY_NUMBERED_STUDENT_INFO_FILE, LEGACY_TEAM_MEMBERS_FILE
from ..services.project_structure import STUDENT_INFO_FILE, create_project_structure
from ..services.student_info import write_student_info
from ..services.upload_staging import ArtifactKind
from .schemas import CompleteProjectBody, CreateProjectBody, LocationPreferenceBody

logger = logging.getLogger(__name__)

router = APIRouter()

# Upload response key holding the final path, per artifact
_PATH_KEYS = {
    ArtifactKind.README: "readmePath",
    ArtifactKind.INSTALLATION: "installPath",
    ArtifactKind.SOURCE: "sourcePath",
}


def _services(request: Request):
    return request.app.state.portal


def _page(request: Request, name: str) -> FileResponse:
    page = _services(request).public_dir / name
    if not page.is_file():
        raise NotFoundError(f"Page not found: {name}")
    return FileResponse(page, media_type="text/html")


def _require_project(request: Request, project_id: str) -> ProjectRecord:
    project = _services(request).store.get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.get("/", include_in_schema=False)
def index(request: Request):
    return _page(request, "index.html")


@router.get("/search", include_in_schema=False)
def search_page(request: Request):
    return _page(request, "search.html")


@router.post("/api/location-preference")
def location_preference(request: Request, body: LocationPreferenceBody):
    if body.use_default:
        default_path = _services(request).config.default_save_path
        default_path.mkdir(parents=True, exist_ok=True)
        return {"success": True, "path": str(default_path)}
    return {"success": True, "needsFolderPicker": True}


@router.post("/api/create-project")
def create_project(body: CreateProjectBody):
    if not body.project_name or not body.save_path:
        raise MissingFieldError("Project name and save path are required")

    save_path = Path(body.save_path).resolve()
    save_path.mkdir(parents=True, exist_ok=True)
    folder = create_project_structure(save_path, body.project_name)

    student_info_path = None
    if body.team_members:
        student_info_path = str(
            write_student_info(folder.project_path, body.project_name, body.team_members)
        )

    logger.info("Project created: %s at %s", body.project_name, folder.project_path)
    return {
        "success": True,
        "projectPath": str(folder.project_path),
        "folderName": folder.folder_name,
        "savePath": str(save_path),
        "studentInfoPath": student_info_path,
        "message": "Project folder created successfully",
    }


def _upload(
    request: Request,
    kind: ArtifactKind,
    upload: UploadFile | None,
    project_path: str | None,
) -> dict:
    if upload is None:
        raise MissingFieldError("No file uploaded")
    if not project_path:
        raise MissingFieldError("Project path is required")

    try:
        placed = _services(request).stager.place(
            kind, upload.file, upload.filename, Path(project_path)
        )
    finally:
        upload.file.close()

    return {
        "success": True,
        _PATH_KEYS[kind]: str(placed.path),
        "fileName": placed.file_name,
        "fileSize": placed.size,
    }


@router.post("/api/upload-readme")
def upload_readme(
    request: Request,
    readme: UploadFile | None = File(None),
    projectPath: str | None = Form(None),
):
    return _upload(request, ArtifactKind.README, readme, projectPath)


@router.post("/api/upload-installation")
def upload_installation(
    request: Request,
    installation: UploadFile | None = File(None),
    projectPath: str | None = Form(None),
):
    return _upload(request, ArtifactKind.INSTALLATION, installation, projectPath)


@router.post("/api/upload-source")
def upload_source(
    request: Request,
    source: UploadFile | None = File(None),
    projectPath: str | None = Form(None),
):
    return _upload(request, ArtifactKind.SOURCE, source, projectPath)


@router.post("/api/complete-project")
def complete_project(request: Request, body: CompleteProjectBody):
    record = _services(request).completion.complete(body.to_request())
    return {
        "success": True,
        "projectData": record.to_json_dict(),
        "message": "Project submitted successfully",
    }


@router.get("/api/search")
def search_projects(
    request: Request,
    query: str | None = None,
    search_type: str | None = Query(None, alias="type"),
):
    try:
        projects = _services(request).store.search(query, search_type)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    return {"success": True, "projects": [p.to_json_dict() for p in projects]}


@router.get("/api/projects")
def list_projects(request: Request):
    projects = _services(request).store.get_all()
    return {"success": True, "projects": [p.to_json_dict() for p in projects]}


@router.get("/api/project/{project_id}")
def get_project(request: Request, project_id: str):
    project = _require_project(request, project_id)
    return {"success": True, "project": project.to_json_dict()}


def _legacy_file(project: ProjectRecord, file_type: str) -> FileMetadata | None:
    """Locate student/team files that older records never indexed."""
    if file_type == STUDENT_INFO:
        candidates = (LEGACY_NUMBERED_STUDENT_INFO_FILE, STUDENT_INFO_FILE)
    elif file_type == TEAM_MEMBERS:
        candidates = (LEGACY_TEAM_MEMBERS_FILE,)
    else:
        return None

    for name in candidates:
        path = Path(project.project_path) / name
        if path.exists():
            return FileMetadata(name=name, path=str(path))
    return None


@router.get("/api/download/{project_id}/{file_type}")
def download_file(request: Request, project_id: str, file_type: str):
    project = _require_project(request, project_id)

    file_data = project.files.get(file_type) or _legacy_file(project, file_type)
    if file_data is None or not file_data.path:
        raise NotFoundError("File not found")
    if not Path(file_data.path).is_file():
        raise NotFoundError("File not found on disk")

    return FileResponse(file_data.path, filename=file_data.name)


@router.get("/api/download-project/{project_id}")
def download_project(request: Request, project_id: str):
    project = _require_project(request, project_id)
    if not Path(project.project_path).is_dir():
        raise NotFoundError("Project folder not found")

    folder_name = project.folder_name or Path(project.project_path).name
    archive = build_project_archive(Path(project.project_path), folder_name)
    return FileResponse(
        archive,
        media_type="application/zip",
        filename=f"{folder_name}.zip",
        background=BackgroundTask(os.unlink, archive),
    )


@router.get("/api/stats")
def stats(request: Request):
    return {"success": True, "stats": _services(request).store.stats().to_json_dict()}


@router.post("/api/update-existing-folders")
def update_existing_folders(request: Request):
    result = _services(request).migrator.run()
    return {
        "success": True,
        "message": (
            f"Updated {result.updated_count} existing folders with new file structure"
        ),
        "updatedCount": result.updated_count,
        "failedIds": result.failed_ids,
    }


@router.post("/api/compact-database")
def compact_database(request: Request):
    success = _services(request).store.compact()
    return {
        "success": success,
        "message": (
            "Database compacted successfully" if success else "Failed to compact database"
        ),
    }
