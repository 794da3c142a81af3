"""ZIP archives of whole project folders."""

import os
import tempfile
import zipfile
from pathlib import Path


def build_project_archive(
    project_path: Path, folder_name: str, dest: Path | None = None
) -> Path:
    """
    Zip an entire project folder at maximum compression.

    Entries are stored under a top-level ``folder_name/`` directory, empty
    subfolders included.

    Args:
        project_path: Folder to archive
        folder_name: Name of the top-level directory inside the archive
        dest: Output path (a new temp file when omitted; caller deletes it)

    Returns:
        Path of the written archive

    Raises:
        FileNotFoundError: If ``project_path`` is not a directory
    """
    project_path = Path(project_path)
    if not project_path.is_dir():
        raise FileNotFoundError(f"Project folder not found: {project_path}")

    if dest is None:
        fd, name = tempfile.mkstemp(prefix=f"{folder_name}-", suffix=".zip")
        os.close(fd)
        dest = Path(name)

    try:
        with zipfile.ZipFile(
            dest, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
        ) as zf:
            zf.write(project_path, folder_name)
            for path in sorted(project_path.rglob("*")):
                zf.write(path, Path(folder_name) / path.relative_to(project_path))
    except BaseException:
        dest.unlink(missing_ok=True)
        raise

    return dest
