"""Stages uploaded artifacts and moves them into their project subfolder.

Each upload is copied to a uniquely named temp file first, then moved to a
fixed target name inside the project folder. The temp file is removed on
every exit path, including a failed move.
"""

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterator

from ..exceptions import UploadTooLargeError
from ..models.config import MAX_UPLOAD_BYTES
from .project_structure import INSTALLATION_DIR, README_DIR, SOURCE_DIR

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class ArtifactKind(str, Enum):
    """Artifact types a team uploads. The value is the form field name."""

    INSTALLATION = "installation"
    README = "readme"
    SOURCE = "source"

    @property
    def subfolder(self) -> str:
        return {
            ArtifactKind.INSTALLATION: INSTALLATION_DIR,
            ArtifactKind.README: README_DIR,
            ArtifactKind.SOURCE: SOURCE_DIR,
        }[self]

    def target_name(self, original_name: str | None) -> str:
        """
        Fixed file name used inside the project folder.

        Args:
            original_name: File name sent by the client

        Returns:
            ``installation<ext>``, ``ReadMe<ext>`` (``ReadMe.txt`` without an
            extension) or ``project.zip``
        """
        ext = os.path.splitext(original_name or "")[1]
        if self is ArtifactKind.INSTALLATION:
            return f"installation{ext}"
        if self is ArtifactKind.README:
            return f"ReadMe{ext}" if ext else "ReadMe.txt"
        return "project.zip"


@dataclass
class PlacedFile:
    """Result of relocating one upload."""

    path: Path
    file_name: str
    size: int


class UploadStager:
    """Copies upload streams to a temp area and relocates them."""

    def __init__(self, temp_dir: Path, max_bytes: int = MAX_UPLOAD_BYTES):
        """
        Args:
            temp_dir: Staging directory (created on first use)
            max_bytes: Size ceiling per uploaded file
        """
        self.temp_dir = Path(temp_dir)
        self.max_bytes = max_bytes

    @contextmanager
    def staged_upload(
        self, stream: BinaryIO, field_name: str, original_name: str | None
    ) -> Iterator[tuple[Path, int]]:
        """
        Copy ``stream`` into a collision-resistant temp file.

        Yields:
            Tuple of (temp path, bytes written). The temp file is deleted on
            exit unless it has already been moved away.

        Raises:
            UploadTooLargeError: If the stream exceeds ``max_bytes``
        """
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        ext = os.path.splitext(original_name or "")[1]
        fd, name = tempfile.mkstemp(
            prefix=f"{field_name}-", suffix=ext, dir=self.temp_dir
        )
        temp_path = Path(name)
        try:
            size = 0
            with os.fdopen(fd, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise UploadTooLargeError(self.max_bytes)
                    out.write(chunk)
            yield temp_path, size
        finally:
            temp_path.unlink(missing_ok=True)

    def place(
        self,
        kind: ArtifactKind,
        stream: BinaryIO,
        original_name: str | None,
        project_path: Path,
    ) -> PlacedFile:
        """
        Stage an upload and move it into the artifact's subfolder.

        An existing file with the same target name is replaced.

        Args:
            kind: Which artifact is being uploaded
            stream: Readable binary stream of the upload body
            original_name: Client-side file name (used for the extension)
            project_path: Project folder returned by create-project

        Returns:
            PlacedFile with final path, name and size
        """
        file_name = kind.target_name(original_name)
        target_dir = Path(project_path) / kind.subfolder
        target = target_dir / file_name

        with self.staged_upload(stream, kind.value, original_name) as (
            temp_path,
            size,
        ):
            target_dir.mkdir(parents=True, exist_ok=True)
            if target.exists():
                target.unlink()
            shutil.move(str(temp_path), str(target))

        logger.info("Placed %s upload at %s (%d bytes)", kind.value, target, size)
        return PlacedFile(path=target, file_name=file_name, size=size)
