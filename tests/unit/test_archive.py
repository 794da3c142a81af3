"""Tests for whole-project ZIP archives."""

import zipfile

import pytest

from projectportal.services.archive import build_project_archive


@pytest.fixture
def project_dir(tmp_path):
    folder = tmp_path / "Test_App_2025-03-01_14-05-09"
    (folder / "1.INSTALLATION").mkdir(parents=True)
    (folder / "2.README").mkdir()
    (folder / "3.SOURCE").mkdir()
    (folder / "2.README" / "ReadMe.txt").write_text("hello readme")
    (folder / "project-info.json").write_text("{}")
    return folder


class TestBuildProjectArchive:
    """Tests for build_project_archive."""

    def test_contains_whole_tree_under_folder_name(self, project_dir, tmp_path):
        dest = build_project_archive(project_dir, project_dir.name, tmp_path / "out.zip")

        with zipfile.ZipFile(dest) as zf:
            names = set(zf.namelist())
            readme = zf.read(f"{project_dir.name}/2.README/ReadMe.txt")

        assert f"{project_dir.name}/project-info.json" in names
        assert f"{project_dir.name}/1.INSTALLATION/" in names  # empty dir kept
        assert readme == b"hello readme"

    def test_uses_deflate(self, project_dir, tmp_path):
        dest = build_project_archive(project_dir, project_dir.name, tmp_path / "out.zip")

        with zipfile.ZipFile(dest) as zf:
            info = zf.getinfo(f"{project_dir.name}/2.README/ReadMe.txt")

        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_default_destination_is_temp_file(self, project_dir):
        dest = build_project_archive(project_dir, "bundle")
        try:
            assert dest.name.startswith("bundle-")
            assert zipfile.is_zipfile(dest)
        finally:
            dest.unlink()

    def test_missing_folder_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            build_project_archive(tmp_path / "missing", "missing")
