"""Tests for the legacy folder migration."""

from projectportal.models.project import FileMetadata
from projectportal.services.migration import LegacyFolderMigrator


def legacy_project(tmp_path, make_record, name="Old App", members=(("Asha", "1RV20CS001"),)):
    """Create an old-layout folder and a matching stored record."""
    folder = tmp_path / name.replace(" ", "_")
    for sub in ("INSTALLATION", "README", "SOURCE"):
        (folder / sub).mkdir(parents=True)
    (folder / "README" / "ReadMe.txt").write_text("readme")
    (folder / "team-members.txt").write_text("Asha")
    (folder / "4.Student-info.txt").write_text("old info")

    return make_record(
        project_name=name,
        project_path=str(folder),
        members=members,
        files={
            "readme": FileMetadata(
                name="ReadMe.txt", path=str(folder / "README" / "ReadMe.txt"), size=6
            ),
            "teamMembers": FileMetadata(
                name="team-members.txt", path=str(folder / "team-members.txt")
            ),
        },
    )


class TestLegacyFolderMigrator:
    """Tests for LegacyFolderMigrator.run."""

    def test_renames_folders_and_backfills_student_info(self, store, tmp_path, make_record):
        record = store.create(legacy_project(tmp_path, make_record))
        folder = tmp_path / "Old_App"

        result = LegacyFolderMigrator(store).run()

        assert result.updated_count == 1
        for old, new in (
            ("INSTALLATION", "1.INSTALLATION"),
            ("README", "2.README"),
            ("SOURCE", "3.SOURCE"),
        ):
            assert not (folder / old).exists()
            assert (folder / new).is_dir()

        assert (folder / "2.README" / "ReadMe.txt").read_text() == "readme"
        assert (folder / "student-info.txt").exists()
        assert not (folder / "team-members.txt").exists()
        assert not (folder / "4.Student-info.txt").exists()

        updated = store.get_by_id(record.id)
        assert "teamMembers" not in updated.files
        assert updated.files["studentInfo"].path == str(folder / "student-info.txt")
        assert updated.files["readme"].path == str(folder / "2.README" / "ReadMe.txt")
        assert updated.timestamp == record.timestamp

    def test_second_run_updates_nothing(self, store, tmp_path, make_record):
        store.create(legacy_project(tmp_path, make_record))
        migrator = LegacyFolderMigrator(store)
        migrator.run()

        assert migrator.run().updated_count == 0

    def test_missing_folder_is_skipped(self, store, tmp_path, make_record):
        gone = store.create(make_record(project_path=str(tmp_path / "gone")))

        result = LegacyFolderMigrator(store).run()

        assert result.updated_count == 0
        assert result.skipped_ids == [gone.id]

    def test_without_members_student_info_not_created(self, store, tmp_path, make_record):
        store.create(legacy_project(tmp_path, make_record, members=()))
        folder = tmp_path / "Old_App"

        result = LegacyFolderMigrator(store).run()

        assert result.updated_count == 1  # folders were still renamed
        assert not (folder / "student-info.txt").exists()
        assert (folder / "team-members.txt").exists()

    def test_one_failure_does_not_abort_batch(self, store, tmp_path, make_record, monkeypatch):
        bad = store.create(legacy_project(tmp_path, make_record, name="Bad One"))
        good = store.create(legacy_project(tmp_path, make_record, name="Good One"))
        migrator = LegacyFolderMigrator(store)
        original = migrator.migrate_project

        def flaky(project):
            if project.id == bad.id:
                raise OSError("permission denied")
            return original(project)

        monkeypatch.setattr(migrator, "migrate_project", flaky)

        result = migrator.run()

        assert result.updated_count == 1
        assert result.failed_ids == [bad.id]
        assert (tmp_path / "Good_One" / "2.README").is_dir()
        assert store.get_by_id(good.id).files["studentInfo"].name == "student-info.txt"
