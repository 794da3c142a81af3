"""Unit tests for the top-level CLI commands."""

import json
import os

import pytest
from click.testing import CliRunner

from projectportal.cli.main import cli
from projectportal.models.project import FileMetadata
from projectportal.storage.json_store import JsonProjectStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Config pointing at a database in the temp directory."""
    path = tmp_path / "portal.yaml"
    path.write_text(f"database_path: {tmp_path / 'projects.json'}\n")
    return path


@pytest.fixture
def seeded(tmp_path, make_record):
    store = JsonProjectStore(tmp_path / "projects.json")
    store.create(make_record(project_name="Library System"))
    store.create(make_record(project_name="Weather Bot", project_path=str(tmp_path / "wb")))
    return store


@pytest.fixture
def uvicorn_calls(monkeypatch):
    """Record uvicorn.run calls instead of starting a server."""
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


class TestServe:
    def test_help_lists_options(self, runner):
        result = runner.invoke(cli, ["serve", "--help"])

        assert result.exit_code == 0
        for option in ("--host", "--port", "--config", "--reload"):
            assert option in result.output

    def test_serve_config_option(self, runner, tmp_path, uvicorn_calls):
        path = tmp_path / "serve.yaml"
        path.write_text(f"port: 4321\ndatabase_path: {tmp_path / 'projects.json'}\n")

        result = runner.invoke(cli, ["serve", "--config", str(path)])

        assert result.exit_code == 0
        (args, kwargs), = uvicorn_calls
        assert kwargs["port"] == 4321
        assert args[0].state.portal.config.database_path == tmp_path / "projects.json"

    def test_serve_config_overrides_group_config(
        self, runner, tmp_path, config_file, uvicorn_calls
    ):
        path = tmp_path / "serve.yaml"
        path.write_text(f"port: 4321\ndatabase_path: {tmp_path / 'projects.json'}\n")

        result = runner.invoke(
            cli, ["--config", str(config_file), "serve", "--config", str(path)]
        )

        assert result.exit_code == 0
        assert uvicorn_calls[0][1]["port"] == 4321

    def test_serve_falls_back_to_group_config(
        self, runner, tmp_path, config_file, uvicorn_calls
    ):
        result = runner.invoke(cli, ["--config", str(config_file), "serve", "--port", "9000"])

        assert result.exit_code == 0
        (args, kwargs), = uvicorn_calls
        assert kwargs["port"] == 9000
        assert args[0].state.portal.config.database_path == tmp_path / "projects.json"

    def test_reload_uses_app_factory(
        self, runner, config_file, uvicorn_calls, monkeypatch
    ):
        from projectportal.api.app import CONFIG_ENV_VAR

        monkeypatch.setenv(CONFIG_ENV_VAR, "unset")

        result = runner.invoke(cli, ["serve", "--config", str(config_file), "--reload"])

        assert result.exit_code == 0
        (args, kwargs), = uvicorn_calls
        assert args == ("projectportal.api.app:app_factory",)
        assert kwargs["factory"] is True
        assert kwargs["reload"] is True
        assert os.environ[CONFIG_ENV_VAR] == str(config_file.resolve())

    def test_app_factory_reads_config_from_environment(
        self, tmp_path, config_file, monkeypatch
    ):
        from projectportal.api.app import CONFIG_ENV_VAR, app_factory

        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        app = app_factory()

        assert app.state.portal.config.database_path == tmp_path / "projects.json"


class TestStats:
    def test_stats_output(self, runner, config_file, seeded):
        result = runner.invoke(cli, ["--config", str(config_file), "stats"])

        assert result.exit_code == 0
        assert "Projects:       2" in result.output
        assert "Team members:   4" in result.output


class TestSearch:
    def test_search_prints_matches(self, runner, config_file, seeded):
        result = runner.invoke(cli, ["--config", str(config_file), "search", "weather"])

        assert result.exit_code == 0
        assert "Weather Bot" in result.output
        assert "Library System" not in result.output

    def test_search_no_results(self, runner, config_file, seeded):
        result = runner.invoke(
            cli, ["--config", str(config_file), "search", "library", "--type", "usn"]
        )

        assert result.exit_code == 0
        assert "No matching projects" in result.output

    def test_search_bad_type(self, runner, config_file, seeded):
        result = runner.invoke(
            cli, ["--config", str(config_file), "search", "x", "--type", "colour"]
        )

        assert result.exit_code == 1
        assert "Unknown search type" in result.output


class TestCompact:
    def test_compact_removes_duplicates(self, runner, config_file, seeded, tmp_path):
        record = seeded.get_all()[0]
        seeded.create(record)

        result = runner.invoke(cli, ["--config", str(config_file), "compact"])

        data = json.loads((tmp_path / "projects.json").read_text())
        assert result.exit_code == 0
        assert "Database compacted" in result.output
        assert len(data["projects"]) == 2


class TestMigrate:
    def test_migrate_reports_count(self, runner, config_file, tmp_path, make_record):
        folder = tmp_path / "legacy"
        (folder / "SOURCE").mkdir(parents=True)
        store = JsonProjectStore(tmp_path / "projects.json")
        store.create(
            make_record(
                project_path=str(folder),
                files={
                    "source": FileMetadata(
                        name="project.zip", path=str(folder / "SOURCE" / "project.zip")
                    )
                },
            )
        )

        result = runner.invoke(cli, ["--config", str(config_file), "migrate"])

        assert result.exit_code == 0
        assert "Updated 1 existing folders" in result.output
        assert (folder / "3.SOURCE").is_dir()


class TestErrors:
    def test_corrupt_database(self, runner, config_file, tmp_path):
        (tmp_path / "projects.json").write_text("{oops")

        result = runner.invoke(cli, ["--config", str(config_file), "stats"])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_invalid_config(self, runner, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("port: -1\n")

        result = runner.invoke(cli, ["--config", str(bad), "stats"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "projectportal" in result.output
