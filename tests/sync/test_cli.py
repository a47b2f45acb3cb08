"""Tests for the kobo-sync command line."""

import argparse

import pytest

from sync.cli import cmd_colors, cmd_run, settings_from_args
from sync.settings import MergeStrategy

CONFIG_VARS = [
    "KOBO_DB_PATH",
    "STORAGE_FOLDER",
    "TEMPLATE_PATH",
    "SORT_BY_CHAPTER_PROGRESS",
    "IMPORT_ALL_BOOKS",
    "OLLAMA_MODEL",
    "OLLAMA_BASE_URL",
    "DEFINITION_WORKERS",
    "MERGE_STRATEGY",
    "KEEP_ORPHANED_NOTES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without configuration from the environment."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


def run_args(**overrides):
    values = {
        "db": None,
        "output": None,
        "template": None,
        "sort_by_progress": False,
        "import_all_books": False,
        "model": None,
        "ollama_url": None,
        "strategy": None,
        "keep_orphans": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestSettingsFromArgs:
    """Tests for settings_from_args."""

    def test_overrides_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STORAGE_FOLDER", "from-env")
        monkeypatch.setenv("OLLAMA_MODEL", "llama3.2")

        settings = settings_from_args(
            run_args(output=tmp_path, strategy="append", keep_orphans=True, ollama_url="http://gpu:11434/")
        )

        assert settings.storage_folder == tmp_path
        assert settings.ollama_model == "llama3.2"
        assert settings.ollama_base_url == "http://gpu:11434"
        assert settings.strategy is MergeStrategy.APPEND
        assert settings.keep_orphans is True

    def test_environment_used_without_flags(self, monkeypatch):
        monkeypatch.setenv("IMPORT_ALL_BOOKS", "1")
        assert settings_from_args(run_args()).import_all_books is True


class TestCmdRun:
    """Tests for the run command."""

    def test_writes_documents(self, kobo_db_path, tmp_path):
        output = tmp_path / "vault"

        exit_code = cmd_run(run_args(db=kobo_db_path, output=output, import_all_books=True))

        assert exit_code == 0
        dune = (output / "Dune.md").read_text(encoding="utf-8")
        assert "## Chapter 1" in dune
        assert "> Quote : Fear is the mind-killer\n\n**Note:** Litany" in dune
        assert "- kwisatz ::: ...\n" in dune
        assert "## Unknown Chapter" in dune
        assert (output / "Emma.md").is_file()

    def test_rerun_keeps_user_notes(self, kobo_db_path, tmp_path):
        output = tmp_path / "vault"
        cmd_run(run_args(db=kobo_db_path, output=output))
        path = output / "Dune.md"
        path.write_text(path.read_text(encoding="utf-8") + "\n\nfinished in March", encoding="utf-8")

        assert cmd_run(run_args(db=kobo_db_path, output=output)) == 0

        assert path.read_text(encoding="utf-8").endswith("\n\nfinished in March")

    def test_missing_database(self, tmp_path, capsys):
        exit_code = cmd_run(run_args(db=tmp_path / "missing.sqlite", output=tmp_path))

        assert exit_code == 1
        assert "not found" in capsys.readouterr().err

    def test_no_database_selected(self, tmp_path, capsys):
        assert cmd_run(run_args(output=tmp_path)) == 1
        assert "No Kobo database selected" in capsys.readouterr().err

    def test_invalid_configuration(self, monkeypatch, kobo_db_path, capsys):
        monkeypatch.setenv("MERGE_STRATEGY", "overwrite")

        assert cmd_run(run_args(db=kobo_db_path)) == 1
        assert "Unsupported merge strategy" in capsys.readouterr().err


class TestCmdColors:
    """Tests for the colors command."""

    def test_color_counts(self, kobo_db_path):
        assert cmd_colors(argparse.Namespace(db=kobo_db_path)) == 0

    def test_missing_database(self, tmp_path):
        assert cmd_colors(argparse.Namespace(db=tmp_path / "missing.sqlite")) == 1
