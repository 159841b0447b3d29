# tests/test_cli.py
"""
CLI smoke tests via typer's CliRunner.

Runs use the default hash embedder and the local store inside the
per-test workspace.
"""

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from ragsync.cli import app

pytestmark = pytest.mark.tier2

runner = CliRunner()


@pytest.fixture
def docs(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    root.mkdir()
    (root / "a.md").write_text("# A\n\nFirst document.\n", encoding="utf-8")
    (root / "b.txt").write_text("Second document.\n", encoding="utf-8")
    return root


class TestHelp:
    def test_root_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for name in ("sync", "status", "clear-cache"):
            assert name in result.stdout

    @pytest.mark.parametrize("name", ["sync", "status", "clear-cache"])
    def test_command_help(self, name):
        assert runner.invoke(app, [name, "--help"]).exit_code == 0


class TestSync:
    def test_sync_then_skip(self, docs: Path, workspace: Path):
        first = runner.invoke(app, ["sync", str(docs)])

        assert first.exit_code == 0, first.stdout
        assert "Chunks embedded" in first.stdout
        assert (workspace / "file_cache.json").exists()

        second = runner.invoke(app, ["sync", str(docs)])

        assert second.exit_code == 0
        assert "Sync complete" in second.stdout

    def test_failed_file_exits_1(self, docs: Path):
        (docs / "broken.txt").write_bytes(b"\xff\xfe\xfd")

        result = runner.invoke(app, ["sync", str(docs)])

        assert result.exit_code == 1
        assert "Sync finished with errors" in result.stdout

    def test_missing_config_exits_2(self, docs: Path, tmp_path: Path):
        result = runner.invoke(app, ["sync", str(docs), "--config", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 2

    def test_unreachable_store_exits_2(self, docs: Path, tmp_path: Path):
        config = tmp_path / "sync.yaml"
        config.write_text(
            yaml.safe_dump(
                {"vector_db": {"plugin": "qdrant", "url": "http://127.0.0.1:9", "timeout": 1}}
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["sync", str(docs), "--config", str(config)])

        assert result.exit_code == 2
        assert "Sync aborted" in result.stdout


class TestStatus:
    def test_status_after_sync(self, docs: Path):
        runner.invoke(app, ["sync", str(docs), "--collection", "notes"])
        config = docs.parent / "notes.yaml"
        config.write_text(yaml.safe_dump({"collection": "notes"}), encoding="utf-8")

        result = runner.invoke(app, ["status", "--config", str(config)])

        assert result.exit_code == 0
        assert "2 records in 'notes'" in result.stdout

    def test_status_empty(self):
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "No files cached yet" in result.stdout


class TestClearCache:
    def test_clear_with_yes(self, docs: Path, workspace: Path):
        runner.invoke(app, ["sync", str(docs)])

        result = runner.invoke(app, ["clear-cache", "--yes"])

        assert result.exit_code == 0
        assert "Cleared 2" in result.stdout
        assert not (workspace / "file_cache.json").exists()

    def test_declined_confirmation(self, docs: Path, workspace: Path):
        runner.invoke(app, ["sync", str(docs)])

        result = runner.invoke(app, ["clear-cache"], input="n\n")

        assert result.exit_code == 1
        assert (workspace / "file_cache.json").exists()

    def test_nothing_to_clear(self):
        result = runner.invoke(app, ["clear-cache", "--yes"])

        assert result.exit_code == 0
        assert "No file cache" in result.stdout
