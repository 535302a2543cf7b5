"""Tests for the atm command line."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from atm.cli import main
from atm.config import AtmPaths

DPKG_STATUS = """\
Package: foo
Status: install ok installed

Package: gcc-12
Status: install ok installed
"""


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def runner():
    return CliRunner(env={"LANGUAGE": "en_US", "LC_ALL": "", "LC_MESSAGES": "", "LANG": ""})


@pytest.fixture
def root(tmp_path):
    paths = AtmPaths.under(tmp_path)
    paths.source_list.parent.mkdir(parents=True)
    paths.dpkg_status.parent.mkdir(parents=True)
    paths.dpkg_status.write_text(DPKG_STATUS)
    return tmp_path


def _write_manifest(tmp_path: Path, topics: list[dict]) -> str:
    path = tmp_path / "topics.json"
    path.write_text(json.dumps(topics))
    return str(path)


def _invoke(runner, root, manifest, *args):
    return runner.invoke(main, ["--root", str(root), "--manifest", manifest, *args])


# ── Tests ─────────────────────────────────────────────────


def test_list_without_history(runner, root):
    manifest = _write_manifest(root, [{"name": "gcc", "packages": ["gcc-12"]}])
    result = _invoke(runner, root, manifest, "list")
    assert result.exit_code == 0, result.output
    assert "gcc" in result.output


def test_enable_then_disable(runner, root):
    manifest = _write_manifest(
        root,
        [
            {"name": "gcc", "packages": ["gcc-12"]},
            {"name": "kernel", "packages": ["linux"]},
        ],
    )
    paths = AtmPaths.under(root)

    result = _invoke(runner, root, manifest, "enable", "gcc")
    assert result.exit_code == 0, result.output
    assert "Subscribed to 1 topic(s)" in result.output
    assert "deb https://repo.aosc.io/debs gcc main" in paths.source_list.read_text()
    assert [t["name"] for t in json.loads(paths.state_file.read_text())] == ["gcc"]

    result = _invoke(runner, root, manifest, "enable", "kernel")
    assert result.exit_code == 0, result.output
    assert [t["name"] for t in json.loads(paths.state_file.read_text())] == ["gcc", "kernel"]

    result = _invoke(runner, root, manifest, "disable", "gcc")
    assert result.exit_code == 0, result.output
    assert "gcc" not in paths.source_list.read_text()
    assert [t["name"] for t in json.loads(paths.state_file.read_text())] == ["kernel"]


def test_enable_unknown_topic(runner, root):
    manifest = _write_manifest(root, [{"name": "gcc", "packages": ["gcc-12"]}])
    result = _invoke(runner, root, manifest, "enable", "nope")
    assert result.exit_code == 1
    assert "No such topic" in result.output
    assert not AtmPaths.under(root).source_list.exists()


def test_closed_without_history_fails(runner, root):
    manifest = _write_manifest(root, [{"name": "gcc", "packages": ["gcc-12"]}])
    result = _invoke(runner, root, manifest, "closed")
    assert result.exit_code == 1
    assert "Error" in result.output


def test_closed_reports_and_prunes(runner, root):
    both = _write_manifest(
        root,
        [
            {"name": "gcc", "packages": ["gcc-12"]},
            {"name": "old-topic", "packages": ["foo", "bar"]},
        ],
    )
    result = _invoke(runner, root, both, "enable", "gcc", "old-topic")
    assert result.exit_code == 0, result.output

    only_gcc = _write_manifest(root, [{"name": "gcc", "packages": ["gcc-12"]}])
    result = _invoke(runner, root, only_gcc, "closed")
    assert result.exit_code == 0, result.output
    assert "old-topic" in result.output
    assert "foo/stable" in result.output
    assert "bar/stable" not in result.output

    paths = AtmPaths.under(root)
    assert "old-topic" in paths.source_list.read_text()

    result = _invoke(runner, root, only_gcc, "closed", "--prune")
    assert result.exit_code == 0, result.output
    assert "old-topic" not in paths.source_list.read_text()
    assert [t["name"] for t in json.loads(paths.state_file.read_text())] == ["gcc"]

    result = _invoke(runner, root, only_gcc, "closed")
    assert result.exit_code == 0, result.output
    assert "No topics have been closed" in result.output


def test_list_shows_closed_topic(runner, root):
    both = _write_manifest(
        root,
        [{"name": "gcc", "packages": ["gcc-12"]}, {"name": "old", "packages": ["foo"]}],
    )
    assert _invoke(runner, root, both, "enable", "old").exit_code == 0

    only_gcc = _write_manifest(root, [{"name": "gcc", "packages": ["gcc-12"]}])
    result = _invoke(runner, root, only_gcc, "list")
    assert result.exit_code == 0, result.output
    assert "(closed)" in result.output


def test_bad_manifest(runner, root):
    result = _invoke(runner, root, str(root / "missing.json"), "list")
    assert result.exit_code == 1
    assert "Error" in result.output


def test_enable_refuses_while_a_topic_is_closed(runner, root):
    both = _write_manifest(
        root,
        [{"name": "old", "packages": ["foo"]}, {"name": "k", "packages": ["linux"]}],
    )
    assert _invoke(runner, root, both, "enable", "old").exit_code == 0

    without_old = _write_manifest(root, [{"name": "k", "packages": ["linux"]}])
    result = _invoke(runner, root, without_old, "enable", "k")
    assert result.exit_code == 1
    assert "atm closed" in result.output

    paths = AtmPaths.under(root)
    assert [t["name"] for t in json.loads(paths.state_file.read_text())] == ["old"]

    result = _invoke(runner, root, without_old, "closed")
    assert result.exit_code == 0, result.output
    assert "foo/stable" in result.output

    assert _invoke(runner, root, without_old, "closed", "--prune").exit_code == 0
    result = _invoke(runner, root, without_old, "enable", "k")
    assert result.exit_code == 0, result.output
    assert [t["name"] for t in json.loads(paths.state_file.read_text())] == ["k"]


def test_list_with_mistyped_snapshot(runner, root):
    paths = AtmPaths.under(root)
    paths.state_dir.mkdir(parents=True)
    paths.state_file.write_text(json.dumps([{"name": "old", "date": "yesterday", "packages": "foo"}]))

    manifest = _write_manifest(root, [{"name": "gcc", "packages": ["gcc-12"]}])
    result = _invoke(runner, root, manifest, "list")
    assert result.exit_code == 0, result.output
    assert "gcc" in result.output


def test_list_with_out_of_range_date(runner, root):
    manifest = _write_manifest(
        root, [{"name": "gcc", "date": 10**20, "packages": ["gcc-12"]}]
    )
    result = _invoke(runner, root, manifest, "list")
    assert result.exit_code == 0, result.output
    assert "gcc" in result.output
