import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from lfm.cli import cli
from lfm.db import Database
from lfm.version import __version__

ITEMS = {
    "items": [
        {
            "id": "lost-1",
            "kind": "lost",
            "category": "electronics",
            "title": "iPhone 15 Pro in Blue Case",
            "description": "Left my phone on the bench at the park entrance",
            "tags": ["iphone", "blue case"],
            "location": {"name": "Riverside Park"},
            "userId": "owner-1",
        },
        {
            "id": "found-1",
            "type": "found",
            "category": "electronics",
            "title": "Found iPhone blue case",
            "description": "Phone found on a bench near the park entrance",
            "tags": ["iphone", "blue"],
            "location": "Riverside Park, north gate",
            "user_id": "finder-1",
        },
    ]
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def imported(runner, test_config, tmp_path):
    items_file = tmp_path / "items.json"
    items_file.write_text(json.dumps(ITEMS), encoding="utf-8")
    result = runner.invoke(cli, ["import-items", str(items_file)], obj=test_config)
    assert result.exit_code == 0, result.output
    return test_config


def _stored_match_id(cfg):
    with Database(Path(cfg["database"]["path"])) as db:
        return db.get_all_matches()[0].id


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for name in ("import-items", "list-items", "match", "generate", "show-match",
                 "set-status", "user-matches", "diagnose", "classify"):
        assert name in result.output


def test_classify(runner, test_config):
    result = runner.invoke(cli, ["classify", "0.85"], obj=test_config)
    assert result.exit_code == 0
    assert result.output.startswith("excellent\t90%+")


def test_classify_out_of_range(runner, test_config):
    result = runner.invoke(cli, ["classify", "1.5"], obj=test_config)
    assert result.exit_code == 1


def test_import_and_list(runner, imported):
    result = runner.invoke(cli, ["list-items", "--kind", "found"], obj=imported)
    assert result.exit_code == 0
    assert "found-1" in result.output
    assert "lost-1" not in result.output
    assert "1 item(s)" in result.output


@pytest.mark.parametrize("record", [
    {"id": "x", "kind": "sideways", "category": "keys"},
    {"id": "x", "kind": "lost", "category": "keys", "tags": "house keys"},
    {"id": "x", "kind": "lost", "category": "keys", "tags": [1, 2]},
])
def test_import_rejects_bad_item(runner, test_config, tmp_path, record):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([record]), encoding="utf-8")
    result = runner.invoke(cli, ["import-items", str(bad)], obj=test_config)
    assert result.exit_code == 1
    with Database(Path(test_config["database"]["path"])) as db:
        assert db.count_items() == 0


def test_match_ranks_without_saving(runner, imported):
    result = runner.invoke(cli, ["match", "lost-1"], obj=imported)
    assert result.exit_code == 0, result.output
    assert "found=found-1" in result.output
    assert "good" in result.output

    with Database(Path(imported["database"]["path"])) as db:
        assert db.count_matches() == 0


def test_match_unknown_item(runner, imported):
    result = runner.invoke(cli, ["match", "ghost"], obj=imported)
    assert result.exit_code == 1


def test_generate_is_idempotent(runner, imported):
    first = runner.invoke(cli, ["generate"], obj=imported)
    second = runner.invoke(cli, ["generate"], obj=imported)

    assert first.exit_code == 0, first.output
    assert "Created 1 match(es); 1 stored in total" in first.output
    assert "Created 0 match(es); 1 stored in total" in second.output


def test_review_flow(runner, imported):
    runner.invoke(cli, ["generate"], obj=imported)
    match_id = _stored_match_id(imported)

    shown = runner.invoke(cli, ["show-match", match_id], obj=imported)
    assert shown.exit_code == 0, shown.output
    assert "Quality: good (70-89%)" in shown.output

    updated = runner.invoke(cli, ["set-status", match_id, "contacted", "--notes", "left voicemail"], obj=imported)
    assert updated.exit_code == 0, updated.output
    assert "now contacted" in updated.output

    owner = runner.invoke(cli, ["user-matches", "owner-1"], obj=imported)
    assert match_id in owner.output
    assert "1 match(es)" in owner.output


def test_set_status_unknown_match(runner, imported):
    result = runner.invoke(cli, ["set-status", "nope", "rejected"], obj=imported)
    assert result.exit_code == 1


def test_diagnose(runner, imported):
    result = runner.invoke(cli, ["diagnose", "found-1", "--top", "3"], obj=imported)
    assert result.exit_code == 0, result.output
    assert "lost-1" in result.output
    assert "Candidate pool: 1 active lost item(s)" in result.output
