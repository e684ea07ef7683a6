"""
Tests for the command-line entry point.
"""

import pytest

import main
from gtdnota.storage import Storage


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda: None)


def run(capsys, *argv):
    main.main(list(argv))
    return capsys.readouterr().out


def test_capture_list_and_complete(tmp_path, capsys):
    doc = str(tmp_path / "gtd.toml")

    assert "Item created with ID: call-john (type: task)" in run(
        capsys, "--file", doc, "inbox", "call-john", "Call John", "--status", "next_action")

    listing = run(capsys, "--file", doc, "list", "--status", "next_action")
    assert "- [call-john] Call John (status: next_action, type: task)" in listing

    done = run(capsys, "--file", doc, "change-status", "call-john", "done")
    assert "call-john: next_action → done" in done

    assert Storage(doc).load().find_by_id("call-john").status.value == "done"


def test_generated_id(tmp_path, capsys):
    doc = str(tmp_path / "gtd.toml")

    assert "Item created with ID: #1 (type: task)" in run(capsys, "--file", doc, "inbox", "-", "Something")


def test_update_and_empty_trash(tmp_path, capsys):
    doc = str(tmp_path / "gtd.toml")
    run(capsys, "--file", doc, "inbox", "a", "A")
    run(capsys, "--file", doc, "inbox", "b", "B")

    assert "Item a updated successfully" in run(capsys, "--file", doc, "update", "a", "--notes", "Details")
    run(capsys, "--file", doc, "change-status", "a", "b", "trash")

    assert "Deleted 2 task(s) from trash" in run(capsys, "--file", doc, "empty-trash")


def test_validation_error_exits_with_status_1(tmp_path, capsys):
    doc = str(tmp_path / "gtd.toml")

    with pytest.raises(SystemExit) as exc_info:
        main.main(["--file", doc, "inbox", "a", "A", "--status", "calendar"])

    assert exc_info.value.code == 1
    assert "status=calendar requires start_date" in capsys.readouterr().out
