import io

import pytest

from minirel.dbdestroy import destroy_database, main


@pytest.fixture
def database(tmp_path):
    db = tmp_path / "testdb"
    db.mkdir()
    (db / "relcat").write_bytes(b"\0" * 16)
    return db


@pytest.mark.parametrize("answer", ["y", "Y\n", "yes please", "  y"])
def test_confirmed_removes_directory(database, answer):
    out = io.StringIO()
    assert destroy_database(str(database), answer, out) == 0
    assert not database.exists()
    assert str(database) in out.getvalue()


@pytest.mark.parametrize("answer", ["n", "", "   ", "no y"])
def test_declined_keeps_directory(database, answer):
    out = io.StringIO()
    assert destroy_database(str(database), answer, out) == 0
    assert database.exists()
    assert out.getvalue() == "Database not destroyed.\n"


def test_missing_directory_fails(tmp_path):
    out = io.StringIO()
    assert destroy_database(str(tmp_path / "nope"), "y", out) == 1


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_confirmed(database, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("\ny\n"))
    assert main([str(database)]) == 0
    out = capsys.readouterr().out
    assert out.startswith(f"Enter y if you want to delete {database}/*\n")
    assert not database.exists()


def test_main_end_of_input(database, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([str(database)]) == 0
    assert "Database not destroyed." in capsys.readouterr().out
    assert database.exists()