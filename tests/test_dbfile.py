import os

import pytest

from minirel.dbfile import DB, DEFAULT_PAGE_SIZE, DBHeader, File, OpenFileTable
from minirel.errors import MinirelError, Status

PAGE = 128


@pytest.fixture
def db():
    return DB(page_size=PAGE)


@pytest.fixture
def path(tmp_path):
    return str(tmp_path / "rel")


def _status(excinfo):
    return excinfo.value.status


def test_header_round_trip():
    header = DBHeader(next_free=5, first_page=2, num_pages=9)
    data = header.to_bytes(PAGE)
    assert len(data) == PAGE
    assert DBHeader.from_bytes(data) == header


def test_header_default_matches_empty_file():
    assert DBHeader() == DBHeader(next_free=-1, first_page=-1, num_pages=1)
    assert len(DBHeader().to_bytes()) == DEFAULT_PAGE_SIZE


def test_create_file_writes_single_header_page(db, path):
    db.create_file(path)
    assert os.path.getsize(path) == PAGE
    with open(path, "rb") as fh:
        assert DBHeader.from_bytes(fh.read()) == DBHeader(-1, -1, 1)


def test_create_existing_file_fails(db, path):
    db.create_file(path)
    with pytest.raises(MinirelError) as info:
        db.create_file(path)
    assert _status(info) is Status.FILEEXISTS


def test_create_empty_name_fails(db):
    with pytest.raises(MinirelError) as info:
        db.create_file("")
    assert _status(info) is Status.BADFILE


def test_allocate_extends_and_sets_first_page(db, path):
    db.create_file(path)
    f = db.open_file(path)
    assert f.first_page() == -1
    first = f.allocate_page()
    second = f.allocate_page()
    assert first != second
    assert f.first_page() == first
    assert os.path.getsize(path) == PAGE * 3
    db.close_file(f)


def test_write_read_round_trip(db, path):
    db.create_file(path)
    f = db.open_file(path)
    page_no = f.allocate_page()
    payload = bytes(range(PAGE))
    f.write_page(page_no, payload)
    assert f.read_page(page_no) == payload
    db.close_file(f)


def test_read_header_page_rejected(db, path):
    db.create_file(path)
    f = db.open_file(path)
    with pytest.raises(MinirelError) as info:
        f.read_page(0)
    assert _status(info) is Status.BADPAGENO
    db.close_file(f)


def test_write_wrong_length_rejected(db, path):
    db.create_file(path)
    f = db.open_file(path)
    page_no = f.allocate_page()
    with pytest.raises(MinirelError) as info:
        f.write_page(page_no, b"short")
    assert _status(info) is Status.BADPAGEPTR
    db.close_file(f)


def test_read_beyond_end_is_unix_error(db, path):
    db.create_file(path)
    f = db.open_file(path)
    with pytest.raises(MinirelError) as info:
        f.read_page(7)
    assert _status(info) is Status.UNIXERR
    db.close_file(f)


def test_disposed_page_is_reused(db, path):
    db.create_file(path)
    f = db.open_file(path)
    f.allocate_page()
    second = f.allocate_page()
    third = f.allocate_page()
    f.dispose_page(second)
    f.dispose_page(third)
    size_before = os.path.getsize(path)
    assert f.allocate_page() == third
    assert f.allocate_page() == second
    assert os.path.getsize(path) == size_before
    db.close_file(f)


def test_dispose_first_page_rejected(db, path):
    db.create_file(path)
    f = db.open_file(path)
    first = f.allocate_page()
    with pytest.raises(MinirelError) as info:
        f.dispose_page(first)
    assert _status(info) is Status.BADPAGENO
    db.close_file(f)


@pytest.mark.parametrize("page_no", [0, -1, 50])
def test_dispose_invalid_page_rejected(db, path, page_no):
    db.create_file(path)
    f = db.open_file(path)
    f.allocate_page()
    with pytest.raises(MinirelError) as info:
        f.dispose_page(page_no)
    assert _status(info) is Status.BADPAGENO
    db.close_file(f)


def test_open_twice_shares_file(db, path):
    db.create_file(path)
    a = db.open_file(path)
    b = db.open_file(path)
    assert a is b
    assert a.open_count == 2
    db.close_file(a)
    assert path in db.open_files
    db.close_file(b)
    assert path not in db.open_files
    assert a.open_count == 0


def test_open_missing_file_fails(db, path):
    with pytest.raises(MinirelError) as info:
        db.open_file(path)
    assert _status(info) is Status.UNIXERR
    assert path not in db.open_files


def test_destroy_open_file_fails_then_succeeds(db, path):
    db.create_file(path)
    f = db.open_file(path)
    with pytest.raises(MinirelError) as info:
        db.destroy_file(path)
    assert _status(info) is Status.FILEOPEN
    db.close_file(f)
    db.destroy_file(path)
    assert not os.path.exists(path)


def test_destroy_missing_file_fails(db, path):
    with pytest.raises(MinirelError) as info:
        db.destroy_file(path)
    assert _status(info) is Status.UNIXERR


def test_create_while_open_reports_exists(db, path):
    db.create_file(path)
    f = db.open_file(path)
    os.remove(path)
    with pytest.raises(MinirelError) as info:
        db.create_file(path)
    assert _status(info) is Status.FILEEXISTS
    db.close_file(f)


def test_close_file_none(db):
    with pytest.raises(MinirelError) as info:
        db.close_file(None)
    assert _status(info) is Status.BADFILEPTR


def test_file_close_when_not_open():
    f = File("nothing", PAGE)
    with pytest.raises(MinirelError) as info:
        f.close()
    assert _status(info) is Status.FILENOTOPEN


def test_final_close_flushes_through_buffer_manager(path):
    flushed = []

    class Recorder:
        def flush_file(self, file):
            flushed.append(file)

    db = DB(Recorder(), PAGE)
    db.create_file(path)
    a = db.open_file(path)
    db.open_file(path)
    db.close_file(a)
    assert flushed == []
    db.close_file(a)
    assert flushed == [a]


def test_file_equality_by_name():
    assert File("x", PAGE) == File("x", PAGE)
    assert File("x", PAGE) != File("y", PAGE)
    assert len({File("x", PAGE), File("x", PAGE)}) == 1


def test_open_file_table_errors():
    table = OpenFileTable()
    f = File("a", PAGE)
    table.insert("a", f)
    assert table.find("a") is f
    with pytest.raises(MinirelError) as dup:
        table.insert("a", f)
    assert _status(dup) is Status.HASHTBLERROR
    table.erase("a")
    assert len(table) == 0
    with pytest.raises(MinirelError) as missing:
        table.find("a")
    assert _status(missing) is Status.HASHNOTFOUND
    with pytest.raises(MinirelError) as gone:
        table.erase("a")
    assert _status(gone) is Status.HASHTBLERROR


def test_page_size_must_exceed_header():
    with pytest.raises(ValueError):
        DB(page_size=8)