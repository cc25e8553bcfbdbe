import os
import re

import pytest

from app.files import FileStore, sanitize_filename


@pytest.fixture
def files(tmp_path):
    return FileStore(tmp_path / "uploads")


def test_sanitize_replaces_unsafe_characters():
    assert sanitize_filename("my essay (v2).pdf") == "my_essay__v2_.pdf"
    assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
    assert sanitize_filename("ok_name-1.txt") == "ok_name-1.txt"


def test_save_upload_names_and_writes_file(files):
    name = files.save_upload("submission", "hello world.txt", b"data")
    assert re.fullmatch(r"\d+-\d+-hello_world\.txt", name)
    with open(files.path_for("submission", name), "rb") as fh:
        assert fh.read() == b"data"


def test_save_upload_never_escapes_category_dir(files):
    name = files.save_upload("photo", "../../evil.png", b"x")
    assert "/" not in name
    assert os.path.dirname(files.path_for("photo", name)) == files.directory("photo")


def test_delete_upload_is_idempotent(files):
    name = files.save_upload("photo", "me.png", b"x")
    files.delete_upload("photo", name)
    files.delete_upload("photo", name)
    assert not os.path.exists(files.path_for("photo", name))


def test_unknown_category(files):
    with pytest.raises(ValueError):
        files.save_upload("homework", "a.txt", b"")


def test_latest_upload_missing_or_empty_directory(files):
    assert files.latest_upload("timetable") is None
    files.ensure_dirs()
    assert files.latest_upload("timetable") is None


def test_latest_upload_picks_newest_and_skips_dotfiles(files):
    first = files.save_upload("timetable", "term1.pdf", b"1")
    second = files.save_upload("timetable", "term2.pdf", b"2")
    os.utime(files.path_for("timetable", first), (1_000, 1_000))
    os.utime(files.path_for("timetable", second), (2_000, 2_000))
    hidden = os.path.join(files.directory("timetable"), ".DS_Store")
    with open(hidden, "wb") as fh:
        fh.write(b"")
    os.utime(hidden, (3_000, 3_000))

    assert files.latest_upload("timetable") == second


class _VanishedEntry:
    name = "9999999999999-1-gone.pdf"

    def is_file(self):
        return True

    def stat(self):
        raise FileNotFoundError(self.name)


def test_latest_upload_skips_file_removed_during_scan(files, monkeypatch):
    kept = files.save_upload("timetable", "term1.pdf", b"1")
    real_scandir = os.scandir

    def scandir_with_vanished(path):
        return [*real_scandir(path), _VanishedEntry()]

    monkeypatch.setattr("app.files.os.scandir", scandir_with_vanished)
    assert files.latest_upload("timetable") == kept


def test_latest_upload_none_when_every_file_vanished(files, monkeypatch):
    files.ensure_dirs()
    monkeypatch.setattr("app.files.os.scandir", lambda path: [_VanishedEntry()])
    assert files.latest_upload("timetable") is None
