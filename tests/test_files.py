import io
import os

import pytest

from devbase.files import file_length, iter_files, scan_dir, text_after_last


def test_file_length_keeps_position():
    stream = io.BytesIO(b"abcdef")
    stream.read(2)
    assert file_length(stream) == 6
    assert stream.tell() == 2


def test_text_after_last_extracts_file_name():
    assert text_after_last("/mnt/sdcard/test.mp3", "/") == "test.mp3"


def test_text_after_last_missing_needle_and_none():
    assert text_after_last("test.mp3", "/") is None
    assert text_after_last(None, "/") is None


def test_text_after_last_trailing_needle_gives_empty():
    assert text_after_last("dir/", "/") == ""


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("b")
    deeper = sub / "deeper"
    deeper.mkdir()
    (deeper / "c.txt").write_text("c")
    os.symlink(tmp_path / "a.txt", tmp_path / "link.txt")
    return tmp_path


def test_iter_files_finds_regular_files_recursively(tree):
    base = str(tree)
    found = set(iter_files(base))
    assert found == {
        (f"{base}/a.txt", "a.txt"),
        (f"{base}/sub/b.txt", "b.txt"),
        (f"{base}/sub/deeper/c.txt", "c.txt"),
    }


def test_scan_dir_calls_back_and_strips_trailing_slash(tree):
    calls = []
    count = scan_dir(str(tree) + "/", lambda path, name: calls.append((path, name)))
    assert count == len(calls) == 3
    assert all("//" not in path for path, _ in calls)
    assert all(os.path.basename(path) == name for path, name in calls)


def test_scan_dir_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        scan_dir(str(tmp_path / "missing"), lambda p, n: None)


def test_scan_dir_none_raises():
    with pytest.raises(ValueError):
        scan_dir(None, lambda p, n: None)