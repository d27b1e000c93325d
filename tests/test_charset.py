import pytest

from devbase.charset import gb2312_to_utf8, utf8_to_gb2312


def test_known_encoding_of_zhong():
    assert utf8_to_gb2312("中".encode("utf-8")) == b"\xd6\xd0"


def test_round_trip_chinese_text():
    original = "中文测试 abc".encode("utf-8")
    assert gb2312_to_utf8(utf8_to_gb2312(original)) == original


def test_ascii_is_unchanged():
    assert utf8_to_gb2312(b"hello") == b"hello"
    assert gb2312_to_utf8(b"hello") == b"hello"


def test_text_input_is_accepted():
    assert gb2312_to_utf8(utf8_to_gb2312("中文")) == "中文".encode("utf-8")


def test_invalid_utf8_raises():
    with pytest.raises(UnicodeDecodeError):
        utf8_to_gb2312(b"\xff\xfe")


def test_character_outside_gb2312_raises():
    with pytest.raises(UnicodeEncodeError):
        utf8_to_gb2312("😀".encode("utf-8"))