import asyncio

import pytest

from csv_editor.errors import UnsupportedFile, UploadTooLarge
from csv_editor.intake import check_file_type, decode_upload, is_accepted_file, read_upload


@pytest.mark.parametrize("filename,content_type", [
    ("data.csv", None),
    ("DATA.CSV", "application/octet-stream"),
    ("export", "text/csv"),
    (None, "text/csv; charset=utf-8"),
])
def test_accepted_files(filename, content_type):
    assert is_accepted_file(filename, content_type)


@pytest.mark.parametrize("filename,content_type", [
    ("data.txt", "text/plain"),
    ("data.csv.bak", None),
    (None, None),
])
def test_rejected_files(filename, content_type):
    assert not is_accepted_file(filename, content_type)


class FakeUpload:
    def __init__(self, data: bytes):
        self.data = data
        self.requested = None

    async def read(self, size: int = -1) -> bytes:
        self.requested = size
        return self.data if size < 0 else self.data[:size]


def test_check_file_type():
    check_file_type("data.csv", None)
    with pytest.raises(UnsupportedFile):
        check_file_type("notes.txt", "text/plain")


def test_read_upload_stops_past_limit():
    upload = FakeUpload(b"x" * 1000)
    with pytest.raises(UploadTooLarge) as exc:
        asyncio.run(read_upload(upload, 100))
    assert exc.value.limit == 100
    assert upload.requested == 101


def test_read_upload_within_limit():
    assert asyncio.run(read_upload(FakeUpload(b"a,b\n1,2"), 7)) == b"a,b\n1,2"


def test_decode_utf8_passthrough():
    text, report = decode_upload("a,b\n1,é".encode("utf-8"))
    assert text == "a,b\n1,é"
    assert report == {"decode_used": "utf-8", "decode_fallback": False, "newlines_changed": False}


def test_decode_strips_bom():
    text, report = decode_upload(b"\xef\xbb\xbfa,b\n1,2")
    assert text == "a,b\n1,2"
    assert report["decode_used"] == "utf-8-sig"


def test_decode_normalizes_newlines():
    text, report = decode_upload(b"a,b\r\n1,2\r3,4")
    assert text == "a,b\n1,2\n3,4"
    assert report["newlines_changed"] is True


def test_decode_falls_back_for_non_utf8():
    # Include a Latin-1 character to force non-UTF-8 handling
    raw = "name,city\nPaul,Montréal\nZoë,Besançon\n".encode("latin-1")
    text, report = decode_upload(raw)
    assert report["decode_fallback"] is True
    assert text.startswith("name,city\n")
    assert text.count("\n") == 3
