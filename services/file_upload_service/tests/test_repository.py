"""
Tests for the persistence functions.
"""

from sqlalchemy import inspect

from file_upload_service.models import FileRecord, utcnow
from file_upload_service.repository import MAX_FILE_ID, add_file, get_file, list_files


def _record(name="a.png", data=b"\x89PNG"):
    return FileRecord(
        file_name=name,
        content_type="image/png",
        data=data,
        file_size=len(data),
        uploaded_date=utcnow(),
    )


def test_list_files_leaves_payload_unloaded(session_factory):
    with session_factory() as db:
        add_file(db, _record("a.png"))
        add_file(db, _record("b.png"))

    with session_factory() as db:
        rows = list_files(db)

        assert [r.file_name for r in rows] == ["a.png", "b.png"]
        assert all("data" in inspect(r).unloaded for r in rows)


def test_get_file_outside_key_range_returns_none(session_factory):
    with session_factory() as db:
        add_file(db, _record())

        assert get_file(db, MAX_FILE_ID + 1) is None
        assert get_file(db, 0) is None
        assert get_file(db, 1).file_name == "a.png"
