import datetime as dt
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, defer

from .models import FileRecord

logger = logging.getLogger(__name__)

# integer primary keys are signed 64-bit
MAX_FILE_ID = 2**63 - 1


class StorageError(RuntimeError):
    pass


def _fail(db: Session, action: str, exc: SQLAlchemyError) -> StorageError:
    logger.exception("Error %s file details in database.", action)
    db.rollback()
    return StorageError(f"Error {action} file details: {exc}")


def add_file(db: Session, record: FileRecord) -> FileRecord:
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        raise _fail(db, "saving", e) from e
    return record


def get_file(db: Session, file_id: int) -> FileRecord | None:
    if not 0 < file_id <= MAX_FILE_ID:
        return None
    try:
        return db.get(FileRecord, file_id)
    except SQLAlchemyError as e:
        raise _fail(db, "reading", e) from e


def list_files(db: Session) -> list[FileRecord]:
    try:
        # metadata only, payloads stay in the table
        stmt = select(FileRecord).options(defer(FileRecord.data)).order_by(FileRecord.id)
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as e:
        raise _fail(db, "listing", e) from e


def update_file(
    db: Session,
    record: FileRecord,
    *,
    file_name: str,
    content_type: str,
    data: bytes,
    uploaded_date: dt.datetime,
) -> FileRecord:
    # wholesale replacement, no partial patch
    record.file_name = file_name
    record.content_type = content_type
    record.data = data
    record.file_size = len(data)
    record.uploaded_date = uploaded_date
    try:
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        raise _fail(db, "updating", e) from e
    return record


def delete_file(db: Session, record: FileRecord) -> None:
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as e:
        raise _fail(db, "deleting", e) from e
