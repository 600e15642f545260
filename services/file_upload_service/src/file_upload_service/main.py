import logging
from contextlib import asynccontextmanager
from urllib.parse import quote

from fastapi import APIRouter, FastAPI, UploadFile, File, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .config import settings
from .db import SessionLocal, init_db
from .models import FileRecord, utcnow
from .repository import StorageError, add_file, delete_file, get_file, list_files, update_file
from .schemas import FileMeta
from .validation import (
    UPDATE_CONTENT_TYPES,
    UPLOAD_CONTENT_TYPES,
    FileValidationError,
    check_upload,
    read_upload,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="File Upload Service", version="1.0.0", lifespan=lifespan)
router = APIRouter(prefix="/api/FileUpload", tags=["FileUpload"])


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@app.get("/health")
def health():
    return {"status": "ok"}


def _file_meta(r: FileRecord) -> FileMeta:
    return FileMeta(
        id=r.id,
        file_name=r.file_name,
        content_type=r.content_type,
        file_size=r.file_size,
        uploaded_date=r.uploaded_date,
    )


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _find_or_404(db: Session, file_id: int) -> FileRecord:
    try:
        record = get_file(db, file_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="An error occurred while reading the file data.")
    if not record:
        logger.warning("File with ID %s not found.", file_id)
        raise HTTPException(status_code=404, detail="File not found.")
    return record


async def _accept(file: UploadFile | None, allowed_types: frozenset[str]) -> bytes:
    try:
        return await read_upload(check_upload(file, allowed_types))
    except FileValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/Upload", response_model=FileMeta)
async def upload_file(file: UploadFile | None = File(None), db: Session = Depends(get_db)):
    data = await _accept(file, UPLOAD_CONTENT_TYPES)

    record = FileRecord(
        file_name=file.filename or "uploaded.bin",
        content_type=file.content_type,
        data=data,
        file_size=len(data),
        uploaded_date=utcnow(),
    )
    try:
        add_file(db, record)
    except StorageError:
        raise HTTPException(status_code=500, detail="An error occurred while saving the file data.")

    logger.info("File uploaded successfully: %s, Size: %s bytes.", record.file_name, record.file_size)
    return _file_meta(record)


# registered before /{file_id} so "All" is not parsed as an id
@router.get("/All", response_model=list[FileMeta])
def get_all_files(db: Session = Depends(get_db)):
    try:
        files = list_files(db)
    except StorageError:
        raise HTTPException(status_code=500, detail="An error occurred while reading the file data.")
    if not files:
        raise HTTPException(status_code=404, detail="No files found.")
    return [_file_meta(f) for f in files]


@router.get("/{file_id}")
def get_file_content(file_id: int, db: Session = Depends(get_db)):
    record = _find_or_404(db, file_id)
    logger.info("File retrieved successfully: %s, ID: %s", record.file_name, file_id)
    return Response(
        content=record.data,
        media_type=record.content_type,
        headers={"Content-Disposition": _content_disposition(record.file_name)},
    )


@router.get("/{file_id}/Meta", response_model=FileMeta)
def get_file_meta(file_id: int, db: Session = Depends(get_db)):
    return _file_meta(_find_or_404(db, file_id))


@router.put("/{file_id}", response_model=FileMeta)
async def replace_file(file_id: int, file: UploadFile | None = File(None), db: Session = Depends(get_db)):
    record = _find_or_404(db, file_id)
    data = await _accept(file, UPDATE_CONTENT_TYPES)

    try:
        update_file(
            db,
            record,
            file_name=file.filename or "uploaded.bin",
            content_type=file.content_type,
            data=data,
            uploaded_date=utcnow(),
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="An error occurred while updating the file data.")

    logger.info("File updated successfully: %s, Size: %s bytes.", record.file_name, record.file_size)
    return _file_meta(record)


@router.delete("/{file_id}", status_code=204)
def remove_file(file_id: int, db: Session = Depends(get_db)):
    record = _find_or_404(db, file_id)
    file_name = record.file_name
    try:
        delete_file(db, record)
    except StorageError:
        raise HTTPException(status_code=500, detail="An error occurred while deleting the file.")

    logger.info("File deleted successfully: %s, ID: %s", file_name, file_id)
    return Response(status_code=204)


app.include_router(router)


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
