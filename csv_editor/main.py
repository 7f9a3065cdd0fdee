import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, Response, UploadFile

from .config import Settings, get_settings
from .document import Document
from .errors import NoDocumentLoaded, RecordNotFound, UnknownColumn, UnsupportedFile, UploadTooLarge
from .intake import check_file_type, decode_upload, read_upload
from .models import (
    AddRecordResponse,
    DocumentView,
    FieldUpdate,
    HealthResponse,
    IntakeReport,
    LoadResponse,
    MutationResponse,
    NotificationsResponse,
    RecordFields,
    RecordView,
)
from .notifications import ADDED, DELETED, EXPORTED, LOADED, UPDATED, NotificationSink
from .rules import EXPORT_FILENAME, EXPORT_MEDIA_TYPE
from .session import EditingSession

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings())
    yield


app = FastAPI(
    title="csv-editor",
    description="Load, edit and re-export CSV files in memory",
    version="0.1.0",
    lifespan=lifespan,
)

_session = EditingSession()
_sink = NotificationSink(maxlen=get_settings().notification_buffer)


def get_session() -> EditingSession:
    return _session


def get_sink() -> NotificationSink:
    return _sink


def _current(session: EditingSession) -> Document:
    try:
        return session.current()
    except NoDocumentLoaded as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/document", response_model=LoadResponse)
async def load_document(
    file: UploadFile = File(...),
    delimiter: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    session: EditingSession = Depends(get_session),
    sink: NotificationSink = Depends(get_sink),
):
    try:
        check_file_type(file.filename, file.content_type)
        raw = await read_upload(file, settings.max_upload_bytes)
    except UnsupportedFile as e:
        sink.failure("load", str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except UploadTooLarge as e:
        sink.failure("load", str(e))
        raise HTTPException(status_code=413, detail=str(e))

    if delimiter is None:
        delimiter = settings.delimiter

    text, report = decode_upload(raw)
    try:
        document = session.load(text, delimiter)
    except ValueError as e:
        sink.failure("load", str(e))
        raise HTTPException(status_code=422, detail=str(e))

    note = sink.success("load", LOADED)
    return LoadResponse(
        document=DocumentView.from_document(document),
        intake=IntakeReport(filename=file.filename, **report),
        notification=note,
    )


@app.get("/document", response_model=DocumentView)
def get_document(session: EditingSession = Depends(get_session)):
    return DocumentView.from_document(_current(session))


@app.delete("/document", status_code=204)
def close_document(session: EditingSession = Depends(get_session)):
    session.clear()
    return Response(status_code=204)


@app.patch("/document/records/{record_id}", response_model=MutationResponse)
def update_field(
    record_id: str,
    update: FieldUpdate,
    session: EditingSession = Depends(get_session),
    sink: NotificationSink = Depends(get_sink),
):
    try:
        document = session.update_field(record_id, update.column, update.value)
    except (RecordNotFound, NoDocumentLoaded) as e:
        sink.failure("update", str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except UnknownColumn as e:
        sink.failure("update", str(e))
        raise HTTPException(status_code=422, detail=str(e))

    note = sink.success("update", UPDATED)
    return MutationResponse(document=DocumentView.from_document(document), notification=note)


@app.put("/document/records/{record_id}", response_model=MutationResponse)
def replace_record(
    record_id: str,
    body: RecordFields,
    session: EditingSession = Depends(get_session),
    sink: NotificationSink = Depends(get_sink),
):
    try:
        document = session.replace_record(record_id, body.fields)
    except (RecordNotFound, NoDocumentLoaded) as e:
        sink.failure("update", str(e))
        raise HTTPException(status_code=404, detail=str(e))

    note = sink.success("update", UPDATED)
    return MutationResponse(document=DocumentView.from_document(document), notification=note)


@app.delete("/document/records/{record_id}", response_model=MutationResponse)
def delete_record(
    record_id: str,
    session: EditingSession = Depends(get_session),
    sink: NotificationSink = Depends(get_sink),
):
    try:
        document = session.delete_record(record_id)
    except NoDocumentLoaded as e:
        sink.failure("delete", str(e))
        raise HTTPException(status_code=404, detail=str(e))

    note = sink.success("delete", DELETED)
    return MutationResponse(document=DocumentView.from_document(document), notification=note)


@app.post("/document/records", response_model=AddRecordResponse, status_code=201)
def add_record(
    body: RecordFields,
    session: EditingSession = Depends(get_session),
    sink: NotificationSink = Depends(get_sink),
):
    try:
        document = session.add_record(body.fields)
    except NoDocumentLoaded as e:
        sink.failure("add", str(e))
        raise HTTPException(status_code=404, detail=str(e))

    note = sink.success("add", ADDED)
    return AddRecordResponse(
        document=DocumentView.from_document(document),
        record=RecordView.from_record(document.records[-1]),
        notification=note,
    )


@app.get("/document/export")
def export_document(
    session: EditingSession = Depends(get_session),
    sink: NotificationSink = Depends(get_sink),
):
    try:
        text = session.export()
    except NoDocumentLoaded as e:
        sink.failure("export", str(e))
        raise HTTPException(status_code=404, detail=str(e))

    sink.success("export", EXPORTED)
    return Response(
        content=text,
        media_type=EXPORT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@app.get("/notifications", response_model=NotificationsResponse)
def list_notifications(sink: NotificationSink = Depends(get_sink)):
    return {"notifications": sink.recent()}
