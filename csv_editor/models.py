from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .document import Document, Record


class RecordView(BaseModel):
    id: str
    # Absent columns are left out, so "" and absent stay distinguishable.
    fields: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Record) -> "RecordView":
        return cls(id=record.id, fields=dict(record.fields))


class DocumentView(BaseModel):
    headers: List[str] = Field(default_factory=list)
    delimiter: str = ","
    records: List[RecordView] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document) -> "DocumentView":
        return cls(
            headers=list(document.headers),
            delimiter=document.delimiter,
            records=[RecordView.from_record(r) for r in document.records],
        )


class IntakeReport(BaseModel):
    filename: Optional[str] = None
    decode_used: str
    decode_fallback: bool = False
    newlines_changed: bool = False


class Notification(BaseModel):
    action: str
    ok: bool
    message: str
    at_utc: str


class LoadResponse(BaseModel):
    document: DocumentView
    intake: IntakeReport
    notification: Notification


class MutationResponse(BaseModel):
    document: DocumentView
    notification: Notification


class AddRecordResponse(MutationResponse):
    record: RecordView


class FieldUpdate(BaseModel):
    column: str
    value: str


class RecordFields(BaseModel):
    fields: Dict[str, Optional[str]] = Field(default_factory=dict)


class NotificationsResponse(BaseModel):
    notifications: List[Notification] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
