"""
Tabular document model: parse, edit and serialize delimited text.

Rules:
- Lines are split on "\\n", fields on the delimiter. No quoting, no escaping.
- A column missing from a record is absent, which is not the same as "".
- Every operation returns a new Document; inputs are never mutated.
- Identities come from a counter carried by the document, so they stay
  unique for the document's whole lifetime.

Concurrent edits against the same base document are last-applied-wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import RecordNotFound, UnknownColumn
from .rules import DEFAULT_DELIMITER, LINE_SEPARATOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    id: str
    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # read-only view; edits go through the module functions
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, column: str) -> Optional[str]:
        return self.fields.get(column)

    def cells(self, headers: Iterable[str]) -> List[str]:
        """Values in header order, absent columns rendered as ""."""
        return [self.fields.get(h, "") for h in headers]


@dataclass(frozen=True)
class Document:
    headers: Tuple[str, ...] = ()
    records: Tuple[Record, ...] = ()
    delimiter: str = DEFAULT_DELIMITER
    next_id: int = 1

    def __len__(self) -> int:
        return len(self.records)

    @property
    def ids(self) -> List[str]:
        return [r.id for r in self.records]


def _check_delimiter(delimiter: str) -> None:
    if not delimiter:
        raise ValueError("Delimiter must not be empty")
    if LINE_SEPARATOR in delimiter or "\r" in delimiter:
        raise ValueError("Delimiter must not contain a line break")


def _pair_fields(headers: Tuple[str, ...], values: List[str]) -> Dict[str, str]:
    # Positional pairing. With repeated header names the last position wins,
    # and a missing value at that position leaves the column absent.
    fields: Dict[str, str] = {}
    for i, header in enumerate(headers):
        if i < len(values):
            fields[header] = values[i]
        else:
            fields.pop(header, None)
    return fields


def _clean_fields(headers: Tuple[str, ...], fields: Mapping[str, Optional[str]]) -> Dict[str, str]:
    # Keys outside the header set are dropped; None means absent.
    return {k: v for k, v in fields.items() if v is not None and k in headers}


def find_record(document: Document, identity: str) -> Optional[Record]:
    for record in document.records:
        if record.id == identity:
            return record
    return None


def parse(raw_text: str, delimiter: str = DEFAULT_DELIMITER) -> Document:
    """
    Build a Document from delimited text.

    The first line is the header line. Short data lines leave trailing
    columns absent, long ones are truncated. A trailing newline produces a
    final record with only the first column set (to ""); it is kept as is.
    Empty input gives an empty document.
    """
    _check_delimiter(delimiter)

    if raw_text == "":
        return Document(delimiter=delimiter)

    lines = raw_text.split(LINE_SEPARATOR)
    headers = tuple(lines[0].split(delimiter))

    records = []
    for seq, line in enumerate(lines[1:], start=1):
        records.append(Record(id=str(seq), fields=_pair_fields(headers, line.split(delimiter))))

    logger.debug("Parsed %d columns, %d records", len(headers), len(records))
    return Document(
        headers=headers,
        records=tuple(records),
        delimiter=delimiter,
        next_id=len(records) + 1,
    )


def replace_record(document: Document, identity: str, fields: Mapping[str, Optional[str]]) -> Document:
    """
    Replace a record's whole mapping, keeping its identity and position.

    Columns left out of `fields` become absent for that record, and keys that
    are not headers are ignored. Callers that want a point edit merge the
    surviving fields first (see set_field).
    """
    if find_record(document, identity) is None:
        raise RecordNotFound(identity)

    new_fields = _clean_fields(document.headers, fields)
    records = tuple(
        Record(id=r.id, fields=new_fields) if r.id == identity else r
        for r in document.records
    )
    return replace(document, records=records)


def set_field(document: Document, identity: str, column: str, value: str) -> Document:
    record = find_record(document, identity)
    if record is None:
        raise RecordNotFound(identity)
    if column not in document.headers:
        raise UnknownColumn(column)
    return replace_record(document, identity, {**record.fields, column: value})


def delete_record(document: Document, identity: str) -> Document:
    """Remove the record with `identity`; unknown identities are a no-op."""
    records = tuple(r for r in document.records if r.id != identity)
    if len(records) == len(document.records):
        return document
    return replace(document, records=records)


def add_record(document: Document, fields: Mapping[str, Optional[str]]) -> Document:
    record = Record(id=str(document.next_id), fields=_clean_fields(document.headers, fields))
    return replace(
        document,
        records=document.records + (record,),
        next_id=document.next_id + 1,
    )


def serialize(document: Document) -> str:
    delimiter = document.delimiter
    lines = [delimiter.join(document.headers)]
    for record in document.records:
        lines.append(delimiter.join(record.cells(document.headers)))
    return LINE_SEPARATOR.join(lines)
