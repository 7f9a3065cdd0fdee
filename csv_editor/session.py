"""
The single editing session: owns the current Document.

Each operation applies one pure document function and swaps in the result
under a lock. Two edits issued against the same base are last-applied-wins.
"""

from __future__ import annotations

import logging
import threading
from typing import Mapping, Optional

from . import document as doc
from .errors import NoDocumentLoaded
from .rules import DEFAULT_DELIMITER

logger = logging.getLogger(__name__)


class EditingSession:
    def __init__(self):
        self._document: Optional[doc.Document] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._document is not None

    def current(self) -> doc.Document:
        document = self._document
        if document is None:
            raise NoDocumentLoaded()
        return document

    def load(self, text: str, delimiter: str = DEFAULT_DELIMITER) -> doc.Document:
        document = doc.parse(text, delimiter)
        with self._lock:
            self._document = document
        logger.info("Loaded document: %d columns, %d records", len(document.headers), len(document))
        return document

    def clear(self) -> None:
        with self._lock:
            self._document = None

    def _apply(self, fn, *args) -> doc.Document:
        with self._lock:
            if self._document is None:
                raise NoDocumentLoaded()
            self._document = fn(self._document, *args)
            return self._document

    def update_field(self, identity: str, column: str, value: str) -> doc.Document:
        return self._apply(doc.set_field, identity, column, value)

    def replace_record(self, identity: str, fields: Mapping[str, Optional[str]]) -> doc.Document:
        return self._apply(doc.replace_record, identity, fields)

    def delete_record(self, identity: str) -> doc.Document:
        return self._apply(doc.delete_record, identity)

    def add_record(self, fields: Mapping[str, Optional[str]]) -> doc.Document:
        return self._apply(doc.add_record, fields)

    def export(self) -> str:
        return doc.serialize(self.current())
