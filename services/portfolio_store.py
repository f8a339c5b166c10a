"""
Whole-document persistence for the portfolio.

Every read loads the complete document and every write replaces it. All
read-modify-write cycles go through `transaction()`, which serialises them on
a process-wide lock so two in-flight operations cannot overwrite each other.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import sessionmaker

from models.portfolio import PortfolioDocument
from models.portfolio_document import PortfolioDocumentRow

logger = logging.getLogger(__name__)

DOCUMENT_ID = 1


class PortfolioStore:
    def __init__(self, session_factory: sessionmaker, document_id: int = DOCUMENT_ID):
        self._session_factory = session_factory
        self._document_id = document_id
        self._lock = threading.RLock()

    def ensure(self) -> None:
        """Create the empty starter document if none exists yet."""
        with self._lock, self._session_factory() as db:
            if db.get(PortfolioDocumentRow, self._document_id) is None:
                db.add(PortfolioDocumentRow(id=self._document_id, body=_dump(PortfolioDocument())))
                db.commit()
                logger.info("Created empty portfolio document id=%s", self._document_id)

    def read(self) -> PortfolioDocument:
        with self._session_factory() as db:
            row = db.get(PortfolioDocumentRow, self._document_id)
            if row is None:
                return PortfolioDocument()
            return PortfolioDocument.model_validate(row.body)

    def write(self, document: PortfolioDocument) -> None:
        body = _dump(document)
        with self._lock, self._session_factory() as db:
            row = db.get(PortfolioDocumentRow, self._document_id)
            if row is None:
                db.add(PortfolioDocumentRow(id=self._document_id, body=body))
            else:
                row.body = body
            db.commit()

    @contextmanager
    def transaction(self) -> Iterator[PortfolioDocument]:
        """
        Yield the current document and persist it when the block completes.
        If the block raises, nothing is written.
        """
        with self._lock:
            document = self.read()
            yield document
            self.write(document)


def _dump(document: PortfolioDocument) -> dict:
    return document.model_dump(mode="json", by_alias=True)
