from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Optional, Protocol

import firebase_admin
from firebase_admin import credentials, firestore

from assistant.core.errors import GlossaryReadError, LearningWriteError
from assistant.core.schemas import Glossary, LearningRecord
from config.settings import Settings


logger = logging.getLogger("postcare.store")

_firebase_init_lock = threading.Lock()


class GlossaryStore(Protocol):
    def load_glossary(self) -> Glossary:
        ...

    def save_learning(self, record: LearningRecord) -> str:
        ...


def _coerce_glossary(data: Any) -> Glossary:
    if not isinstance(data, dict):
        raise GlossaryReadError(
            f"Glossary field 'data' must be a mapping, got {type(data).__name__}"
        )
    glossary: Glossary = {}
    for dialect, phrases in data.items():
        if not isinstance(phrases, dict):
            raise GlossaryReadError(
                f"Phrases for dialect {dialect!r} must be a mapping, got {type(phrases).__name__}"
            )
        glossary[str(dialect)] = {
            str(trigger): canonical
            for trigger, canonical in phrases.items()
            if isinstance(canonical, str)
        }
    return glossary


def _default_app(settings: Settings) -> firebase_admin.App:
    with _firebase_init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        if settings.firebase_credentials:
            cred = credentials.Certificate(settings.firebase_credentials)
        else:
            cred = credentials.ApplicationDefault()
        try:
            return firebase_admin.initialize_app(cred)
        except ValueError:
            # Initialized by code outside this lock.
            return firebase_admin.get_app()


def _learning_document(record: LearningRecord) -> dict:
    document = record.to_document()
    if record.created_at is None:
        document["createdAt"] = firestore.SERVER_TIMESTAMP
    return document


class FirestoreGlossaryStore:
    """Dialect glossary and learning log kept in Cloud Firestore.

    Layout:
        dialect_glossary/phrases
            - data: { dialect: { trigger: canonical } }
        dialect_learning/{random id}
            - text, detectedLang, reply, createdAt

    Every call passes an explicit timeout and retry policy; ``retry=None``
    disables the client's default retries.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[Any] = None,
        retry: Any = None,
    ) -> None:
        self.settings = settings
        self.timeout = settings.store_timeout
        self.retry = retry
        self._db = client

    @property
    def db(self):
        if self._db is None:
            app = _default_app(self.settings)
            self._db = firestore.client(app)
            logger.info("Firestore client initialized for project=%s", app.project_id)
        return self._db

    def load_glossary(self) -> Glossary:
        try:
            snapshot = (
                self.db.collection(self.settings.glossary_collection)
                .document(self.settings.glossary_document)
                .get(retry=self.retry, timeout=self.timeout)
            )
        except Exception as exc:
            raise GlossaryReadError(f"Glossary read failed: {exc}") from exc

        if not snapshot.exists:
            return {}
        data = (snapshot.to_dict() or {}).get("data")
        if data is None:
            return {}
        return _coerce_glossary(data)

    def save_learning(self, record: LearningRecord) -> str:
        doc_id = uuid.uuid4().hex
        try:
            (
                self.db.collection(self.settings.learning_collection)
                .document(doc_id)
                .set(_learning_document(record), retry=self.retry, timeout=self.timeout)
            )
        except Exception as exc:
            raise LearningWriteError(f"Learning record write failed: {exc}") from exc
        return doc_id
