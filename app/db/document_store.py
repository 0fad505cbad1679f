from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Mapping

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.database import Base, build_engine, mask_db_url
from app.errors import DocumentStoreError, ValidationError
from app.models.draft import DraftRecord
from app.models.profile import ProfileDocument


logger = logging.getLogger(__name__)

Document = dict[str, Any]


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int


def _utc(dt: datetime) -> datetime:
    # sqlite drops tzinfo on the way back.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _profile_to_document(row: ProfileDocument) -> Document:
    body = copy.deepcopy(row.data or {})
    body.pop("email", None)
    return {"email": row.email, **body}


def _draft_to_document(row: DraftRecord) -> Document:
    return {
        "id": row.id,
        "email": row.email,
        "draftData": copy.deepcopy(row.draft_data or {}),
        "createdAt": _utc(row.created_at).isoformat(),
    }


class DocumentStore:
    """Per-email profile documents plus draft records, persisted through SQLAlchemy.

    Each profile is a single row whose JSON body is rewritten as a whole inside one
    transaction, with the row locked for the duration of the read-modify-write. That
    gives every operator below the single-document atomicity of a document database.
    """

    def __init__(self, db_url: str) -> None:
        self.db_url = db_url
        self._engine = None
        self._sessionmaker: sessionmaker | None = None

    # ---- lifecycle -------------------------------------------------------

    def open(self) -> None:
        if self._engine is not None:
            return
        self._engine = build_engine(self.db_url)
        self._sessionmaker = sessionmaker(bind=self._engine, autocommit=False, autoflush=False, future=True)
        # Avoid accidental schema changes in shared MySQL databases.
        if self.db_url.startswith("sqlite"):
            Base.metadata.create_all(bind=self._engine)
        logging.getLogger("uvicorn.error").info("Document store db_url=%s", mask_db_url(self.db_url))

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def reset(self) -> None:
        """Drop and recreate all tables. Intended for local/test sqlite databases."""
        if self._engine is None:
            raise DocumentStoreError("Document store is not open")
        Base.metadata.drop_all(bind=self._engine)
        Base.metadata.create_all(bind=self._engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._sessionmaker is None:
            raise DocumentStoreError("Document store is not open")
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Document store operation failed")
            raise DocumentStoreError("Database operation failed", f"{type(exc).__name__}: {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> None:
        with self._session() as session:
            session.execute(text("SELECT 1"))

    # ---- profiles --------------------------------------------------------

    def find_profile(self, email: str) -> Document | None:
        with self._session() as session:
            row = session.execute(select(ProfileDocument).where(ProfileDocument.email == email)).scalar_one_or_none()
            return _profile_to_document(row) if row is not None else None

    def list_profiles(self) -> list[Document]:
        with self._session() as session:
            rows = session.execute(select(ProfileDocument).order_by(ProfileDocument.id)).scalars().all()
            return [_profile_to_document(row) for row in rows]

    def insert_profile(self, document: Mapping[str, Any]) -> Document:
        body = dict(document)
        email = body.pop("email", None)
        if not email:
            raise ValidationError("Email is required")
        try:
            with self._session() as session:
                exists = session.execute(select(ProfileDocument.id).where(ProfileDocument.email == email)).first()
                if exists:
                    raise ValidationError("Email already registered")
                row = ProfileDocument(email=email, data=copy.deepcopy(body))
                session.add(row)
                session.flush()
                return _profile_to_document(row)
        except DocumentStoreError as exc:
            # Lost a race against a concurrent insert of the same email.
            if isinstance(exc.__cause__, IntegrityError):
                raise ValidationError("Email already registered") from exc
            raise

    def modify(self, email: str, mutate: Callable[[Document], None]) -> UpdateResult:
        """Apply `mutate` to the profile body in place and persist it if it changed.

        The `email` key is never part of the body; `mutate` must not rely on it.
        """
        with self._session() as session:
            row = session.execute(
                select(ProfileDocument).where(ProfileDocument.email == email).with_for_update()
            ).scalar_one_or_none()
            if row is None:
                return UpdateResult(matched_count=0, modified_count=0)

            before = copy.deepcopy(row.data or {})
            document = copy.deepcopy(before)
            mutate(document)
            document.pop("email", None)
            if document == before:
                return UpdateResult(matched_count=1, modified_count=0)

            row.data = document
            return UpdateResult(matched_count=1, modified_count=1)

    def set_fields(self, email: str, fields: Mapping[str, Any]) -> UpdateResult:
        def mutate(document: Document) -> None:
            document.update(copy.deepcopy(dict(fields)))

        return self.modify(email, mutate)

    def push(self, email: str, field: str, *items: Any) -> UpdateResult:
        def mutate(document: Document) -> None:
            current = document.get(field)
            existing = list(current) if isinstance(current, list) else []
            document[field] = existing + [copy.deepcopy(item) for item in items]

        return self.modify(email, mutate)

    def pull(self, email: str, field: str, predicate: Callable[[Any], bool]) -> UpdateResult:
        def mutate(document: Document) -> None:
            current = document.get(field)
            if not isinstance(current, list):
                return
            document[field] = [item for item in current if not predicate(item)]

        return self.modify(email, mutate)

    def increment(self, email: str, field: str, amount: int = 1) -> UpdateResult:
        def mutate(document: Document) -> None:
            document[field] = int(document.get(field) or 0) + amount

        return self.modify(email, mutate)

    # ---- drafts ----------------------------------------------------------

    def insert_draft(self, email: str, draft_data: Mapping[str, Any], *, created_at: datetime | None = None) -> Document:
        with self._session() as session:
            row = DraftRecord(
                email=email,
                draft_data=copy.deepcopy(dict(draft_data)),
                created_at=created_at or datetime.now(timezone.utc),
            )
            session.add(row)
            session.flush()
            return _draft_to_document(row)

    def find_drafts(self, email: str) -> list[Document]:
        with self._session() as session:
            rows = (
                session.execute(select(DraftRecord).where(DraftRecord.email == email).order_by(DraftRecord.id))
                .scalars()
                .all()
            )
            return [_draft_to_document(row) for row in rows]
