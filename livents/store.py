"""
Record storage for events and recordings.

Two backings share the ``RecordStore`` contract: ``MemoryStore`` keeps the
collections for the lifetime of the process, ``SQLStore`` keeps them in
SQLModel tables. Both return public models, never table rows.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Iterator, Mapping

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine, select

from .errors import NotFoundError, StorageError, ValidationError
from .models import AdminRole, Event, EventPublic, Recording, RecordingPublic

logger = logging.getLogger(__name__)

ADMIN_ROLES = tuple(role.value for role in AdminRole)

_EVENT_FIELDS = (
    "name",
    "description",
    "date",
    "time",
    "sp1_enabled",
    "sp2_enabled",
    "sp1_description",
    "sp2_description",
)
_RECORDING_FIELDS = ("event_id", "playback_url", "thumbnail_url", "duration_seconds")


@dataclass
class PlaceholderResult:
    """Outcome of the best-effort placeholder recording."""

    recording: RecordingPublic | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class EventCreation:
    event: EventPublic
    placeholder: PlaceholderResult = field(default_factory=PlaceholderResult)


def _pick(fields: Mapping[str, Any], names: tuple[str, ...]) -> dict[str, Any]:
    return {name: fields[name] for name in names if fields.get(name) is not None}


def _event_public(event: Event) -> EventPublic:
    return EventPublic.model_validate(event)


def _recording_public(recording: Recording) -> RecordingPublic:
    return RecordingPublic.model_validate(recording)


def parse_admin_role(role: Any) -> AdminRole:
    try:
        return AdminRole(role)
    except ValueError:
        raise ValidationError(f"adminRole must be one of {', '.join(ADMIN_ROLES)}") from None


class RecordStore(ABC):
    def init(self) -> None:
        """Prepare the backing before traffic is served."""

    def close(self) -> None:
        pass

    def create_event(self, fields: Mapping[str, Any]) -> EventCreation:
        """
        Store a new event, then insert its placeholder recording.

        The placeholder is not part of the same unit of work: if it fails the
        event stays stored and the failure is only reported in the result.
        """
        name = fields.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name is required")

        event = self._insert_event(Event(**_pick(fields, _EVENT_FIELDS)))
        logger.info("Created event %s (%s)", event.id, event.name)
        return EventCreation(event=event, placeholder=self._create_placeholder(event.id))

    def _create_placeholder(self, event_id: str) -> PlaceholderResult:
        try:
            recording = self.create_recording({"event_id": event_id})
        except StorageError as exc:
            logger.warning("Placeholder recording for event %s failed: %s", event_id, exc)
            return PlaceholderResult(error=str(exc))
        return PlaceholderResult(recording=recording)

    def set_event_admin_role(self, event_id: str, role: Any) -> EventPublic:
        admin_role = parse_admin_role(role)
        event = self._update_admin_role(event_id, admin_role)
        logger.info("Event %s admin role set to %s", event_id, admin_role.value)
        return event

    def create_recording(self, fields: Mapping[str, Any]) -> RecordingPublic:
        event_id = fields.get("event_id")
        if not isinstance(event_id, str) or not event_id.strip():
            raise ValidationError("eventId is required")

        recording = self._insert_recording(Recording(**_pick(fields, _RECORDING_FIELDS)))
        logger.info("Created recording %s for event %s", recording.id, recording.event_id)
        return recording

    @abstractmethod
    def _insert_event(self, event: Event) -> EventPublic: ...

    @abstractmethod
    def _update_admin_role(self, event_id: str, role: AdminRole) -> EventPublic: ...

    @abstractmethod
    def _insert_recording(self, recording: Recording) -> RecordingPublic: ...

    @abstractmethod
    def list_events(self) -> list[EventPublic]: ...

    @abstractmethod
    def get_event(self, event_id: str) -> EventPublic: ...

    @abstractmethod
    def list_recordings(self) -> list[RecordingPublic]: ...

    @abstractmethod
    def get_recording(self, recording_id: str) -> RecordingPublic: ...


class MemoryStore(RecordStore):
    def __init__(self) -> None:
        self._lock = RLock()
        self._events: list[Event] = []
        self._recordings: list[Recording] = []

    def _insert_event(self, event: Event) -> EventPublic:
        with self._lock:
            self._events.insert(0, event)
            return _event_public(event)

    def _find_event(self, event_id: str) -> Event:
        for event in self._events:
            if event.id == event_id:
                return event
        raise NotFoundError("Event not found")

    def _update_admin_role(self, event_id: str, role: AdminRole) -> EventPublic:
        with self._lock:
            event = self._find_event(event_id)
            event.admin_role = role.value
            return _event_public(event)

    def list_events(self) -> list[EventPublic]:
        with self._lock:
            return [_event_public(event) for event in self._events]

    def get_event(self, event_id: str) -> EventPublic:
        with self._lock:
            return _event_public(self._find_event(event_id))

    def _insert_recording(self, recording: Recording) -> RecordingPublic:
        with self._lock:
            self._recordings.insert(0, recording)
            return _recording_public(recording)

    def list_recordings(self) -> list[RecordingPublic]:
        with self._lock:
            return [_recording_public(recording) for recording in self._recordings]

    def get_recording(self, recording_id: str) -> RecordingPublic:
        with self._lock:
            for recording in self._recordings:
                if recording.id == recording_id:
                    return _recording_public(recording)
        raise NotFoundError("Recording not found")


class SQLStore(RecordStore):
    def __init__(self, url: str, echo: bool = False) -> None:
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(url, echo=echo, connect_args=connect_args)

    def init(self) -> None:
        try:
            SQLModel.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            logger.exception("Could not create tables")
            raise StorageError("Internal storage error") from exc
        logger.info("Storage ready at %s", self.engine.url)

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with Session(self.engine) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Storage fault")
            raise StorageError("Internal storage error") from exc

    def _insert_event(self, event: Event) -> EventPublic:
        with self._session() as session:
            session.add(event)
            session.commit()
            session.refresh(event)
            return _event_public(event)

    def _update_admin_role(self, event_id: str, role: AdminRole) -> EventPublic:
        with self._session() as session:
            # single statement so the check-and-set cannot be split
            result = session.exec(
                update(Event).where(Event.id == event_id).values(admin_role=role.value)
            )
            session.commit()
            if result.rowcount == 0:
                raise NotFoundError("Event not found")

            event = session.get(Event, event_id)
            if event is None:
                raise NotFoundError("Event not found")
            return _event_public(event)

    def list_events(self) -> list[EventPublic]:
        with self._session() as session:
            events = session.exec(
                select(Event).order_by(Event.created_at.desc(), Event.seq.desc())
            ).all()
            return [_event_public(event) for event in events]

    def get_event(self, event_id: str) -> EventPublic:
        with self._session() as session:
            event = session.get(Event, event_id)
            if event is None:
                raise NotFoundError("Event not found")
            return _event_public(event)

    def _insert_recording(self, recording: Recording) -> RecordingPublic:
        with self._session() as session:
            session.add(recording)
            session.commit()
            session.refresh(recording)
            return _recording_public(recording)

    def list_recordings(self) -> list[RecordingPublic]:
        with self._session() as session:
            recordings = session.exec(
                select(Recording).order_by(Recording.created_at.desc(), Recording.seq.desc())
            ).all()
            return [_recording_public(recording) for recording in recordings]

    def get_recording(self, recording_id: str) -> RecordingPublic:
        with self._session() as session:
            recording = session.get(Recording, recording_id)
            if recording is None:
                raise NotFoundError("Recording not found")
            return _recording_public(recording)


def build_store(settings) -> RecordStore:
    if settings.store_backend == "memory":
        return MemoryStore()
    return SQLStore(settings.database_url, echo=settings.db_echo)
