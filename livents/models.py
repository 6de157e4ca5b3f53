from enum import Enum
from sqlmodel import SQLModel, Field
from datetime import datetime, UTC
from .ids import new_id, next_sequence


class AdminRole(str, Enum):
    SUPERADMIN = "superadmin"
    P2 = "p2"
    P3 = "p3"


def _now() -> datetime:
    return datetime.now(UTC)


class EventBase(SQLModel):
    name: str
    description: str = ""
    date: str = ""
    time: str = ""
    sp1_enabled: bool = False
    sp2_enabled: bool = False
    sp1_description: str = ""
    sp2_description: str = ""


class Event(EventBase, table=True):
    __tablename__ = "events"

    id: str = Field(primary_key=True, default_factory=new_id)
    admin_role: str = Field(default=AdminRole.SUPERADMIN.value)
    auto_record: bool = True
    created_at: datetime = Field(default_factory=_now, index=True)
    # insertion order, breaks created_at ties
    seq: int = Field(default_factory=next_sequence, index=True)


class EventPublic(EventBase):
    id: str
    admin_role: AdminRole
    auto_record: bool
    created_at: datetime


class RecordingBase(SQLModel):
    # declarative only, sqlite leaves foreign keys unenforced
    event_id: str = Field(foreign_key="events.id", index=True)
    playback_url: str = ""
    thumbnail_url: str = ""
    duration_seconds: int | None = None


class Recording(RecordingBase, table=True):
    __tablename__ = "recordings"

    id: str = Field(primary_key=True, default_factory=new_id)
    created_at: datetime = Field(default_factory=_now, index=True)
    # insertion order, breaks created_at ties
    seq: int = Field(default_factory=next_sequence, index=True)


class RecordingPublic(RecordingBase):
    id: str
    created_at: datetime
