from datetime import datetime, UTC

import pytest

from livents.errors import NotFoundError, StorageError, ValidationError
from livents.models import AdminRole, Event, Recording
from livents.store import MemoryStore, SQLStore


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        yield MemoryStore()
        return

    sql = SQLStore(f"sqlite:///{tmp_path / 'store.db'}")
    sql.init()
    yield sql
    sql.close()


def test_create_event_applies_defaults(store) -> None:
    creation = store.create_event({"name": "Demo"})
    event = creation.event

    assert event.id
    assert event.name == "Demo"
    assert event.description == ""
    assert event.date == ""
    assert event.time == ""
    assert event.sp1_enabled is False
    assert event.sp2_enabled is False
    assert event.sp1_description == ""
    assert event.sp2_description == ""
    assert event.admin_role == AdminRole.SUPERADMIN
    assert event.auto_record is True
    assert event.created_at is not None


def test_create_event_ignores_client_managed_fields(store) -> None:
    event = store.create_event(
        {"name": "Demo", "admin_role": "p3", "auto_record": False, "id": "mine"}
    ).event

    assert event.id != "mine"
    assert event.admin_role == AdminRole.SUPERADMIN
    assert event.auto_record is True


@pytest.mark.parametrize("fields", [{}, {"name": ""}, {"name": "   "}, {"name": None}])
def test_create_event_requires_name(store, fields) -> None:
    with pytest.raises(ValidationError):
        store.create_event(fields)

    assert store.list_events() == []
    assert store.list_recordings() == []


def test_create_event_inserts_placeholder_recording(store) -> None:
    creation = store.create_event({"name": "Demo"})

    assert creation.placeholder.ok
    placeholder = creation.placeholder.recording
    assert placeholder.event_id == creation.event.id
    assert placeholder.playback_url == ""
    assert placeholder.thumbnail_url == ""
    assert placeholder.duration_seconds is None
    assert [recording.id for recording in store.list_recordings()] == [placeholder.id]


def test_events_list_newest_first(store) -> None:
    ids = [store.create_event({"name": name}).event.id for name in ("A", "B", "C")]

    listed = store.list_events()
    assert [event.id for event in listed] == list(reversed(ids))
    assert [event.name for event in listed] == ["C", "B", "A"]


def test_get_event_unknown_raises_not_found(store) -> None:
    with pytest.raises(NotFoundError):
        store.get_event("missing")


def test_set_admin_role_updates_event(store) -> None:
    event = store.create_event({"name": "Demo"}).event

    updated = store.set_event_admin_role(event.id, "p2")

    assert updated.admin_role == AdminRole.P2
    assert store.get_event(event.id).admin_role == AdminRole.P2
    assert store.get_event(event.id).name == "Demo"


def test_set_admin_role_rejects_invalid_role_before_lookup(store) -> None:
    event = store.create_event({"name": "Demo"}).event

    with pytest.raises(ValidationError):
        store.set_event_admin_role(event.id, "owner")
    with pytest.raises(ValidationError):
        store.set_event_admin_role("missing", "owner")
    with pytest.raises(ValidationError):
        store.set_event_admin_role("missing", None)

    assert store.get_event(event.id).admin_role == AdminRole.SUPERADMIN


def test_set_admin_role_unknown_event_raises_not_found(store) -> None:
    with pytest.raises(NotFoundError):
        store.set_event_admin_role("missing", "p3")


def test_create_recording_applies_defaults(store) -> None:
    recording = store.create_recording({"event_id": "evt1"})

    assert recording.id
    assert recording.event_id == "evt1"
    assert recording.playback_url == ""
    assert recording.thumbnail_url == ""
    assert recording.duration_seconds is None
    assert recording.created_at is not None
    assert store.get_recording(recording.id) == recording


def test_create_recording_keeps_media_fields(store) -> None:
    recording = store.create_recording(
        {
            "event_id": "evt1",
            "playback_url": "https://cdn.example/play.m3u8",
            "thumbnail_url": "https://cdn.example/thumb.jpg",
            "duration_seconds": 95,
        }
    )

    fetched = store.get_recording(recording.id)
    assert fetched.playback_url == "https://cdn.example/play.m3u8"
    assert fetched.thumbnail_url == "https://cdn.example/thumb.jpg"
    assert fetched.duration_seconds == 95


def test_create_recording_requires_event_id(store) -> None:
    with pytest.raises(ValidationError):
        store.create_recording({"playback_url": "x"})

    assert store.list_recordings() == []


def test_recordings_list_newest_first(store) -> None:
    first = store.create_recording({"event_id": "a"})
    second = store.create_recording({"event_id": "b"})

    assert [recording.id for recording in store.list_recordings()] == [second.id, first.id]


def test_get_recording_unknown_raises_not_found(store) -> None:
    with pytest.raises(NotFoundError):
        store.get_recording("missing")


class FailingPlaceholderStore(MemoryStore):
    def _insert_recording(self, recording):
        raise StorageError("disk full")


def test_placeholder_failure_keeps_event() -> None:
    store = FailingPlaceholderStore()

    creation = store.create_event({"name": "Demo"})

    assert not creation.placeholder.ok
    assert creation.placeholder.recording is None
    assert "disk full" in creation.placeholder.error
    assert store.get_event(creation.event.id).name == "Demo"
    assert store.list_recordings() == []


def test_sql_store_persists_across_instances(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'persist.db'}"
    first = SQLStore(url)
    first.init()
    event = first.create_event({"name": "Kept"}).event
    first.set_event_admin_role(event.id, "p3")
    first.close()

    second = SQLStore(url)
    second.init()
    try:
        fetched = second.get_event(event.id)
        assert fetched.name == "Kept"
        assert fetched.admin_role == AdminRole.P3
        assert [recording.event_id for recording in second.list_recordings()] == [event.id]
    finally:
        second.close()


def test_sql_store_reports_storage_fault(tmp_path) -> None:
    # tables never created
    store = SQLStore(f"sqlite:///{tmp_path / 'empty.db'}")
    try:
        with pytest.raises(StorageError):
            store.list_events()
    finally:
        store.close()


def test_sql_listing_breaks_timestamp_ties_by_insertion(sql_store) -> None:
    stamp = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
    for name in ("A", "B", "C"):
        sql_store._insert_event(Event(name=name, created_at=stamp))
    for event_id in ("a", "b", "c"):
        sql_store._insert_recording(Recording(event_id=event_id, created_at=stamp))

    assert [event.name for event in sql_store.list_events()] == ["C", "B", "A"]
    assert [recording.event_id for recording in sql_store.list_recordings()] == ["c", "b", "a"]
