from fastapi import APIRouter, Depends
from ..models import EventPublic
from ..schemas import AdminRoleUpdate, EventCreate
from ..store import RecordStore
from ..dependencies import get_store

router = APIRouter(prefix="/events")


@router.post("")
def create_event(
    body: EventCreate, store: RecordStore = Depends(get_store)
) -> EventPublic:
    creation = store.create_event(body.model_dump())
    return creation.event


@router.get("")
def index_events(store: RecordStore = Depends(get_store)) -> list[EventPublic]:
    return store.list_events()


@router.get("/{id}")
def get_event(id: str, store: RecordStore = Depends(get_store)) -> EventPublic:
    return store.get_event(id)


@router.post("/{id}/admin")
def set_admin_role(
    id: str, body: AdminRoleUpdate, store: RecordStore = Depends(get_store)
) -> EventPublic:
    return store.set_event_admin_role(id, body.admin_role)
