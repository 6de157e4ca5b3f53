from fastapi import APIRouter, Depends
from ..models import RecordingPublic
from ..schemas import RecordingCreate
from ..store import RecordStore
from ..dependencies import get_store

router = APIRouter(prefix="/recordings")


@router.get("")
def index_recordings(store: RecordStore = Depends(get_store)) -> list[RecordingPublic]:
    return store.list_recordings()


@router.get("/{id}")
def get_recording(id: str, store: RecordStore = Depends(get_store)) -> RecordingPublic:
    return store.get_recording(id)


@router.post("")
def create_recording(
    body: RecordingCreate, store: RecordStore = Depends(get_store)
) -> RecordingPublic:
    return store.create_recording(body.model_dump())
