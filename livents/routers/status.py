from datetime import datetime, UTC
from fastapi import APIRouter, Request
from ..schemas import TokenResponse

VERSION = "1.0.0"
PROVIDERS = ["Livekit", "Mux"]

# fixed until a streaming provider issues real tokens
VIEWER_TOKEN = "viewer-token-placeholder"
PRODUCER_TOKEN = "producer-token-placeholder"

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


@router.get("/")
async def root(request: Request):
    return {
        "message": f"{request.app.state.settings.service_name} server is running!",
        "service": request.app.state.settings.service_name,
        "features": PROVIDERS,
        "status": "OK",
        "version": VERSION,
        "timestamp": _timestamp(),
    }


@router.get("/health")
async def health(request: Request):
    return {
        "status": "healthy",
        "service": request.app.state.settings.service_name,
        "timestamp": _timestamp(),
    }


@router.get("/api/status")
async def api_status(request: Request):
    return {
        "service": request.app.state.settings.service_name,
        "version": VERSION,
        "providers": PROVIDERS,
        "endpoints": {
            "events": "/events",
            "recordings": "/recordings",
            "viewer": "/getViewerToken",
            "producer": "/getProducerToken",
            "livekit": "/api/livekit/status",
        },
        "timestamp": _timestamp(),
    }


@router.get("/getViewerToken")
async def viewer_token() -> TokenResponse:
    return TokenResponse(token=VIEWER_TOKEN)


@router.get("/getProducerToken")
async def producer_token() -> TokenResponse:
    return TokenResponse(token=PRODUCER_TOKEN)


@router.get("/api/livekit/status")
async def livekit_status():
    return {
        "livekit": "configured",
        "status": "ready for low-latency streams",
        "note": "token generation is stubbed until the Livekit SDK is wired in",
    }
