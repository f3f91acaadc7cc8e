from fastapi import APIRouter, Request

from event_intake.services.registrations import format_datetime

router = APIRouter()


@router.get("/health")
def health(request: Request):
    service = request.app.state.registrations
    status = service.database.status

    db_ok = service.database.is_connected()
    return {
        "ok": db_ok,
        "db": {
            "connected": db_ok,
            "error": status.error if status is not None else None,
            "checked_at": format_datetime(status.checked_at) if status is not None else None,
        },
        "port": request.app.state.listen_port,
        "asset_rewritten": request.app.state.asset_rewritten,
        "fallback_count": len(service.fallback),
    }
