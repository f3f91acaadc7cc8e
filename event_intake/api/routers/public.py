import json
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from pydantic import ValidationError

from event_intake.api.schemas import RegistrationRequest
from event_intake.core.logging import log_evt, logger
from event_intake.services.registrations import RegistrationService

router = APIRouter()

MISSING_FIELDS_MESSAGE = "Missing required fields"
INVALID_PAYLOAD_MESSAGE = "Invalid registration payload"
SERVER_ERROR_MESSAGE = "Error processing registration"

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_registration_service(request: Request) -> RegistrationService:
    return request.app.state.registrations


async def _read_body(request: Request) -> Any:
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}
    return json.loads(raw)


@router.get("/", include_in_schema=False)
def root(request: Request):
    path = Path(request.app.state.static_dir) / "index.html"
    if path.is_file():
        return FileResponse(path)
    return HTMLResponse("<h2>index.html not found</h2>", status_code=404)


@router.post("/register", status_code=201)
async def register(request: Request, service: RegistrationService = Depends(get_registration_service)):
    try:
        payload = RegistrationRequest.model_validate(await _read_body(request))
    except (ValueError, ValidationError):
        return JSONResponse(status_code=400, content={"success": False, "message": INVALID_PAYLOAD_MESSAGE})

    missing = payload.missing_fields()
    if missing:
        log_evt("info", "registration_rejected", missing=",".join(missing))
        return JSONResponse(status_code=400, content={"success": False, "message": MISSING_FIELDS_MESSAGE})

    record = payload.to_record()
    try:
        outcome = await service.store(record)
    except Exception as exc:
        logger.exception("REGISTRATION FAILED")
        # Underlying error text is returned to the caller as-is.
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": SERVER_ERROR_MESSAGE, "error": str(exc)},
        )

    return JSONResponse(status_code=201, content=outcome.to_body())
