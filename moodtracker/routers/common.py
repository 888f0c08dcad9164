# moodtracker/routers/common.py
from typing import Any

from fastapi.responses import JSONResponse

from moodtracker.core.errors import ValidationError
from moodtracker.services.result import ServiceResult


def respond(result: ServiceResult, success_status: int = 200) -> JSONResponse:
    """Render a service result as the response envelope"""
    status = success_status if result.ok else result.status_code
    return JSONResponse(result.to_envelope(), status_code=status)


def parse_path_id(raw: Any, label: str) -> int:
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"Invalid {label} ID")
    if value < 1:
        raise ValidationError(f"Invalid {label} ID")
    return value
