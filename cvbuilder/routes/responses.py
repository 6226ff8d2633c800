# cvbuilder/routes/responses.py
from __future__ import annotations
from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def json_response(body: Any, status_code: int = 200, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers={**CORS_HEADERS, **(headers or {})})


def error_response(
    status_code: int,
    error: str,
    details: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body = {"success": False, "error": error}
    if details:
        body["details"] = details
    return json_response(body, status_code=status_code, headers=headers)
