from __future__ import annotations

from typing import Any

import orjson
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from formshare import forms as form_service
from formshare.errors import ValidationError
from formshare.responses import count_responses
from formshare.schema import extract_answers, sanitize_form_output

router = APIRouter(prefix="/api/forms")


async def read_json(request: Request) -> Any:
    body = await request.body()
    if not body:
        return {}
    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise ValidationError("Request body is not valid JSON") from exc


@router.post("", tags=["api/forms"])
async def api_create_form(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    settings = request.app.state.settings
    payload = await read_json(request)
    created = form_service.create_form(storage, payload, settings)
    return JSONResponse(created)


@router.get("/respond/{share_id}", tags=["api/forms"])
async def api_get_form_by_share_id(request: Request, share_id: str) -> JSONResponse:
    storage = request.app.state.storage
    form = form_service.get_form_by_share_id(storage, share_id)
    return JSONResponse(sanitize_form_output(form))


@router.post("/share/{share_id}/submit", tags=["api/responses"])
async def api_submit_by_share_id(request: Request, share_id: str) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    form_service.append_response(
        storage, share_id=share_id, answers=extract_answers(payload)
    )
    return JSONResponse({"success": True})


@router.get("/{form_id}", tags=["api/forms"])
async def api_get_form(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    form = form_service.get_form(storage, form_id)
    return JSONResponse(
        sanitize_form_output(form, response_count=count_responses(storage, form_id))
    )


@router.put("/{form_id}", tags=["api/forms"])
async def api_update_form(
    request: Request, form_id: str, key: str | None = None
) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    form_service.update_form(storage, form_id, key, payload)
    return JSONResponse({"success": True})


@router.post("/{form_id}/submit", tags=["api/responses"])
async def api_submit_by_form_id(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    form_service.append_response(
        storage, form_id=form_id, answers=extract_answers(payload)
    )
    return JSONResponse({"success": True})
