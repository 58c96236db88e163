from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from formshare import responses as response_service
from formshare.routes.forms import read_json
from formshare.schema import extract_answers, sanitize_response_output

router = APIRouter(prefix="/api/responses")


@router.post("/share/{share_id}", tags=["api/responses"])
async def api_create_response_by_share_id(
    request: Request, share_id: str
) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    response_service.create_response_by_share_id(
        storage, share_id, extract_answers(payload)
    )
    return JSONResponse({"success": True}, status_code=201)


@router.post("/{form_id}", tags=["api/responses"])
async def api_create_response(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    response_service.create_response(storage, form_id, extract_answers(payload))
    return JSONResponse({"success": True}, status_code=201)


@router.get("/{form_id}", tags=["api/responses"])
async def api_list_responses(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    responses = response_service.list_responses(storage, form_id)
    return JSONResponse([sanitize_response_output(item) for item in responses])
