from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from formshare import questions as question_service
from formshare.routes.forms import read_json
from formshare.schema import sanitize_question_output

router = APIRouter(prefix="/api/questions")


@router.post("", tags=["api/questions"])
async def api_create_question(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    question = question_service.create_question(storage, payload)
    return JSONResponse(sanitize_question_output(question), status_code=201)


@router.get("", tags=["api/questions"])
async def api_list_questions(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    questions = question_service.list_questions(storage)
    return JSONResponse([sanitize_question_output(item) for item in questions])
