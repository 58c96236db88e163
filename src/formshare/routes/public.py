from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from formshare import forms as form_service
from formshare.errors import NotFoundError
from formshare.schema import cloze_blank_count

router = APIRouter()


def collect_answers(
    questions: list[dict[str, Any]], form_data: Any
) -> list[dict[str, Any]]:
    """Build ``{questionId, value}`` pairs from a submitted HTML form.

    Cloze questions with more than one blank answer with a list, one value per
    blank; unanswered questions are left out.
    """
    answers: list[dict[str, Any]] = []
    for question in questions:
        name = f"q.{question['id']}"
        if question.get("type") == "cloze" and cloze_blank_count(question.get("content", "")) > 1:
            values = [str(v).strip() for v in form_data.getlist(name)]
            if any(values):
                answers.append({"questionId": question["id"], "value": values})
            continue
        raw_value = form_data.get(name)
        value = str(raw_value).strip() if raw_value is not None else ""
        if value:
            answers.append({"questionId": question["id"], "value": value})
    return answers


@router.get("/f/{share_id}", response_class=HTMLResponse, tags=["public"])
async def public_form(request: Request, share_id: str) -> HTMLResponse:
    storage = request.app.state.storage
    templates = request.app.state.templates
    try:
        form = form_service.get_form_by_share_id(storage, share_id)
    except NotFoundError:
        return templates.TemplateResponse(
            request, "form_not_found.html", {}, status_code=404
        )
    return templates.TemplateResponse(
        request, "form_public.html", {"form": form, "errors": []}
    )


@router.post("/f/{share_id}", response_class=HTMLResponse, tags=["public"])
async def submit_form(request: Request, share_id: str) -> HTMLResponse:
    storage = request.app.state.storage
    templates = request.app.state.templates
    try:
        form = form_service.get_form_by_share_id(storage, share_id)
    except NotFoundError:
        return templates.TemplateResponse(
            request, "form_not_found.html", {}, status_code=404
        )

    form_data = await request.form()
    answers = collect_answers(form["questions"], form_data)
    if not answers:
        return templates.TemplateResponse(
            request,
            "form_public.html",
            {
                "form": form,
                "errors": ["Answer at least one question before submitting."],
            },
            status_code=400,
        )

    form_service.append_response(storage, share_id=share_id, answers=answers)
    return templates.TemplateResponse(request, "submission_done.html", {"form": form})
