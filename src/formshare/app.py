from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from formshare.config import BASE_DIR, Settings
from formshare.errors import FormShareError
from formshare.routes.forms import router as forms_router
from formshare.routes.public import router as public_router
from formshare.routes.questions import router as questions_router
from formshare.routes.responses import router as responses_router
from formshare.schema import split_cloze
from formshare.storage import init_storage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("formshare").setLevel(level)


def format_dt(value: Any) -> str:
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M")
    return str(value or "")


async def formshare_error_handler(request: Request, exc: FormShareError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)
    storage = init_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        storage.close()

    app = FastAPI(
        title="formshare",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "public", "description": "Public respondent view (HTML)"},
            {"name": "api/forms", "description": "REST API: forms"},
            {"name": "api/responses", "description": "REST API: responses"},
            {"name": "api/questions", "description": "REST API: question bank"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.storage = storage
    app.state.settings = settings

    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
    app.state.templates = templates
    templates.env.globals["split_cloze"] = split_cloze
    templates.env.globals["format_dt"] = format_dt

    app.add_exception_handler(FormShareError, formshare_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(public_router)
    app.include_router(forms_router)
    app.include_router(responses_router)
    app.include_router(questions_router)

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("formshare app ready (storage=%s)", settings.storage_backend)
    return app
