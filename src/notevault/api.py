"""FastAPI application exposing notes and templates over JSON.

Routes::

    GET    /api/notes                 list notes
    GET    /api/notes/daily           today's daily note (201 when created)
    GET    /api/notes/{id}            single note
    GET    /api/notes/{id}/links      direct neighbours with titles
    POST   /api/notes                 create (optionally from templateId)
    PUT    /api/notes/{id}            update title and/or content
    DELETE /api/notes/{id}            delete and unlink

    GET    /api/templates             list templates
    GET    /api/templates/{id}        single template
    POST   /api/templates             create
    PUT    /api/templates/{id}        update
    DELETE /api/templates/{id}        delete
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from notevault import __version__
from notevault.config import Settings
from notevault.errors import PersistenceError, VaultError
from notevault.service import NoteService

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class NoteCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    content: str | None = None
    template_id: str | None = Field(default=None, alias="templateId")


class NoteUpdate(BaseModel):
    title: str | None = None
    content: str | None = None


class TemplateBody(BaseModel):
    title: str | None = None
    content: str | None = None


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------


def _notes_router(service: NoteService) -> APIRouter:
    router = APIRouter(prefix="/api/notes", tags=["notes"])

    @router.get("")
    def list_notes() -> list[dict[str, Any]]:
        return [note.to_dict() for note in service.list_notes()]

    @router.get("/daily")
    def daily_note(response: Response) -> dict[str, Any]:
        note, created = service.daily_note()
        if created:
            response.status_code = status.HTTP_201_CREATED
        return note.to_dict()

    @router.get("/{note_id}")
    def get_note(note_id: str) -> dict[str, Any]:
        return service.get_note(note_id).to_dict()

    @router.get("/{note_id}/links")
    def get_links(note_id: str) -> dict[str, Any]:
        return {"id": note_id, **service.linked_notes(note_id)}

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_note(body: NoteCreate) -> dict[str, Any]:
        return service.create_note(body.title, body.content, body.template_id).to_dict()

    @router.put("/{note_id}")
    def update_note(note_id: str, body: NoteUpdate) -> dict[str, Any]:
        return service.update_note(note_id, body.title, body.content).to_dict()

    @router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_note(note_id: str) -> Response:
        service.delete_note(note_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


def _templates_router(service: NoteService) -> APIRouter:
    router = APIRouter(prefix="/api/templates", tags=["templates"])

    @router.get("")
    def list_templates() -> list[dict[str, Any]]:
        return [tpl.to_dict() for tpl in service.list_templates()]

    @router.get("/{template_id}")
    def get_template(template_id: str) -> dict[str, Any]:
        return service.get_template(template_id).to_dict()

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_template(body: TemplateBody) -> dict[str, Any]:
        return service.create_template(body.title, body.content).to_dict()

    @router.put("/{template_id}")
    def update_template(template_id: str, body: TemplateBody) -> dict[str, Any]:
        return service.update_template(template_id, body.title, body.content).to_dict()

    @router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_template(template_id: str) -> Response:
        service.delete_template(template_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(service: NoteService | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the application; a service is created from *settings* when not given."""
    owns_backend = service is None
    if service is None:
        settings = settings or Settings.load()
        service = NoteService(settings.build_backend())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        close = getattr(service.backend, "close", None)
        if owns_backend and close is not None:
            close()
            logger.info("Closed storage backend")

    app = FastAPI(title="notevault", version=__version__, lifespan=lifespan)
    app.state.service = service

    @app.exception_handler(VaultError)
    async def vault_error_handler(request: Request, exc: VaultError) -> JSONResponse:
        if isinstance(exc, PersistenceError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(_notes_router(service))
    app.include_router(_templates_router(service))
    return app
