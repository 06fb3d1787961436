"""
FastAPI snapshot service.

GET    /session/{id}?name={key} -> 200 {state} | 400 | 404 | 500
POST   /session/{id}  {name, state} -> 200 {success} | 400 | 404 | 500
DELETE /session/{id}?name={key} -> 200 {success} | 400 | 404 | 500
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from boardsync.api.models import (
    ErrorResponse,
    StateResponse,
    StoreStateRequest,
    SuccessResponse,
)
from boardsync.core.config import configure_logging
from boardsync.core.exceptions import RepositoryError, SessionNotFoundError
from boardsync.db.database import get_db, init_db
from boardsync.db.sql_repository import SQLSnapshotRepository
from boardsync.services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)


def get_service(db: Session = Depends(get_db)) -> SnapshotService:
    return SnapshotService(SQLSnapshotRepository(db))


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    yield


ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def create_app(with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title="boardsync", lifespan=lifespan if with_lifespan else None)

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Session not found")

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request")

    @app.exception_handler(RepositoryError)
    @app.exception_handler(SQLAlchemyError)
    async def storage_failure(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to access session state")

    @app.get("/session/{session_id}", response_model=StateResponse, responses=ERROR_RESPONSES)
    def get_state(
        session_id: int,
        name: Optional[str] = None,
        service: SnapshotService = Depends(get_service),
    ):
        if not name:
            return _error(status.HTTP_400_BAD_REQUEST, "Missing name parameter")
        return service.get_state(session_id, name)

    @app.post("/session/{session_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
    def store_state(
        session_id: int,
        request: StoreStateRequest,
        service: SnapshotService = Depends(get_service),
    ):
        return service.store_state(session_id, request)

    @app.delete("/session/{session_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
    def remove_state(
        session_id: int,
        name: Optional[str] = None,
        service: SnapshotService = Depends(get_service),
    ):
        if not name:
            return _error(status.HTTP_400_BAD_REQUEST, "Missing name parameter")
        return service.remove_state(session_id, name)

    return app


app = create_app()
