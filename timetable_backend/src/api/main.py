import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.core import timetable
from src.api.core.errors import NotFound, TimetableError
from src.api.core.settings import Settings, get_settings
from src.api.core.storage import JsonStore
from src.api.models import (
    CreateSemesterRequest,
    DataResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    SaveDataRequest,
    SemesterCreatedResponse,
)

logger = logging.getLogger("timetable.api")

openapi_tags = [
    {"name": "Health", "description": "Service health endpoints."},
    {"name": "Data", "description": "Whole-document reads and writes."},
    {"name": "Semesters", "description": "Semester-scoped CRUD."},
]

error_responses = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

router = APIRouter()


def get_store(request: Request) -> JsonStore:
    return request.app.state.store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.get(
    "/api/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check",
    operation_id="health_check",
)
def health_check():
    """Report liveness and the current server time. Does not touch the store."""
    return HealthResponse(message="Server is running", timestamp=datetime.now(timezone.utc).isoformat())


@router.get(
    "/api/data",
    response_model=DataResponse,
    responses=error_responses,
    tags=["Data"],
    summary="Get all data",
    operation_id="get_data",
)
def get_data(store: JsonStore = Depends(get_store)):
    """Return the whole timetable document."""
    return DataResponse(data=timetable.read_document(store))


@router.post(
    "/api/data",
    response_model=MessageResponse,
    responses=error_responses,
    tags=["Data"],
    summary="Save all data",
    operation_id="save_data",
)
def save_data(payload: SaveDataRequest, store: JsonStore = Depends(get_store)):
    """Replace the whole timetable document with the supplied one."""
    timetable.replace_document(store, payload.data)
    return MessageResponse(message="Data saved successfully")


@router.get(
    "/api/semester/{name}",
    response_model=DataResponse,
    responses=error_responses,
    tags=["Semesters"],
    summary="Get semester",
    operation_id="get_semester",
)
def get_semester(name: str, store: JsonStore = Depends(get_store)):
    """Return a single semester by name."""
    return DataResponse(data=timetable.get_semester(store, name))


@router.post(
    "/api/semester",
    response_model=SemesterCreatedResponse,
    responses=error_responses,
    tags=["Semesters"],
    summary="Create semester",
    operation_id="create_semester",
)
def create_semester(payload: CreateSemesterRequest, store: JsonStore = Depends(get_store)):
    """Create an empty semester with the default college."""
    semester = timetable.create_semester(store, payload.name)
    return SemesterCreatedResponse(message="Semester created", data=semester)


@router.delete(
    "/api/semester/{name}",
    response_model=MessageResponse,
    responses=error_responses,
    tags=["Semesters"],
    summary="Delete semester",
    operation_id="delete_semester",
)
def delete_semester(name: str, store: JsonStore = Depends(get_store)):
    """Delete a semester, moving the current selection off it if needed."""
    timetable.delete_semester(store, name)
    return MessageResponse(message="Semester deleted")


@router.get("/{full_path:path}", include_in_schema=False)
def serve_frontend(full_path: str, request: Request):
    """Serve static assets, falling back to index.html for client-side routes."""
    public_dir = Path(request.app.state.settings.public_dir).resolve()
    if full_path:
        candidate = (public_dir / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(public_dir):
            return FileResponse(candidate)
    index = public_dir / "index.html"
    if not index.is_file():
        raise NotFound("Not found")
    return FileResponse(index)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TimetableError)
    async def timetable_error_handler(request: Request, exc: TimetableError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body for %s %s: %s", request.method, request.url.path, exc.errors())
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))


def _register_middleware(app: FastAPI, settings: Settings) -> None:
    @app.middleware("http")
    async def body_limit_middleware(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.max_body_bytes:
            return _error(413, "Payload too large")
        return await call_next(request)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        started = time.perf_counter()
        response: Response
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s (request %s)", request.method, request.url.path, req_id)
            response = _error(500, "Internal server error")
        response.headers["X-Request-ID"] = req_id
        if request.url.path.startswith("/api"):
            elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
            logger.info(
                "request_done %s",
                json.dumps(
                    {
                        "request_id": req_id,
                        "path": request.url.path,
                        "method": request.method,
                        "status_code": response.status_code,
                        "duration_ms": elapsed_ms,
                        "client": request.client.host if request.client else "unknown",
                    },
                    ensure_ascii=True,
                ),
            )
        return response


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API over the document file named in ``settings``.

    The document is seeded on disk here if it does not exist yet.
    """
    settings = settings or get_settings()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Timetable server running on port %s", settings.port)
        logger.info("Database file: %s", settings.data_file)
        yield

    app = FastAPI(
        title="Timetable Cloud API",
        description="Persistence API for timetable semesters, courses, teachers, subjects and schedules.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = JsonStore(settings.data_file, timetable.initial_document)

    _register_middleware(app, settings)
    # Must stay outermost: 413 and 500 responses built by the middleware above need CORS headers.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
