"""Entry point for the CodeDrop server."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dropcommon.constants import DEFAULT_EXPIRATION_OPTION, EXPIRATION_OPTIONS
from dropcommon.logging_config import setup_logging
from dropserver import config
from dropserver.cleanup_task import ExpiredEntrySweeper
from dropserver.exceptions import (
    DropError,
    ValidationError,
    InvalidCodeFormatError,
    PayloadTooLargeError,
    PasteNotFoundError,
    EditForbiddenError,
    CodeSpaceExhaustedError,
    UploadNotFoundError,
    UploadExpiredError,
    InvalidChunkIndexError,
    UploadIncompleteError,
    MissingChunkError,
    UploadInProgressError,
    StorageError,
)
from dropserver.routes.paste_routes import router as paste_router
from dropserver.routes.upload_routes import router as upload_router
from dropserver.schemas.common import LimitsResponse
from dropserver.service_locator import get_paste_repository

logger = setup_logging('dropserver')

app = FastAPI(
    title="CodeDrop",
    description="Ephemeral text and file sharing with short numeric codes",
    version="1.0.0"
)

sweeper = ExpiredEntrySweeper()

# (status, error code, client-facing message override) per exception type.
# Handlers are looked up along the exception MRO, so subclasses win.
ERROR_RESPONSES = {
    ValidationError: (status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", None),
    InvalidCodeFormatError: (status.HTTP_400_BAD_REQUEST, "INVALID_CODE_FORMAT", None),
    PayloadTooLargeError: (status.HTTP_400_BAD_REQUEST, "PAYLOAD_TOO_LARGE", None),
    InvalidChunkIndexError: (status.HTTP_400_BAD_REQUEST, "INVALID_CHUNK_INDEX", None),
    UploadIncompleteError: (status.HTTP_400_BAD_REQUEST, "UPLOAD_INCOMPLETE", None),
    MissingChunkError: (status.HTTP_400_BAD_REQUEST, "MISSING_CHUNK", None),
    EditForbiddenError: (status.HTTP_403_FORBIDDEN, "EDIT_FORBIDDEN", None),
    PasteNotFoundError: (status.HTTP_404_NOT_FOUND, "NOT_FOUND", None),
    UploadNotFoundError: (status.HTTP_404_NOT_FOUND, "UPLOAD_NOT_FOUND", None),
    UploadInProgressError: (status.HTTP_409_CONFLICT, "UPLOAD_IN_PROGRESS", None),
    UploadExpiredError: (status.HTTP_410_GONE, "UPLOAD_EXPIRED", None),
    CodeSpaceExhaustedError: (status.HTTP_503_SERVICE_UNAVAILABLE, "CODE_SPACE_EXHAUSTED", "No free codes available, try again later"),
    StorageError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR", "Storage error"),
    DropError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error"),
}

INTERNAL_ERROR_RESPONSE = ERROR_RESPONSES[DropError]


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize storage and start the periodic sweep.
    """
    logger.info(f"CodeDrop starting up (backend={config.STORAGE_BACKEND})...")

    get_paste_repository()
    logger.info("Storage initialized")

    await sweeper.start()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop background tasks on application shutdown.
    """
    logger.info("CodeDrop shutting down...")

    await sweeper.stop()


async def drop_error_handler(request: Request, exc: DropError):
    """
    Translate a DropError into its JSON error response.
    """
    request_id = getattr(request.state, 'request_id', 'unknown')

    status_code, code, public_message = INTERNAL_ERROR_RESPONSE
    for exc_type in type(exc).__mro__:
        if exc_type in ERROR_RESPONSES:
            status_code, code, public_message = ERROR_RESPONSES[exc_type]
            break

    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc
        )
    else:
        logger.warning(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
        )

    return JSONResponse(
        status_code=status_code,
        content={"detail": public_message or str(exc), "code": code}
    )


for _exc_type in ERROR_RESPONSES:
    app.add_exception_handler(_exc_type, drop_error_handler)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"Invalid field '{field}': {first.get('msg')}" if field else str(first.get('msg'))
    else:
        detail = "Invalid request"

    logger.warning(f"Request validation error: {detail} [request_id={request_id}] path={request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "code": "VALIDATION_ERROR"}
    )


app.include_router(paste_router)
app.include_router(upload_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "CodeDrop API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for container healthchecks.
    """
    return {"status": "healthy", "service": "dropserver"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint. Verifies the storage backend answers.
    """
    try:
        get_paste_repository().exists("0000")
        storage_status = "ok"
    except Exception as e:
        storage_status = f"error: {str(e)}"

    ready = storage_status == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"ready": ready, "storage": storage_status, "backend": config.STORAGE_BACKEND}
    )


@app.get("/limits", response_model=LimitsResponse)
async def limits():
    """
    Size limits, chunk size and expiration choices for clients.
    """
    return LimitsResponse(
        max_file_size=config.MAX_FILE_SIZE,
        max_total_files_size=config.MAX_TOTAL_FILES_SIZE,
        max_files=config.MAX_FILE_COUNT,
        chunk_size=config.CHUNK_SIZE,
        expiration_options=EXPIRATION_OPTIONS,
        default_expiration=DEFAULT_EXPIRATION_OPTION,
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "dropserver.main:app",
        host=config.SERVER_HOST,
        port=config.SERVER_PORT,
    )


if __name__ == "__main__":
    main()
