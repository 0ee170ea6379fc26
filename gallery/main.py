from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from .core.config import Settings, settings as default_settings
from .core.errors import ErrorKind, ImageServiceError
from .core.models import HealthResponse
from .core.observability import RequestLoggingMiddleware, configure_logging
from .routers.images import router as images_router
from .storage.local import ImageStore

tags_metadata = [
    {
        "name": "images",
        "description": (
            "Endpoints to upload and list images.\n\n"
            "- Upload as a base64 string inside a JSON body.\n"
            "- Format detection from magic bytes (JPEG/PNG/GIF/WEBP).\n"
            "- Stored files are served as-is under /uploads."
        ),
    }
]


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared Content-Length is above the limit."""

    def __init__(self, app, max_body_bytes: int):
        super().__init__(app)
        self.max_body_bytes = max_body_bytes

    async def dispatch(self, request: Request, call_next):
        length = request.headers.get("content-length")
        if length is not None and length.isdigit() and int(length) > self.max_body_bytes:
            err = ImageServiceError(ErrorKind.PAYLOAD_TOO_LARGE)
            return JSONResponse(status_code=err.kind.status_code, content=err.to_payload())
        return await call_next(request)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    store = ImageStore(settings.upload_dir)
    store.ensure_directory()

    app = FastAPI(
        title="Image Gallery Service",
        description=(
            "How to Use:\n\n"
            "1) Upload an image: POST /upload with a JSON body `{\"title\", \"description\", \"image\"}` where `image` is base64.\n"
            "2) List images: GET /api/images.\n"
            "3) Fetch an image: GET /uploads/{filename} using the url returned by the upload.\n\n"
            "Notes: There is no authentication and uploads are never deleted by the service."
        ),
        openapi_tags=tags_metadata,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store

    # Added last runs first: CORS wraps the size check so 413s still carry CORS headers.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "HEAD", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    @app.get("/", response_model=HealthResponse, summary="Liveness check")
    def root():
        return HealthResponse(message="Image Server is running", port=str(settings.port))

    app.include_router(images_router)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")
    return app


app = create_app()
