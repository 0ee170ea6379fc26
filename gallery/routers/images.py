from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from pydantic import ValidationError
from typing import List
import logging
from ..core.errors import ErrorKind, ImageServiceError
from ..core.models import ErrorResponse, ImageListing, UploadRequest, UploadResponse
from ..storage.local import PUBLIC_PREFIX, ImageStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


def get_store(request: Request) -> ImageStore:
    return request.app.state.store


def _error_response(err: ImageServiceError) -> JSONResponse:
    return JSONResponse(status_code=err.kind.status_code, content=err.to_payload())


async def _read_body(request: Request, max_bytes: int) -> bytes:
    # Content-Length is checked by the middleware; chunked bodies are counted here.
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise ImageServiceError(ErrorKind.PAYLOAD_TOO_LARGE)
    return bytes(body)


# The body is parsed by hand so that malformed JSON and wrongly typed fields
# produce the same 400 shape as the other upload errors instead of a 422.
@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Upload a base64 encoded image",
    description=(
        "JSON body with `title`, `description` and `image` (standard base64).\n\n"
        "The format is detected from the leading bytes (JPEG, PNG, GIF, WEBP; "
        "unknown data is stored as .jpg) and the file is saved as "
        "`{unix_timestamp}_{sanitized_title}{ext}`."
    ),
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UploadRequest.model_json_schema()}},
        }
    },
)
async def upload_image(request: Request, store: ImageStore = Depends(get_store)):
    try:
        raw = await _read_body(request, request.app.state.settings.max_body_bytes)
        try:
            payload = UploadRequest.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Error parsing request body: %s", e.errors(include_url=False))
            raise ImageServiceError(ErrorKind.INVALID_REQUEST_BODY) from e

        filename = await run_in_threadpool(store.save_upload, payload)
        return UploadResponse(url=f"{PUBLIC_PREFIX}{filename}")
    except ImageServiceError as e:
        return _error_response(e)


@router.get(
    "/api/images",
    response_model=List[ImageListing],
    responses={500: {"model": ErrorResponse}},
    summary="List uploaded images",
    description=(
        "Returns every stored file with its size, modification time and a "
        "title derived from the filename. Returns an empty array when nothing "
        "has been uploaded yet."
    ),
)
def list_images(request: Request, store: ImageStore = Depends(get_store)):
    try:
        return store.list_images(base_url=request.app.state.settings.public_base_url)
    except ImageServiceError as e:
        return _error_response(e)
