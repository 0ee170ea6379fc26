from enum import Enum

"""Error kinds surfaced at the HTTP boundary.

Each kind knows its status code and the short reason string sent to clients.
"""


class ErrorKind(Enum):
    INVALID_REQUEST_BODY = (400, "Invalid request body")
    MISSING_IMAGE_DATA = (400, "Image data is required")
    INVALID_IMAGE_ENCODING = (400, "Invalid base64 image data")
    PAYLOAD_TOO_LARGE = (413, "Request body too large")
    STORAGE_WRITE_FAILURE = (500, "Failed to save image")
    DIRECTORY_READ_FAILURE = (500, "Failed to read uploads directory")

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class ImageServiceError(Exception):
    def __init__(self, kind: ErrorKind):
        super().__init__(kind.message)
        self.kind = kind

    def to_payload(self) -> dict:
        return {"success": False, "error": self.kind.message}
