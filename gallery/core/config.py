import os
from pydantic import BaseModel
from typing import List

class Settings(BaseModel):
    """for reading environment-driven configuration.

    Values have sensible defaults for running the server locally.
    """
    upload_dir: str = os.getenv("UPLOAD_DIR", "./uploads")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5174"))
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:5174")
    # base64 inflates payloads by a third, so leave plenty of room
    max_body_bytes: int = int(os.getenv("MAX_BODY_BYTES", str(50 * 1024 * 1024)))
    cors_origins: List[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "false").lower() == "true"

settings = Settings()
