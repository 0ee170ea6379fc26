from typing import Optional
from pydantic import BaseModel, field_validator

class UploadRequest(BaseModel):
    title: str = ""
    description: str = ""
    image: str = ""

    # JSON null is treated like an absent field
    @field_validator("title", "description", "image", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v

class UploadResponse(BaseModel):
    success: bool = True
    url: str

class ErrorResponse(BaseModel):
    success: bool = False
    error: str

class ImageListing(BaseModel):
    name: str
    size: int
    upload_time: int
    title: str
    description: str
    url: str

class HealthResponse(BaseModel):
    message: str
    port: Optional[str] = None
