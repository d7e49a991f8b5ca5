# bagtag/schemas/common.py
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    detail: str = Field(description="Error message")

    model_config = {"json_schema_extra": {"examples": [{"detail": "Not Found"}]}}


class OkResponse(BaseModel):
    ok: bool = Field(description="Always true on success")

    model_config = {"json_schema_extra": {"examples": [{"ok": True}]}}


class MessageResponse(BaseModel):
    message: str
