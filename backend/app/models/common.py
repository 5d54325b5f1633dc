"""
Common API models shared by the scheduling routes
"""

from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """
    Unified API response envelope.
    data is null when the engine has nothing to report (e.g. locked trips).
    """

    code: int = Field(default=0, description="0 means success; non-zero means error")
    msg: str = Field(default="ok", description="Human-readable message")
    data: Any | None = Field(default=None, description="Payload data")

    class Config:
        json_schema_extra = {
            "example": {"code": 0, "msg": "ok", "data": {"phase": "COLLECTING", "window_count": 3}}
        }


def json_or_none(model: BaseModel | None, **dump_kwargs) -> dict | None:
    """JSON-ready dump of an optional engine result"""
    if model is None:
        return None
    return model.model_dump(mode="json", **dump_kwargs)
