"""Shared response envelope pieces.

Every response carries ``status: "success"``; JSON keys are camelCase on
the wire while Python attributes stay snake_case.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusResponse(CamelModel):
    status: Literal["success"] = "success"


class MessageResponse(StatusResponse):
    message: str


def format_size(size_bytes: int) -> str:
    """Human-readable size in kilobytes, e.g. ``"1.50 KB"``."""
    return f"{size_bytes / 1024:.2f} KB"
