"""
Common I/O building blocks.
"""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter
from pydantic.alias_generators import to_camel

PHONE_PATTERN = r"^\d{10,15}$"


class CamelModel(BaseModel):
    """Base for request schemas: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutating endpoints."""

    message: str = Field(description="Human readable result")


def check_password_strength(value: str) -> str:
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least 1 uppercase letter")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain at least 1 number")
    return value


_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    _http_url.validate_python(value)
    return value


# URL-validated string that keeps the caller's exact spelling
ImageUrl = Annotated[str, AfterValidator(_check_url)]
