"""Shared Pydantic base for API payloads.

The client speaks camelCase JSON; Python code uses snake_case attributes.
Response models serialize by alias (FastAPI's default), request models
accept either spelling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    message: str
    code: str
