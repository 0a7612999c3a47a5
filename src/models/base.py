"""Shared base models for API payloads."""

import math

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire.

    Field names stay snake_case in Python. Input accepts either form;
    output is serialized with camelCase aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Keeps (page - 1) * limit well inside Postgres bigint for OFFSET
MAX_PAGE = 1_000_000


class Pagination(CamelModel):
    """Page metadata returned alongside list results."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class MessageResponse(CamelModel):
    message: str
