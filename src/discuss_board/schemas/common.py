"""Shared response envelopes and ORM conversion helpers."""

from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from discuss_board.db.time import to_iso

T = TypeVar("T")


class OrmResponse(BaseModel):
    """Base for DTOs read from ORM rows.

    Timestamps leave as ISO-8601 strings and enums as their values; optional
    references are always present in the payload, as ``null`` when unset.
    """

    @model_validator(mode="before")
    @classmethod
    def _render_columns(cls, data: object) -> object:
        if not isinstance(data, dict):
            extracted: dict[str, object | None] = {}
            for field_name in cls.model_fields:
                extracted[field_name] = getattr(data, field_name, None)
            data = extracted

        for key, value in list(data.items()):
            if isinstance(value, datetime):
                data[key] = to_iso(value)
            elif isinstance(value, Enum):
                data[key] = value.value

        return data

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    """Page metadata returned alongside every list."""

    current: int
    limit: int
    records: int
    pages: int


class Page(BaseModel, Generic[T]):
    """A page of records."""

    pagination: Pagination
    data: list[T] = Field(default_factory=list)
