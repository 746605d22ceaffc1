"""Cursor pagination for schedule and template listings."""

import base64
import binascii
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items plus an opaque cursor for the next page.

    Clients pass next_cursor back unchanged to continue listing.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for the next page. None on the last page.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether more items follow this page.",
    )


def encode_cursor(value: str) -> str:
    """Encode a cursor value (timestamp or id) as urlsafe base64."""
    return base64.urlsafe_b64encode(value.encode()).decode()


def decode_cursor(cursor: str) -> str:
    """Decode a cursor produced by encode_cursor.

    Raises:
        ValueError: If cursor is not valid base64 text
    """
    try:
        return base64.urlsafe_b64decode(cursor.encode()).decode()
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError("Invalid cursor") from e
