from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: List[T]


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str


def envelope(data: Any, count: Optional[int] = None) -> dict:
    body = {"success": True, "data": data}
    if count is not None:
        body["count"] = count
    return body


def list_envelope(items: list) -> dict:
    return envelope(items, count=len(items))
