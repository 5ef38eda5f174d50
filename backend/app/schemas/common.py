"""
Response envelope shared by every endpoint.
"""
from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")


class APIResponse(BaseModel, Generic[DataT]):
    """{success, data?, message?} envelope."""
    success: bool = True
    data: Optional[DataT] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """{success: false, error} envelope."""
    success: bool = False
    error: str
