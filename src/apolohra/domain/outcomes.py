"""Explicit outcomes of store access.

Views and handlers never hand a bare ``None`` or a raw database exception
back to the API layer; they return one of these and each endpoint decides
how it maps onto HTTP.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    """Nothing matched. ``what`` names the missing entity for error texts."""
    what: str = ""
    key: Any = None


@dataclass(frozen=True)
class StoreFault:
    """The store raised; ``detail`` keeps the raw error text for the logs."""
    detail: str
    error: Optional[BaseException] = None


Outcome = Union[Found[T], NotFound, StoreFault]
