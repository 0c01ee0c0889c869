# =============================================================================
# core/models/result.py - Repository Result Types
# =============================================================================
# Repository operations return one of three outcomes instead of raising:
# - Ok(value): the operation succeeded
# - NotFound(id): the referenced document does not exist
# - Failure(cause): the document store errored or timed out
#
# The controller decides how each outcome maps to an HTTP response.
# =============================================================================

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    id: str


@dataclass(frozen=True)
class Failure:
    cause: Exception

    @property
    def message(self) -> str:
        return str(self.cause) or type(self.cause).__name__


Result = Union[Ok[T], NotFound, Failure]
