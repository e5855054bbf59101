"""Outcome variants returned by lookup-style service operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from src.bookstore.core.errors import ServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    key: object = None


@dataclass(frozen=True)
class Failure:
    error: ServiceError


Result = Found[T] | NotFound | Failure
