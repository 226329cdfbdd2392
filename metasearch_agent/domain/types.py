from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Result(Generic[T, E]):
    ok: bool
    value: T | None = None
    error: E | None = None

    @staticmethod
    def success(v: T) -> "Result[T, E]":
        return Result(ok=True, value=v)

    @staticmethod
    def failure(e: E) -> "Result[T, E]":
        return Result(ok=False, error=e)


Vector = tuple[float, ...]  # dimension depends on the embedding model
Score = float


class OptimizationMode(str, Enum):
    """Per-request trade-off between latency and retrieval thoroughness."""

    SPEED = "speed"
    BALANCED = "balanced"
    QUALITY = "quality"

    @property
    def full_fetch_count(self) -> int:
        """How many top search results get their full page fetched."""
        return _FULL_FETCH_COUNT[self]

    @property
    def filters_media(self) -> bool:
        """Whether video/image engines and results are dropped unless requested."""
        return self is not OptimizationMode.QUALITY

    @classmethod
    def parse(cls, value: "str | OptimizationMode") -> "OptimizationMode":
        if isinstance(value, OptimizationMode):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as ex:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown optimization mode '{value}' (expected one of: {allowed})") from ex


_FULL_FETCH_COUNT = {
    OptimizationMode.SPEED: 3,
    OptimizationMode.BALANCED: 5,
    OptimizationMode.QUALITY: 8,
}
