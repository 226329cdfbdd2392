"""Events emitted by the answer pipeline.

A stream is: at most one SourcesEvent, zero or more ResponseEvent fragments,
then exactly one terminal event (EndEvent or ErrorEvent).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

from .models import Document


@dataclass(frozen=True)
class SourcesEvent:
    documents: list[Document]
    type: Literal["sources"] = "sources"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": [d.to_dict() for d in self.documents]}


@dataclass(frozen=True)
class ResponseEvent:
    text: str
    type: Literal["response"] = "response"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.text}


@dataclass(frozen=True)
class EndEvent:
    type: Literal["end"] = "end"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class ErrorEvent:
    message: str
    error_type: str = "DomainError"
    type: Literal["error"] = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.message, "error_type": self.error_type}


Event = Union[SourcesEvent, ResponseEvent, EndEvent, ErrorEvent]


def is_terminal(event: Event) -> bool:
    return isinstance(event, (EndEvent, ErrorEvent))
