# metasearch_agent/application/dto/answer_dto.py
from __future__ import annotations

from dataclasses import dataclass

from metasearch_agent.domain.models import ChatMessage
from metasearch_agent.domain.types import OptimizationMode


@dataclass(frozen=True)
class AnswerRequest:
    """
    DTO for one answer request.

    - message: the user's latest message (non-empty)
    - history: prior turns, oldest first
    - optimization_mode: speed | balanced | quality
    - file_ids: uploaded files whose chunks compete with web sources
    - system_instructions: user-supplied instructions injected into the answer prompt
    - max_sources: source limit override (None = agent default)
    - max_tokens: output token cap for every model call of this request
    - include_images / include_videos: keep image/video engines and results
      in speed and balanced modes
    """

    message: str
    history: tuple[ChatMessage, ...] = ()
    optimization_mode: OptimizationMode = OptimizationMode.BALANCED
    file_ids: tuple[str, ...] = ()
    system_instructions: str = ""
    max_sources: int | None = None
    max_tokens: int | None = None
    include_images: bool = False
    include_videos: bool = False
