"""
RagBot - Context Assembler
===========================
Turns ranked chunks into the two-turn conversation sent to the chat
model: a system turn (persona + retrieved context) followed by a user
turn carrying the query verbatim.

No truncation happens here; an oversized context is left for the
completion provider to reject.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from ragbot.config.prompt_templates import CONTEXT_INSTRUCTION, PERSONAS
from ragbot.src.database.records import ScoredChunk

ChatMessage = dict[str, str]


@dataclass(frozen=True)
class PromptContext:
    """Assembled prompt: the joined context and the two conversation turns."""

    context: str
    system: str
    user: str

    @property
    def messages(self) -> list[ChatMessage]:
        return [{"role": "system", "content": self.system}, {"role": "user", "content": self.user}]

    def to_langchain(self) -> list[BaseMessage]:
        return [SystemMessage(content=self.system), HumanMessage(content=self.user)]


def assemble(scored_chunks: Sequence[ScoredChunk], query: str, persona: str = "base") -> PromptContext:
    """
    Build the prompt for *query* from *scored_chunks* (already ranked).

    Args:
        scored_chunks: Ranked retrieval results, best first.
        query: Raw user message, passed through unchanged.
        persona: Key into ``PERSONAS``.

    Raises:
        KeyError: If *persona* is unknown.
    """
    context = "\n".join(chunk.text for chunk in scored_chunks)
    system = PERSONAS[persona] + CONTEXT_INSTRUCTION + context
    return PromptContext(context=context, system=system, user=query)
