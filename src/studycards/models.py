"""Data models for the flashcard assistant."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ToolName(str, Enum):
    """Tools the generation service may ask us to run."""

    ADD_FLASHCARD = "addFlashcardTool"
    QUIZ_USER = "quizUserTool"


@dataclass
class Card:
    """A question/answer study card owned by one user."""

    id: str
    front: str
    back: str
    owner_id: str

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """Build a Card from a shaped payload (see shaper.serialize_card)."""
        return cls(
            id=data["id"],
            front=data["front"],
            back=data["back"],
            owner_id=data.get("ownerId", ""),
        )


@dataclass
class FunctionCall:
    """A tool call as proposed by the generation service, not yet validated."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass
class Completion:
    """One completion turn: generated text and/or proposed function calls."""

    text: str | None = None
    function_calls: list[FunctionCall] = field(default_factory=list)


@dataclass(frozen=True)
class ToolInvocation:
    """A validated tool call with string arguments."""

    name: ToolName
    arguments: dict[str, str] = field(default_factory=dict)


@dataclass
class RouteResult:
    """Router output: plain text or a single tool invocation."""

    text: str | None = None
    invocation: ToolInvocation | None = None


@dataclass
class DispatchResult:
    """Raw result of dispatching a message, before shaping."""

    tool_called: ToolName | None
    payload: Any = None


@dataclass
class AssistantReply:
    """The uniform reply returned for every message."""

    tool_called: ToolName | None
    payload: Any = None

    def to_envelope(self) -> dict:
        """Reply in its wire form."""
        return {
            "response": self.payload,
            "toolCalled": self.tool_called.value if self.tool_called else None,
        }
