"""Rule-based generation service: regex matching instead of a model.

Handles explicit front/back pairs and quiz requests without network access.
Anything else gets a fixed help text.
"""
import logging
import re

from .models import Completion, FunctionCall, ToolName

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "I can add a flashcard (e.g. front='2+2', back='4') "
    "or quiz you on your cards (e.g. 'quiz me')."
)

TOPIC_ONLY_TEXT = (
    "Offline mode cannot invent a card from a topic. "
    "Give an explicit pair, e.g. front='2+2', back='4'."
)

# front='...' back="..." in either quote style, separated by ':' or '='
_PAIR = re.compile(
    r"front\s*[:=]\s*(['\"])(?P<front>.*?)\1\s*[,;]?\s*(?:and\s+)?"
    r"back\s*[:=]\s*(['\"])(?P<back>.*?)\3",
    re.IGNORECASE | re.DOTALL,
)

_ADD = re.compile(
    r"\b(?:add|create|save|remember|make|new)\b.*\b(?:flash)?cards?\b",
    re.IGNORECASE | re.DOTALL,
)

_QUIZ = re.compile(
    r"\b(?:quiz|test|practi[cs]e|revise|review)\b",
    re.IGNORECASE,
)


class RuleBasedGenerationService:
    """Deterministic stand-in for the model, for offline use."""

    def complete(self, prompt: str, tools: list[dict]) -> Completion:
        message = _user_message(prompt)
        offered = {tool["name"] for tool in tools}

        pair = _PAIR.search(message)
        if pair and ToolName.ADD_FLASHCARD.value in offered:
            logger.debug("Offline rules matched an explicit pair")
            return Completion(function_calls=[FunctionCall(
                name=ToolName.ADD_FLASHCARD.value,
                args={"front": pair.group("front"), "back": pair.group("back")},
            )])

        add = _ADD.search(message)
        quiz = _QUIZ.search(message)
        # Whichever verb comes first is the request ("quiz me on my new cards")
        if add and not (quiz and quiz.start() < add.start()):
            return Completion(text=TOPIC_ONLY_TEXT)

        if quiz and ToolName.QUIZ_USER.value in offered:
            logger.debug("Offline rules matched a quiz request")
            return Completion(function_calls=[FunctionCall(name=ToolName.QUIZ_USER.value)])

        return Completion(text=HELP_TEXT)

    def close(self) -> None:
        pass


def _user_message(prompt: str) -> str:
    """Strip the instruction prompt, keeping only the user's words."""
    marker = "User message:"
    idx = prompt.rfind(marker)
    if idx == -1:
        return prompt.strip()
    return prompt[idx + len(marker):].strip()
