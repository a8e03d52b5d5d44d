"""Intent router: asks the generation service which tool, if any, to run."""

import logging

from .errors import MalformedToolInvocation
from .generation import GenerationService
from .models import RouteResult, ToolInvocation, ToolName
from .tools import FLASHCARD_TOOLS, TOOLS_BY_NAME

logger = logging.getLogger(__name__)

ROUTER_PROMPT = """You are a flashcard assistant.

You MUST follow these rules:
- If the user asks to add/create/save/remember/make a new flashcard (or gives a front/back), you MUST call the tool "addFlashcardTool" exactly once.
- If the user asks to test/quiz/practice/review/revise (any kind of test), you MUST call the tool "quizUserTool" exactly once.
- If the user does not ask for either of the above, do NOT call any tools and respond normally.

Tool usage rules:
- Do not ask follow-up questions.
- Do not invent extra fields.
- For addFlashcardTool: extract "front" and "back" as plain strings.
- If the user wants to add a flashcard but only gives a TOPIC (no explicit front/back), you MUST INFER one simple beginner-friendly flashcard based on the topic.
- Keep inferred content short and clear.
- For quizUserTool: call it with no arguments.

Inference example:
This only shows the format. Do NOT copy it unless the user's topic is exactly the same.
The card you create MUST match the user's topic.

Example user topic: "basic N5 Japanese grammar"
Example tool call args (illustrative only):
front: "N5 grammar: How do you say 'I am a student' in Japanese?"
back: "わたしはがくせいです。 (watashi wa gakusei desu). Pattern: A は B です (A wa B desu)."
"""


def build_prompt(message: str) -> str:
    """Instruction prompt followed by the user's message."""
    return f"{ROUTER_PROMPT}\nUser message: {message}"


def parse_invocation(name: str, args: dict | None) -> ToolInvocation:
    """Validate a proposed tool call against the catalog.

    Only structure is checked: the tool must exist and every required
    argument must be a non-blank string. Undeclared arguments are dropped.

    Raises:
        MalformedToolInvocation: unknown tool or missing/invalid argument
    """
    try:
        tool_name = ToolName(name)
    except ValueError:
        raise MalformedToolInvocation(f"Unknown tool: {name!r}") from None

    schema = TOOLS_BY_NAME[tool_name]["input_schema"]
    args = args or {}

    arguments: dict[str, str] = {}
    for field_name in schema["required"]:
        value = args.get(field_name)
        if not isinstance(value, str) or not value.strip():
            raise MalformedToolInvocation(
                f"Tool {tool_name.value} requires a non-empty string '{field_name}'"
            )
        arguments[field_name] = value.strip()

    ignored = set(args) - set(schema["properties"])
    if ignored:
        logger.warning("Ignoring undeclared arguments for %s: %s", tool_name.value, sorted(ignored))

    return ToolInvocation(name=tool_name, arguments=arguments)


class IntentRouter:
    """Turns a free-text message into plain text or one tool invocation."""

    def __init__(self, generation: GenerationService, tools: list[dict] | None = None):
        self.generation = generation
        self.tools = tools if tools is not None else FLASHCARD_TOOLS

    def route(self, user_id: str, message: str) -> RouteResult:
        completion = self.generation.complete(build_prompt(message), self.tools)

        if not completion.function_calls:
            logger.info("No tool call for user %s", user_id)
            return RouteResult(text=completion.text)

        call = completion.function_calls[0]
        if len(completion.function_calls) > 1:
            logger.warning(
                "Generation service proposed %d tool calls; only %s is honored",
                len(completion.function_calls),
                call.name,
            )

        invocation = parse_invocation(call.name, call.args)
        logger.info("Routed user %s to %s", user_id, invocation.name.value)
        return RouteResult(text=completion.text, invocation=invocation)
