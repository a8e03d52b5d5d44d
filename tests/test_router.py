"""Tests for router module - prompt contract and structural validation."""

from unittest.mock import MagicMock

import pytest

from studycards.errors import GenerationServiceUnavailable, MalformedToolInvocation
from studycards.models import Completion, FunctionCall, ToolName
from studycards.router import ROUTER_PROMPT, IntentRouter, build_prompt, parse_invocation
from studycards.tools import FLASHCARD_TOOLS


def _router(completion):
    generation = MagicMock()
    generation.complete.return_value = completion
    return IntentRouter(generation), generation


class TestPrompt:
    """The instruction prompt encodes the routing rules."""

    def test_mentions_both_tools(self):
        assert "addFlashcardTool" in ROUTER_PROMPT
        assert "quizUserTool" in ROUTER_PROMPT

    def test_forbids_follow_up_questions(self):
        assert "Do not ask follow-up questions" in ROUTER_PROMPT

    def test_forbids_extra_fields(self):
        assert "Do not invent extra fields" in ROUTER_PROMPT

    def test_topic_only_inference_rule(self):
        assert "TOPIC" in ROUTER_PROMPT
        assert "INFER" in ROUTER_PROMPT

    def test_build_prompt_appends_message(self):
        prompt = build_prompt("Quiz me")
        assert prompt.startswith(ROUTER_PROMPT)
        assert prompt.endswith("User message: Quiz me")


class TestParseInvocation:
    """Tests for parse_invocation."""

    def test_valid_add(self):
        invocation = parse_invocation("addFlashcardTool", {"front": "2+2", "back": "4"})
        assert invocation.name is ToolName.ADD_FLASHCARD
        assert invocation.arguments == {"front": "2+2", "back": "4"}

    def test_add_arguments_are_stripped(self):
        invocation = parse_invocation("addFlashcardTool", {"front": "  Hola ", "back": "Hello\n"})
        assert invocation.arguments == {"front": "Hola", "back": "Hello"}

    def test_add_drops_undeclared_arguments(self):
        invocation = parse_invocation(
            "addFlashcardTool", {"front": "a", "back": "b", "deck": "Spanish"}
        )
        assert invocation.arguments == {"front": "a", "back": "b"}

    def test_quiz_ignores_arguments(self):
        invocation = parse_invocation("quizUserTool", {"topic": "math"})
        assert invocation.name is ToolName.QUIZ_USER
        assert invocation.arguments == {}

    def test_quiz_with_none_args(self):
        assert parse_invocation("quizUserTool", None).arguments == {}

    def test_unknown_tool(self):
        with pytest.raises(MalformedToolInvocation, match="Unknown tool"):
            parse_invocation("deleteAllCardsTool", {})

    def test_missing_back(self):
        with pytest.raises(MalformedToolInvocation, match="back"):
            parse_invocation("addFlashcardTool", {"front": "2+2"})

    def test_missing_arguments_entirely(self):
        with pytest.raises(MalformedToolInvocation):
            parse_invocation("addFlashcardTool", None)

    def test_non_string_argument(self):
        with pytest.raises(MalformedToolInvocation):
            parse_invocation("addFlashcardTool", {"front": "2+2", "back": 4})

    def test_blank_argument(self):
        with pytest.raises(MalformedToolInvocation):
            parse_invocation("addFlashcardTool", {"front": "   ", "back": "4"})


class TestRoute:
    """Tests for IntentRouter.route."""

    def test_calls_generation_once_with_catalog(self):
        router, generation = _router(Completion(text="Hi"))
        router.route("u1", "hello")
        generation.complete.assert_called_once_with(build_prompt("hello"), FLASHCARD_TOOLS)

    def test_plain_text(self):
        router, _ = _router(Completion(text="Paris."))
        result = router.route("u1", "What's the capital of France?")
        assert result.invocation is None
        assert result.text == "Paris."

    def test_no_text_and_no_calls(self):
        router, _ = _router(Completion())
        result = router.route("u1", "...")
        assert result.invocation is None
        assert result.text is None

    def test_add_invocation(self):
        router, _ = _router(Completion(function_calls=[
            FunctionCall("addFlashcardTool", {"front": "2+2", "back": "4"}),
        ]))
        result = router.route("u1", "Add a flashcard: front='2+2', back='4'")
        assert result.invocation.name is ToolName.ADD_FLASHCARD
        assert result.invocation.arguments == {"front": "2+2", "back": "4"}

    def test_only_first_call_is_honored(self):
        router, _ = _router(Completion(function_calls=[
            FunctionCall("quizUserTool", {}),
            FunctionCall("addFlashcardTool", {"front": "a", "back": "b"}),
        ]))
        result = router.route("u1", "quiz me and add a card")
        assert result.invocation.name is ToolName.QUIZ_USER

    def test_unknown_tool_is_not_coerced(self):
        router, _ = _router(Completion(function_calls=[FunctionCall("searchWebTool", {"q": "x"})]))
        with pytest.raises(MalformedToolInvocation):
            router.route("u1", "search the web")

    def test_generation_failure_propagates(self):
        generation = MagicMock()
        generation.complete.side_effect = GenerationServiceUnavailable("down")
        with pytest.raises(GenerationServiceUnavailable):
            IntentRouter(generation).route("u1", "Quiz me")

    def test_custom_tools_are_passed(self):
        generation = MagicMock()
        generation.complete.return_value = Completion(text="ok")
        tools = FLASHCARD_TOOLS[:1]
        IntentRouter(generation, tools).route("u1", "hi")
        assert generation.complete.call_args[0][1] is tools
