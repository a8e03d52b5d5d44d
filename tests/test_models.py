"""Tests for data models."""

from studycards.models import AssistantReply, Card, Completion, ToolInvocation, ToolName


def test_tool_names_match_wire_values():
    assert ToolName.ADD_FLASHCARD.value == "addFlashcardTool"
    assert ToolName.QUIZ_USER.value == "quizUserTool"
    assert ToolName("quizUserTool") is ToolName.QUIZ_USER


def test_card_from_dict():
    """Test Card built from a shaped payload."""
    card = Card.from_dict({"id": "abc", "front": "Hola", "back": "Hello", "ownerId": "u1"})
    assert card.id == "abc"
    assert card.front == "Hola"
    assert card.back == "Hello"
    assert card.owner_id == "u1"


def test_card_from_dict_without_owner():
    card = Card.from_dict({"id": "abc", "front": "2+2", "back": "4"})
    assert card.owner_id == ""


def test_completion_defaults():
    completion = Completion()
    assert completion.text is None
    assert completion.function_calls == []
    # Each instance gets its own list
    Completion().function_calls.append("x")
    assert Completion().function_calls == []


def test_tool_invocation_default_arguments():
    invocation = ToolInvocation(name=ToolName.QUIZ_USER)
    assert invocation.arguments == {}


def test_envelope_for_text_reply():
    reply = AssistantReply(tool_called=None, payload="Paris.")
    assert reply.to_envelope() == {"response": "Paris.", "toolCalled": None}


def test_envelope_for_tool_reply():
    payload = {"front": "2+2", "back": "4", "id": "abc"}
    reply = AssistantReply(tool_called=ToolName.ADD_FLASHCARD, payload=payload)
    assert reply.to_envelope() == {"response": payload, "toolCalled": "addFlashcardTool"}


def test_envelope_for_empty_quiz():
    reply = AssistantReply(tool_called=ToolName.QUIZ_USER, payload=None)
    assert reply.to_envelope() == {"response": None, "toolCalled": "quizUserTool"}
