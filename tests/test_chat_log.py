"""Tests for chat_log module."""

from unittest.mock import patch

from studycards.chat_log import (
    MAX_EXCHANGES,
    add_exchange,
    clear_log,
    format_exchange_for_display,
    format_history_for_display,
    get_recent_exchanges,
    load_log,
)


def _patch_log_paths(tmp_path):
    data_dir = tmp_path / ".studycards"
    return (
        patch("studycards.chat_log.ensure_data_dir", lambda: data_dir.mkdir(parents=True, exist_ok=True)),
        patch("studycards.chat_log.CHAT_LOG_FILE", data_dir / "chat_log.json"),
    )


class TestLogStorage:
    def test_empty_log(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            assert load_log() == []

    def test_add_and_load(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            add_exchange("u1", "Quiz me", {"response": None, "toolCalled": "quizUserTool"})
            log = load_log()
            assert len(log) == 1
            assert log[0]["user_id"] == "u1"
            assert log[0]["user"] == "Quiz me"
            assert log[0]["tool"] == "quizUserTool"
            assert log[0]["response"] is None
            assert log[0]["timestamp"]

    def test_log_is_capped(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            for i in range(MAX_EXCHANGES + 5):
                add_exchange("u1", f"msg {i}", {"response": "ok", "toolCalled": None})
            log = load_log()
            assert len(log) == MAX_EXCHANGES
            assert log[-1]["user"] == f"msg {MAX_EXCHANGES + 4}"

    def test_corrupt_log_reads_empty(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        (tmp_path / ".studycards").mkdir()
        (tmp_path / ".studycards" / "chat_log.json").write_text("garbage")
        with p1, p2:
            assert load_log() == []

    def test_recent_and_clear(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            for i in range(3):
                add_exchange("u1", f"msg {i}", {"response": "ok", "toolCalled": None})
            assert [e["user"] for e in get_recent_exchanges(2)] == ["msg 1", "msg 2"]
            clear_log()
            assert load_log() == []

    def test_recent_for_one_user(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            add_exchange("u1", "mine", {"response": "ok", "toolCalled": None})
            add_exchange("u2", "Quiz me", {"response": {"front": "secret", "back": "answer", "id": "x"}, "toolCalled": "quizUserTool"})
            assert [e["user"] for e in get_recent_exchanges(10, "u1")] == ["mine"]
            assert len(get_recent_exchanges(10)) == 2

    def test_zero_count_is_empty(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            add_exchange("u1", "msg", {"response": "ok", "toolCalled": None})
            assert get_recent_exchanges(0) == []
            assert format_history_for_display(0) == "No chat history yet."


class TestDisplay:
    def test_card_exchange(self):
        exchange = {
            "timestamp": "2026-01-05T10:30:00",
            "user": "Add a flashcard: front='2+2', back='4'",
            "tool": "addFlashcardTool",
            "response": {"front": "2+2", "back": "4", "id": "abc"},
        }
        text = format_exchange_for_display(exchange, 1)
        assert "Exchange 1 (2026-01-05 10:30)" in text
        assert "→ addFlashcardTool" in text
        assert "2+2 → 4" in text

    def test_empty_quiz_exchange(self):
        exchange = {"timestamp": "", "user": "Quiz me", "tool": "quizUserTool", "response": None}
        text = format_exchange_for_display(exchange, 2)
        assert "(unknown)" in text
        assert "(no cards yet)" in text

    def test_long_messages_truncated(self):
        exchange = {"timestamp": "bad", "user": "x" * 150, "tool": None, "response": "y" * 300}
        text = format_exchange_for_display(exchange, 1)
        assert "x" * 100 + "..." in text
        assert "y" * 200 + "..." in text

    def test_history_hides_other_users(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            add_exchange("u2", "Quiz me", {"response": {"front": "secret", "back": "answer", "id": "x"}, "toolCalled": "quizUserTool"})
            assert format_history_for_display(user_id="u1") == "No chat history yet."
            assert "secret" in format_history_for_display(user_id="u2")

    def test_no_history(self, tmp_path):
        p1, p2 = _patch_log_paths(tmp_path)
        with p1, p2:
            assert format_history_for_display() == "No chat history yet."
