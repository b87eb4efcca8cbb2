"""
Unit tests for the out-of-band program update channel.
"""

from autolock.notifications import PROGRAM_UPDATE_CHANNEL, CustomMessage
from autolock.program_channel import consume_program_updates, send_program_update
from autolock.settings import get_program_channel_path


class TestProgramChannel:
    """Tests for send_program_update and consume_program_updates."""

    def test_nothing_queued(self):
        assert consume_program_updates("work") == []

    def test_delivered_in_order(self):
        send_program_update("work", "vim notes.md")
        send_program_update("work", "git log")

        result = consume_program_updates("work")

        assert result == [
            CustomMessage(PROGRAM_UPDATE_CHANNEL, "vim notes.md"),
            CustomMessage(PROGRAM_UPDATE_CHANNEL, "git log"),
        ]

    def test_consuming_drains_the_channel(self):
        send_program_update("work", "vim")

        consume_program_updates("work")

        assert consume_program_updates("work") == []
        assert list(get_program_channel_path("work").parent.iterdir()) == []

    def test_whitespace_normalized(self):
        send_program_update("work", "  sudo\tvim\n/etc/hosts ")

        assert consume_program_updates("work")[0].payload == "sudo vim /etc/hosts"

    def test_blank_lines_skipped(self):
        send_program_update("work", "   ")
        send_program_update("work", "hx")

        assert [m.payload for m in consume_program_updates("work")] == ["hx"]

    def test_sessions_are_separate(self):
        send_program_update("one", "vim")

        assert consume_program_updates("two") == []
        assert len(consume_program_updates("one")) == 1

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "channel"

        send_program_update("ignored", "nvim", channel_path=path)

        assert consume_program_updates("ignored", channel_path=path)[0].payload == "nvim"
