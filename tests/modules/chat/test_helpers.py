"""
Unit tests for assistant replies and conversation titles.
"""

import pytest

from app.modules.chat.helpers import (
    TITLE_LENGTH,
    TOPIC_RESPONSES,
    conversation_title,
    generate_reply,
)
from app.modules.subscriptions.plans import SubscriptionPlan


def _topic(keyword: str) -> str:
    return next(response for keywords, response in TOPIC_RESPONSES if keyword in keywords)


class TestGenerateReply:
    @pytest.mark.parametrize(
        ("message", "keyword"),
        [
            ("What documents do I need?", "need"),
            ("How long does a VISA take?", "visa"),
            ("Tell me about scholarships", "scholarship"),
            ("How do I apply to Oxford?", "apply"),
            ("Which subscription suits me?", "subscription"),
            ("Can I upload my transcript?", "transcript"),
        ],
    )
    def test_paid_plan_topics(self, message, keyword):
        assert generate_reply(message, SubscriptionPlan.EUROPE) == _topic(keyword)

    def test_first_matching_topic_wins(self):
        reply = generate_reply("What are the visa requirements?", SubscriptionPlan.GLOBAL)
        assert reply == _topic("visa")

    @pytest.mark.parametrize(
        ("message", "keyword"),
        [
            ("I need a visa", "visa"),
            ("Do I need a work permit while studying?", "visa"),
            ("I need funding for my master's", "scholarship"),
            ("What do I need to be eligible?", "need"),
        ],
    )
    def test_specific_topics_beat_generic_requirements(self, message, keyword):
        assert generate_reply(message, SubscriptionPlan.GLOBAL) == _topic(keyword)

    def test_default_echoes_message(self):
        reply = generate_reply("hello there", SubscriptionPlan.ASIA)
        assert '"hello there"' in reply
        assert reply not in [response for _, response in TOPIC_RESPONSES]

    def test_free_plan_gets_basic_reply(self):
        reply = generate_reply("How do I get a visa?", SubscriptionPlan.FREE)
        assert "basic assistant" in reply
        assert '"How do I get a visa?"' in reply


class TestConversationTitle:
    def test_short_message(self):
        assert conversation_title("  Visa help  ") == "Visa help"

    def test_first_line_only(self):
        assert conversation_title("Scholarships\nI am from Bangladesh") == "Scholarships"

    def test_long_message_cut_at_word(self):
        title = conversation_title("word " * 30)
        assert title.endswith("...")
        assert len(title) <= TITLE_LENGTH + 3
        assert " ..." not in title

    def test_blank_message(self):
        assert conversation_title("   ") == "New conversation"
