"""
tests/test_triggers.py — Keyword Reply Tests
=============================================
"""

from __future__ import annotations

import pytest

from darkroom.engine.triggers import TriggerKind, match_trigger


@pytest.mark.parametrize(
    ("content", "kind", "fragment"),
    [
        ("gm bot", TriggerKind.REPLY, "GM {mention}"),
        ("Good morning Bot", TriggerKind.REPLY, "GM {mention}"),
        ("gn bot", TriggerKind.REPLY, "Good night"),
        ("hello everyone", TriggerKind.REPLY, "Hello {mention}"),
        ("bot wagmi", TriggerKind.REACT, "\U0001f680"),
        ("bot to the moon", TriggerKind.REACT, "\U0001f319"),
        ("!help", TriggerKind.REPLY, "/help"),
    ],
)
def test_matches(content, kind, fragment):
    trigger = match_trigger(content)
    assert trigger is not None
    assert trigger.kind is kind
    assert fragment in trigger.value


def test_gm_needs_bot():
    assert match_trigger("gm") is None


def test_first_rule_wins():
    # Both the gm rule and the greeting rule match; gm comes first.
    trigger = match_trigger("hey bot gm")
    assert trigger.value.startswith("GM")


def test_no_match():
    assert match_trigger("nice bokeh on that portrait") is None
