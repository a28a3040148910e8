"""
darkroom.engine.triggers — Keyword Replies
===========================================

Casual chat triggers ("bot gm", "hello", "bot wagmi", …).  Rules are
checked in order and the first match wins.  "gm", "gn" and the greetings
must stand alone as words, so "wagmi" is not read as a "gm".
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class TriggerKind(enum.StrEnum):
    REPLY = "reply"
    REACT = "react"


@dataclass(frozen=True, slots=True)
class Trigger:
    kind: TriggerKind
    value: str  # reply template (``{mention}`` placeholder) or emoji


_GREETING_RE = re.compile(r"\b(hello|hi|hey bot)\b")
_GM_RE = re.compile(r"\bgm\b|good morning")
_GN_RE = re.compile(r"\bgn\b|good night")


def match_trigger(content: str) -> Trigger | None:
    """Return the first trigger matching *content*, or ``None``."""
    text = content.lower()
    has_bot = "bot" in text

    if has_bot and _GM_RE.search(text):
        return Trigger(TriggerKind.REPLY, "GM {mention}! ☀️\U0001f4f8")
    if has_bot and _GN_RE.search(text):
        return Trigger(TriggerKind.REPLY, "Good night {mention}! \U0001f319\U0001f4f8")
    if _GREETING_RE.search(text):
        return Trigger(TriggerKind.REPLY, "Hello {mention}! \U0001f44b\U0001f4f8")
    if has_bot and "wagmi" in text:
        return Trigger(TriggerKind.REACT, "\U0001f680")
    if has_bot and "moon" in text:
        return Trigger(TriggerKind.REACT, "\U0001f319")
    if (has_bot and "help" in text) or "!help" in text:
        return Trigger(TriggerKind.REPLY, "\U0001f4a1 Try /help to see everything I can do.")
    return None
