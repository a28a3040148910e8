"""
darkroom.engine.moderation — Profanity Detection & Escalation Rules
====================================================================

Pure decision logic for the moderation step of the message pipeline.
Persistence lives in :mod:`darkroom.services.moderation_service`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from better_profanity import Profanity

logger = logging.getLogger(__name__)


class ProfanityFilter:
    """Thin wrapper over a ``better_profanity`` word list.

    Each filter owns its own :class:`Profanity` instance, so filters with
    different extra or allowed words never share a censor set.
    """

    def __init__(
        self,
        extra_words: Iterable[str] = (),
        allowed_words: Iterable[str] = (),
    ) -> None:
        allowed = [w.lower() for w in allowed_words]
        self._profanity = Profanity()
        self._profanity.load_censor_words(whitelist_words=allowed)
        extra = [w.lower() for w in extra_words]
        if extra:
            self._profanity.add_censor_words(extra)
        logger.info(
            "Profanity filter loaded (+%d extra, %d allowed)", len(extra), len(allowed)
        )

    def is_profane(self, text: str) -> bool:
        if not text:
            return False
        return self._profanity.contains_profanity(text)


@dataclass(frozen=True, slots=True)
class Escalation:
    """What to do after an infraction has been recorded."""

    total: int
    warn: bool
    ban: bool


def escalation_for(total: int, warn_at: int = 5, ban_at: int = 20) -> Escalation:
    """Decide the response to a user's *total* infraction count.

    Every infraction from ``warn_at`` onward earns a warning.  The ban is
    attempted only when the count lands exactly on ``ban_at``, so later
    infractions never re-trigger it.
    """
    return Escalation(total=total, warn=total >= warn_at, ban=total == ban_at)
