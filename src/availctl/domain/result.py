"""Two-variant outcome of a state machine transition.

A transition either succeeds with an event or fails with a rejection.
Neither variant raises; callers branch on ``ok`` or pattern-match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class Success[E]:
    """Transition applied; *event* describes what happened."""

    event: E

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True, slots=True)
class Failure[R]:
    """Transition refused; *rejection* carries the reason code."""

    rejection: R

    @property
    def ok(self) -> Literal[False]:
        return False


type Result[R, E] = Failure[R] | Success[E]
