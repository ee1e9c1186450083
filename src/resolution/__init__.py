"""Latest tag resolution and digest reflection."""

from .evaluator import PolicyEvaluator, PolicyStatus, compose_ready_message
from .pipeline import resolve
from .reflection import Changed, Transition, Unchanged, advance, classify, needs_digest

__all__ = [
    "Changed",
    "PolicyEvaluator",
    "PolicyStatus",
    "Transition",
    "Unchanged",
    "advance",
    "classify",
    "compose_ready_message",
    "needs_digest",
    "resolve",
]
