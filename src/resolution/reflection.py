"""Digest reflection state machine.

A digest only describes the tag it was computed for. Each pass first
classifies the resolved tag against the previous reference:

* ``Unchanged`` keeps the previous reference, digest included;
* ``Changed`` is a new reference whose digest has been emptied.

The reflection mode is then applied to that reference. Never clears the
digest and Always fetches it. IfNotPresent fetches only when the reference
has no digest, so a changed tag always gets a fresh one.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Union

from common.logging_utils import extra_context, is_debug_enabled
from policy.models import ImageRef, ReflectionMode, Tag

logger = logging.getLogger(__name__)

DigestFetcher = Callable[[], str]


@dataclass(frozen=True)
class Unchanged:
    """The resolved tag equals the previous one; carries the previous reference."""
    reference: ImageRef


@dataclass(frozen=True)
class Changed:
    """The resolved tag differs from the previous one; digest is empty."""
    reference: ImageRef
    previous: Optional[ImageRef] = None


Transition = Union[Unchanged, Changed]


def classify(image: str, resolved: Tag, previous: Optional[ImageRef]) -> Transition:
    """Compare the resolved tag of ``image`` with the previous reference."""
    candidate = ImageRef(name=image, tag=resolved.name)
    if candidate.same_image(previous):
        return Unchanged(reference=previous)
    return Changed(reference=candidate, previous=previous)


def needs_digest(transition: Transition, mode: ReflectionMode) -> bool:
    """Whether a registry digest lookup is required for this pass."""
    if mode == ReflectionMode.NEVER:
        return False
    if mode == ReflectionMode.ALWAYS:
        return True
    return not transition.reference.digest


def advance(
    image: str,
    resolved: Tag,
    previous: Optional[ImageRef],
    mode: ReflectionMode,
    fetch_digest: DigestFetcher,
) -> ImageRef:
    """Compute the next persisted reference.

    Args:
        image: Image name the tag belongs to.
        resolved: Tag chosen by the resolution pipeline.
        previous: Reference persisted by the previous pass, if any.
        mode: Digest reflection mode.
        fetch_digest: Looks up the digest of ``image:resolved``; only called
            when the mode requires it.

    Returns:
        The new reference. ``previous`` is never modified.

    Raises:
        Whatever ``fetch_digest`` raises, unchanged.
    """
    transition = classify(image, resolved, previous)
    reference = transition.reference
    fetch = needs_digest(transition, mode)

    if is_debug_enabled(logger):
        logger.debug("Digest reflection transition", extra=extra_context(
            event="decision", component="reflection", action="advance",
            outcome=type(transition).__name__.lower(), mode=mode.value,
            fetch=fetch, target=str(reference),
        ))

    if mode == ReflectionMode.NEVER:
        return replace(reference, digest="")
    if fetch:
        return replace(reference, digest=fetch_digest())
    return reference
