"""Resolve the latest tag: filter, order, map back to the original tag."""

import logging
from typing import Optional, Sequence

from common.logging_utils import Timer, extra_context, is_debug_enabled
from policy.errors import NoTagsAvailableError
from policy.filter import apply_filter
from policy.models import PolicyChoice, Tag, TagFilterSpec
from policy.selector import policer_from_choice

logger = logging.getLogger(__name__)


def resolve(tags: Sequence[Tag], filter_spec: Optional[TagFilterSpec], choice: PolicyChoice) -> Tag:
    """Select the latest tag for one evaluation pass.

    Args:
        tags: Tags observed in the repository.
        filter_spec: Optional filter; when set, the policy orders the
            extracted names and the winner is mapped back to its original tag.
        choice: Policy choice with exactly one arm set.

    Returns:
        The winning original tag.

    Raises:
        NoTagsAvailableError: ``tags`` is empty.
        InvalidPolicyError: The policy choice is invalid.
        InvalidPatternError: The filter pattern does not compile.
        EmptyInputError: No tag survived the filter.
        NoMatchingVersionError, InvalidNumericValueError: Policy evaluation failed.
    """
    if not tags:
        raise NoTagsAvailableError("no tags in database")

    policer = policer_from_choice(choice)

    with Timer() as t:
        if filter_spec is not None:
            view = apply_filter(tags, filter_spec)
            winner = policer.latest(view.items())
            latest = view.get_original(winner)
        else:
            latest = policer.latest(tags)

    if is_debug_enabled(logger):
        logger.debug("Resolved latest tag", extra=extra_context(
            event="function_exit", component="pipeline", action="resolve",
            outcome="resolved", count=len(tags), target=latest.name,
            duration_ms=t.duration_ms(),
        ))
    return latest
