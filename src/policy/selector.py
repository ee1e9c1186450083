"""Build an ordering policy from a policy choice."""

import logging

from common.logging_utils import extra_context, is_debug_enabled

from .alphabetical import Alphabetical
from .base import Policer
from .errors import ConfigurationError, InvalidPolicyError
from .models import PolicyChoice
from .newest import Newest
from .numerical import Numerical
from .semver import SemVer

logger = logging.getLogger(__name__)


def policer_from_choice(choice: PolicyChoice) -> Policer:
    """Construct the ordering policy selected by ``choice``.

    Args:
        choice: Policy union with exactly one arm set.

    Returns:
        The ordering policy.

    Raises:
        InvalidPolicyError: Zero or several arms are set, or the selected
            policy rejects its configuration.
    """
    arms = {
        "semver": choice.semver,
        "alphabetical": choice.alphabetical,
        "numerical": choice.numerical,
        "newest": choice.newest,
    }
    selected = [name for name, arm in arms.items() if arm is not None]
    if not selected:
        raise InvalidPolicyError("given policy choice is invalid: no policy set")
    if len(selected) > 1:
        raise InvalidPolicyError(
            f"given policy choice is invalid: only one policy can be set, got {', '.join(selected)}"
        )

    try:
        if choice.semver is not None:
            policer: Policer = SemVer(choice.semver.range)
        elif choice.alphabetical is not None:
            policer = Alphabetical(choice.alphabetical.order)
        elif choice.numerical is not None:
            policer = Numerical(choice.numerical.order)
        else:
            policer = Newest(choice.newest.order)
    except ConfigurationError as exc:
        raise InvalidPolicyError(f"invalid {selected[0]} policy: {exc}") from exc

    if is_debug_enabled(logger):
        logger.debug("Constructed ordering policy", extra=extra_context(
            event="decision", component="selector", action="policer_from_choice",
            outcome="constructed", target=selected[0],
        ))
    return policer
