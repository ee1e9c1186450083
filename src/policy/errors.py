"""Error taxonomy for tag policy evaluation.

Configuration errors are permanent for a given configuration and should
stall the policy. Data errors usually clear once the tag source produces
(different) tags, so callers may retry them.
"""

from constants import Reasons


class PolicyError(Exception):
    """Base class for all policy evaluation errors."""

    reason = Reasons.FAILURE
    retryable = True


class ConfigurationError(PolicyError):
    """Raised for invalid configuration detected at construction time."""

    reason = Reasons.INVALID_POLICY
    retryable = False


class InvalidPatternError(ConfigurationError):
    """Raised when a tag filter pattern is not a valid regular expression."""


class InvalidRangeError(ConfigurationError):
    """Raised when a semver range expression cannot be parsed."""


class InvalidOrderError(ConfigurationError):
    """Raised when an order direction is neither ascending nor descending."""


class InvalidPolicyError(ConfigurationError):
    """Raised when a policy choice is empty, ambiguous or fails to build."""


class TransientDataError(PolicyError):
    """Raised when the tag source has not produced usable tags yet."""

    reason = Reasons.DEPENDENCY_NOT_READY


class EmptyInputError(TransientDataError):
    """Raised when an ordering policy receives no tags."""


class NoTagsAvailableError(TransientDataError):
    """Raised when the resolution pipeline receives no tags."""


class EvaluationError(PolicyError):
    """Raised when tags exist but none can be selected."""


class NoMatchingVersionError(EvaluationError):
    """Raised when no tag parses as a version inside the semver range."""


class InvalidNumericValueError(EvaluationError):
    """Raised when a tag cannot be parsed as a number."""


class DigestFetchError(PolicyError):
    """Raised by the bundled digest fetchers when a digest lookup fails."""
