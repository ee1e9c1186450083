"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    INVALID_POLICY = 2
    RETRY = 3
    DIGEST_ERROR = 4


class PolicyKinds(Enum):
    """Ordering policies supported by the program.

    Args:
        Enum (string): Keys of the policy choice in configuration files.
    """

    SEMVER = "semver"
    ALPHABETICAL = "alphabetical"
    NUMERICAL = "numerical"
    NEWEST = "newest"


class Reasons:  # pylint: disable=too-few-public-methods
    """Status reasons reported when an evaluation does not succeed."""

    INVALID_POLICY = "InvalidPolicy"
    DEPENDENCY_NOT_READY = "DependencyNotReady"
    FAILURE = "Failure"
    SUCCEEDED = "Succeeded"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SUPPORTED_POLICIES = [
        PolicyKinds.SEMVER.value,
        PolicyKinds.ALPHABETICAL.value,
        PolicyKinds.NUMERICAL.value,
        PolicyKinds.NEWEST.value,
    ]
    ORDER_ASC = "asc"
    ORDER_DESC = "desc"
    DEFAULT_ALPHABETICAL_ORDER = ORDER_ASC
    DEFAULT_NUMERICAL_ORDER = ORDER_ASC
    DEFAULT_NEWEST_ORDER = ORDER_DESC
    DEFAULT_REFLECTION_MODE = "Never"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    DEFAULT_LOG_LEVEL = "INFO"

    ENV_LOG_LEVEL = "IMAGEPOLICY_LOG_LEVEL"
    ENV_DIGEST_COMMAND = "IMAGEPOLICY_DIGEST_COMMAND"
    DIGEST_COMMAND_TIMEOUT_SEC = 30

    READY_RESOLVED_MSG = "Latest image tag for '{image}' resolved to {tag}"
    READY_UPDATED_MSG = "Latest image tag for '{image}' updated from {previous} to {tag}"
