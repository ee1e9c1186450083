"""Tag filtering and ordering policies."""

from .alphabetical import Alphabetical
from .base import Policer
from .errors import (
    ConfigurationError,
    DigestFetchError,
    EmptyInputError,
    EvaluationError,
    InvalidNumericValueError,
    InvalidOrderError,
    InvalidPatternError,
    InvalidPolicyError,
    InvalidRangeError,
    NoMatchingVersionError,
    NoTagsAvailableError,
    PolicyError,
    TransientDataError,
)
from .filter import FilteredView, RegexFilter, apply_filter
from .models import (
    AlphabeticalPolicy,
    ImagePolicySpec,
    ImageRef,
    NewestPolicy,
    NumericalPolicy,
    OrderDirection,
    PolicyChoice,
    ReflectionMode,
    SemVerPolicy,
    Tag,
    TagFilterSpec,
)
from .newest import Newest
from .numerical import Numerical
from .selector import policer_from_choice
from .semver import SemVer

__all__ = [
    "Alphabetical",
    "AlphabeticalPolicy",
    "ConfigurationError",
    "DigestFetchError",
    "EmptyInputError",
    "EvaluationError",
    "FilteredView",
    "ImagePolicySpec",
    "ImageRef",
    "InvalidNumericValueError",
    "InvalidOrderError",
    "InvalidPatternError",
    "InvalidPolicyError",
    "InvalidRangeError",
    "Newest",
    "NewestPolicy",
    "NoMatchingVersionError",
    "NoTagsAvailableError",
    "Numerical",
    "NumericalPolicy",
    "OrderDirection",
    "Policer",
    "PolicyChoice",
    "PolicyError",
    "ReflectionMode",
    "RegexFilter",
    "SemVer",
    "SemVerPolicy",
    "Tag",
    "TagFilterSpec",
    "TransientDataError",
    "apply_filter",
    "policer_from_choice",
]
