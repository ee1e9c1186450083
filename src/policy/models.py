"""Data models for tag policies and resolved image references."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from constants import Constants

from .errors import InvalidOrderError, InvalidPolicyError

# Unix seconds of 0001-01-01T00:00:00Z, the oldest possible creation time
ZERO_TIME_UNIX = int(datetime(1, 1, 1, tzinfo=timezone.utc).timestamp())


@dataclass(frozen=True)
class Tag:
    """An observed image tag.

    Identity is the tag name; ``created`` only matters to the newest policy.
    """
    name: str
    created: Optional[datetime] = field(default=None, compare=False)

    def created_unix(self) -> int:
        """Creation time in Unix seconds, ZERO_TIME_UNIX when unknown.

        Naive datetimes are taken as UTC.
        """
        if self.created is None:
            return ZERO_TIME_UNIX
        created = self.created
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return int(created.timestamp())


class OrderDirection(Enum):
    """Ordering direction of a policy."""
    ASC = Constants.ORDER_ASC
    DESC = Constants.ORDER_DESC

    @classmethod
    def parse(cls, value: Optional[str], default: "OrderDirection") -> "OrderDirection":
        """Parse an order string case-insensitively; empty means ``default``."""
        if value is None or value == "":
            return default
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        raise InvalidOrderError(
            f"invalid order argument provided: '{value}', must be one of: "
            f"{Constants.ORDER_ASC}, {Constants.ORDER_DESC}"
        )


class ReflectionMode(Enum):
    """Whether/when the digest of the latest image is reflected."""
    ALWAYS = "Always"
    IF_NOT_PRESENT = "IfNotPresent"
    NEVER = "Never"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ReflectionMode":
        """Parse a reflection mode case-insensitively; empty means Never."""
        if value is None or value == "":
            return cls(Constants.DEFAULT_REFLECTION_MODE)
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        raise InvalidPolicyError(
            f"invalid digest reflection policy '{value}', must be one of: "
            + ", ".join(member.value for member in cls)
        )


@dataclass
class TagFilterSpec:
    """Regex filter for tags with an optional capture extraction template."""
    pattern: str = ""
    extract: str = ""


@dataclass
class SemVerPolicy:
    """Semantic version range policy."""
    range: str


@dataclass
class AlphabeticalPolicy:
    """Lexicographic ordering policy."""
    order: str = ""


@dataclass
class NumericalPolicy:
    """Numeric ordering policy."""
    order: str = ""


@dataclass
class NewestPolicy:
    """Creation time ordering policy."""
    order: str = ""


@dataclass
class PolicyChoice:
    """Union of the supported policies; exactly one arm must be set."""
    semver: Optional[SemVerPolicy] = None
    alphabetical: Optional[AlphabeticalPolicy] = None
    numerical: Optional[NumericalPolicy] = None
    newest: Optional[NewestPolicy] = None


@dataclass(frozen=True)
class ImageRef:
    """Resolved image reference persisted between evaluations."""
    name: str
    tag: str
    digest: str = ""

    def __str__(self) -> str:
        res = f"{self.name}:{self.tag}"
        if self.digest:
            res += "@" + self.digest
        return res

    def same_image(self, other: Optional["ImageRef"]) -> bool:
        """True when ``other`` points at the same name and tag (digest ignored)."""
        return other is not None and self.name == other.name and self.tag == other.tag

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted status shape."""
        data = {"image": self.name, "tag": self.tag}
        if self.digest:
            data["digest"] = self.digest
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ImageRef"]:
        """Build from the persisted status shape; None or empty gives None."""
        if not data:
            return None
        return cls(
            name=str(data.get("image", "")),
            tag=str(data.get("tag", "")),
            digest=str(data.get("digest") or ""),
        )


@dataclass
class ImagePolicySpec:
    """Everything needed to evaluate the policy of one image."""
    image: str
    policy: PolicyChoice
    filter_tags: Optional[TagFilterSpec] = None
    digest_reflection: ReflectionMode = ReflectionMode.NEVER
