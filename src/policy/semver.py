"""Semantic version range policy using semantic_version."""

import logging
import re
from typing import Optional, Sequence, Union

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled

from .base import Policer
from .errors import InvalidRangeError, NoMatchingVersionError
from .models import Tag

logger = logging.getLogger(__name__)

# Loose version: optional v prefix, minor and patch may be omitted
_LOOSE_VERSION_RE = re.compile(
    r"^[vV]?(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?(?:\.(0|[1-9]\d*))?"
    r"(?:-([0-9A-Za-z\-.]+))?(?:\+([0-9A-Za-z\-.]+))?$"
)

# A "v" right before a version number inside a range clause
_RANGE_V_PREFIX_RE = re.compile(r"(^|[\s,|<>=~^!]+)[vV](?=\d)")

# Whitespace between a comparison operator and its version
_OPERATOR_SPACE_RE = re.compile(r"(<=|>=|=<|=>|~>|!=|[<>=~^])\s+")

_OPERATOR_ALIASES = {"=>": ">=", "=<": "<=", "~>": "~"}
_OPERATOR_ALIAS_RE = re.compile("|".join(re.escape(op) for op in _OPERATOR_ALIASES))

RangeSpec = Union[semantic_version.NpmSpec, semantic_version.SimpleSpec]


def parse_version(name: str) -> Optional[semantic_version.Version]:
    """Parse a tag name as a semantic version.

    Accepts an optional ``v``/``V`` prefix and missing minor/patch fields
    (``1.2`` is ``1.2.0``). Returns None when the name is not a version.
    """
    m = _LOOSE_VERSION_RE.fullmatch(name)
    if not m:
        return None
    major, minor, patch, prerelease, build = m.groups()
    text = f"{major}.{minor or 0}.{patch or 0}"
    if prerelease:
        text += f"-{prerelease}"
    if build:
        text += f"+{build}"
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None  # e.g. numeric pre-release identifiers with leading zeros


def _strip_v_prefix(expr: str) -> str:
    """Drop the ``v`` prefix of every version in a range expression."""
    return _RANGE_V_PREFIX_RE.sub(r"\1", expr)


def _normalize_operators(expr: str) -> str:
    """Attach operators to their versions and spell ``=>``, ``=<``, ``~>`` as npm does."""
    expr = _OPERATOR_SPACE_RE.sub(r"\1", expr)
    return _OPERATOR_ALIAS_RE.sub(lambda m: _OPERATOR_ALIASES[m.group(0)], expr)


def parse_range(expr: str) -> RangeSpec:
    """Parse a semver range expression.

    npm style ranges (``1.0.x``, ``^1.2``, ``~1.0``, ``>=1.0 <2.0``) are tried
    first, with comma separated clauses treated as AND. SimpleSpec syntax
    (``>=1.0,!=1.5.0``, ``~=1.4``) is the fallback.

    Raises:
        InvalidRangeError: The expression is empty or not a valid range.
    """
    if not expr or not expr.strip():
        raise InvalidRangeError("semver range cannot be empty")

    stripped = _strip_v_prefix(_normalize_operators(expr.strip()))
    try:
        return semantic_version.NpmSpec(" ".join(stripped.replace(",", " ").split()))
    except ValueError:
        try:
            return semantic_version.SimpleSpec(stripped)
        except ValueError as exc:
            raise InvalidRangeError(f"improper constraint: {expr}") from exc


class SemVer(Policer):
    """Selects the highest version inside a semver range."""

    def __init__(self, semver_range: str):
        """Build the policy.

        Args:
            semver_range: Range expression, with or without ``v`` prefixes.

        Raises:
            InvalidRangeError: The range cannot be parsed.
        """
        self.range = semver_range
        self._spec = parse_range(semver_range)

    def latest(self, tags: Sequence[Tag]) -> Tag:
        """Return the tag with the highest version satisfying the range.

        Tags that are not versions are skipped. Among equal versions spelled
        differently (``1.0.1`` and ``v1.0.1``) the first one wins.

        Raises:
            EmptyInputError: ``tags`` is empty.
            NoMatchingVersionError: No tag is a version inside the range.
        """
        candidates = self._require_tags(tags)

        best: Optional[Tag] = None
        best_version: Optional[semantic_version.Version] = None
        skipped = 0
        for tag in candidates:
            version = parse_version(tag.name)
            if version is None:
                skipped += 1
                continue
            if not self._spec.match(version):
                continue
            if best_version is None or version > best_version:
                best, best_version = tag, version

        if is_debug_enabled(logger):
            logger.debug("Evaluated semver range", extra=extra_context(
                event="decision", component="semver", action="latest",
                outcome="match" if best else "no_match", count=len(candidates),
                skipped=skipped, target=self.range,
            ))

        if best is None:
            raise NoMatchingVersionError(
                f"unable to determine latest version from provided list for range '{self.range}'"
            )
        return best
