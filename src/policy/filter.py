"""Regex based tag filtering with optional capture extraction."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled

from .errors import InvalidPatternError
from .models import Tag, TagFilterSpec

logger = logging.getLogger(__name__)

# $$, ${name}, $name where name is a group number or identifier
_TEMPLATE_RE = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")


class FilteredView:
    """Mapping from extracted tag names back to the original tags.

    When two originals extract to the same name the later one wins.
    """

    def __init__(self) -> None:
        self._originals: Dict[str, Tag] = {}

    def add(self, extracted: str, original: Tag) -> None:
        """Record that ``original`` evaluates as ``extracted``."""
        self._originals[extracted] = original

    def items(self) -> List[Tag]:
        """Tags to evaluate: extracted names with the original creation times."""
        return [Tag(name=name, created=orig.created) for name, orig in self._originals.items()]

    def get_original(self, tag: Tag) -> Tag:
        """Return the original tag an extracted tag came from.

        Raises:
            KeyError: ``tag`` is not part of this view.
        """
        return self._originals[tag.name]

    def __len__(self) -> int:
        return len(self._originals)

    def __contains__(self, name: object) -> bool:
        return name in self._originals


def expand_template(match: re.Match[str], template: str) -> str:
    """Substitute capture groups of ``match`` into ``template``.

    Supports ``$1``, ``${1}``, ``$name``, ``${name}`` and ``$$``. Groups that
    do not exist in the pattern, or did not participate in the match, expand
    to an empty string.
    """
    def _replace(ref: re.Match[str]) -> str:
        if ref.group(1):
            return "$"
        key = ref.group(2) or ref.group(3)
        if key.isdigit():
            index = int(key)
            if index > (match.re.groups or 0):
                return ""
            return match.group(index) or ""
        if key not in match.re.groupindex:
            return ""
        return match.group(key) or ""

    return _TEMPLATE_RE.sub(_replace, template)


class RegexFilter:
    """Selects tags whose name matches ``pattern`` and optionally rewrites them."""

    def __init__(self, pattern: str, extract: str = ""):
        """Compile the filter.

        Args:
            pattern: Regular expression searched in each tag name.
            extract: Optional substitution template built from capture groups.

        Raises:
            InvalidPatternError: ``pattern`` does not compile.
        """
        try:
            self.regex = re.compile(pattern or "")
        except re.error as exc:
            raise InvalidPatternError(f"invalid regular expression pattern '{pattern}': {exc}") from exc
        self.extract = extract or ""

    def apply(self, tags: Iterable[Tag]) -> FilteredView:
        """Build a filtered view of ``tags``; non-matching tags are dropped."""
        view = FilteredView()
        seen = 0
        for tag in tags:
            seen += 1
            match = self.regex.search(tag.name)
            if match is None:
                continue
            extracted = expand_template(match, self.extract) if self.extract else tag.name
            if extracted in view and is_debug_enabled(logger):
                logger.debug("Extracted tag name collision, keeping the later tag", extra=extra_context(
                    event="decision", component="filter", action="apply",
                    outcome="collision", target=extracted,
                ))
            view.add(extracted, tag)

        if is_debug_enabled(logger):
            logger.debug("Applied tag filter", extra=extra_context(
                event="function_exit", component="filter", action="apply",
                outcome="filtered", count=len(view), total=seen,
            ))
        return view


def apply_filter(tags: Iterable[Tag], spec: Optional[TagFilterSpec]) -> FilteredView:
    """Apply ``spec`` to ``tags``; a None spec keeps every tag unchanged."""
    if spec is None:
        spec = TagFilterSpec()
    return RegexFilter(spec.pattern, spec.extract).apply(tags)
