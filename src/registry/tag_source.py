"""Load the persisted tag scan of an image repository."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from policy.models import Tag

logger = logging.getLogger(__name__)


class TagSourceError(ValueError):
    """Raised when a tag scan file cannot be read or has an unexpected shape."""


def parse_created(value: Any) -> Optional[datetime]:
    """Parse a creation time from RFC 3339 text or Unix seconds.

    Returns None for missing values.

    Raises:
        TagSourceError: The value is neither a timestamp nor a number.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise TagSourceError(f"invalid creation time: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            created = datetime.fromisoformat(text)
        except ValueError as exc:
            raise TagSourceError(f"invalid creation time: {value!r}") from exc
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return created
    raise TagSourceError(f"invalid creation time: {value!r}")


def tags_from_data(data: Any) -> List[Tag]:
    """Convert decoded JSON into tags.

    Accepts a list of names, a list of ``{"name", "created"}`` objects, or an
    object holding such a list under ``tags``.
    """
    if isinstance(data, dict):
        data = data.get("tags")
    if not isinstance(data, list):
        raise TagSourceError("expected a list of tags")

    tags: List[Tag] = []
    for item in data:
        if isinstance(item, str):
            tags.append(Tag(name=item))
        elif isinstance(item, dict) and isinstance(item.get("name"), str):
            tags.append(Tag(name=item["name"], created=parse_created(item.get("created"))))
        else:
            raise TagSourceError(f"invalid tag entry: {item!r}")
    return tags


def load_tags(path: str) -> List[Tag]:
    """Read tags from a JSON scan file.

    Raises:
        TagSourceError: The file is missing, not JSON, or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise TagSourceError(f"failed to read tags from '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise TagSourceError(f"tags file '{path}' is not valid JSON: {exc}") from exc

    tags = tags_from_data(data)
    if is_debug_enabled(logger):
        logger.debug("Loaded tags", extra=extra_context(
            event="function_exit", component="tag_source", action="load_tags",
            outcome="loaded", count=len(tags), target=path,
        ))
    return tags
