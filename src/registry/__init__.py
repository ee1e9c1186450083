"""Adapters for the image repository side: references, tag scans, digests."""

from .digest import CommandDigestFetcher, StaticDigestFetcher
from .image_ref import parse_image_ref, parse_image_reference
from .tag_source import TagSourceError, load_tags, parse_created, tags_from_data

__all__ = [
    "CommandDigestFetcher",
    "StaticDigestFetcher",
    "TagSourceError",
    "load_tags",
    "parse_created",
    "parse_image_ref",
    "parse_image_reference",
    "tags_from_data",
]
