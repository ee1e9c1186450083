"""Parsing of image repository references."""

from __future__ import annotations

import re

from policy.errors import InvalidPolicyError
from policy.models import ImageRef

_DIGEST_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}$")
_TAG_RE = re.compile(r"^[\w][\w.-]{0,127}$")


def _split_registry(url: str) -> tuple[str, str]:
    """Split ``url`` into (registry, path); registry is empty for Docker Hub names."""
    first, sep, rest = url.partition("/")
    if sep and ("." in first or ":" in first or first == "localhost"):
        return first, rest
    return "", url


def parse_image_reference(url: str) -> str:
    """Validate an image repository reference and return it stripped.

    A registry host may carry a port (``registry:5000/app``), but the image
    itself must not carry a tag or a URL scheme.

    Raises:
        InvalidPolicyError: The reference is empty, has a scheme or a tag.
    """
    url = (url or "").strip()
    if "://" in url:
        scheme = url.split("://", 1)[0]
        raise InvalidPolicyError(f".spec.image value should not start with URL scheme; remove '{scheme}://'")
    if not url:
        raise InvalidPolicyError(".spec.image value cannot be empty")

    _, path = _split_registry(url)
    if not path or any(not part for part in path.split("/")):
        raise InvalidPolicyError(f"could not parse reference: {url}")
    if ":" in path:
        raise InvalidPolicyError(f".spec.image value should not contain a tag; remove ':{path.split(':', 1)[1]}'")
    if "@" in path or path != path.lower():
        raise InvalidPolicyError(f"could not parse reference: {url}")
    return url


def parse_image_ref(text: str) -> ImageRef:
    """Parse ``name:tag[@digest]`` into an ImageRef.

    Raises:
        ValueError: ``text`` has no tag or an invalid tag or digest.
    """
    text = (text or "").strip()
    digest = ""
    if "@" in text:
        text, digest = text.rsplit("@", 1)
        if not _DIGEST_RE.match(digest):
            raise ValueError(f"invalid digest '{digest}'")

    registry, path = _split_registry(text)
    if ":" not in path:
        raise ValueError(f"image reference '{text}' has no tag")
    path, tag = path.rsplit(":", 1)
    if not _TAG_RE.match(tag):
        raise ValueError(f"invalid tag '{tag}'")
    name = f"{registry}/{path}" if registry else path
    return ImageRef(name=name, tag=tag, digest=digest)
