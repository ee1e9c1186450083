"""Digest lookups for resolved image references.

The registry is never contacted directly: digests either come from a fixed
value or from an external command such as ``crane digest {ref}``.
"""

from __future__ import annotations

import logging
import subprocess

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from policy.errors import DigestFetchError

logger = logging.getLogger(__name__)


class StaticDigestFetcher:
    """Returns the same digest for every image and tag."""

    def __init__(self, digest: str):
        self.digest = digest

    def __call__(self, image: str, tag: str) -> str:
        if not self.digest:
            raise DigestFetchError(f"no digest available for {image}:{tag}")
        return self.digest


class CommandDigestFetcher:
    """Runs a shell command and reads the digest from its standard output.

    The command is a template with ``{image}``, ``{tag}`` and ``{ref}``
    (``image:tag``) placeholders.
    """

    def __init__(self, command: str, timeout: int = Constants.DIGEST_COMMAND_TIMEOUT_SEC):
        self.command = command
        self.timeout = timeout

    def __call__(self, image: str, tag: str) -> str:
        cmd = self.command.format(image=image, tag=tag, ref=f"{image}:{tag}")
        with Timer() as t:
            try:
                result = subprocess.run(
                    cmd,
                    shell=True,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired as exc:
                raise DigestFetchError(
                    f"digest command timed out after {self.timeout} seconds for {image}:{tag}"
                ) from exc
            except OSError as exc:
                raise DigestFetchError(f"failed to run digest command for {image}:{tag}: {exc}") from exc

        if is_debug_enabled(logger):
            logger.debug("Digest command finished", extra=extra_context(
                event="digest_lookup", component="digest", action="command",
                outcome="success" if result.returncode == 0 else "failure",
                returncode=result.returncode, duration_ms=t.duration_ms(),
                target=f"{image}:{tag}",
            ))

        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise DigestFetchError(f"digest command failed for {image}:{tag}: {detail}")
        digest = (result.stdout or "").strip()
        if not digest:
            raise DigestFetchError(f"digest command returned no output for {image}:{tag}")
        return digest
