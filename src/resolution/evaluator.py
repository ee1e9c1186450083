"""Policy evaluator producing the persisted status of an image policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence

from constants import Constants, Reasons
from policy.errors import DigestFetchError, PolicyError
from policy.models import ImagePolicySpec, ImageRef, Tag
from registry.image_ref import parse_image_ref

from .pipeline import resolve
from .reflection import advance

logger = logging.getLogger(__name__)

DigestLookup = Callable[[str, str], str]


def _ref_from_status(data: Dict[str, Any], key: str, legacy_key: str) -> Optional[ImageRef]:
    ref = ImageRef.from_dict(data.get(key))
    if ref is None and data.get(legacy_key):
        ref = parse_image_ref(str(data[legacy_key]))
    return ref


def compose_ready_message(previous_tag: str, latest_tag: str, image: str) -> str:
    """Compose the status message for a successful evaluation.

    Args:
        previous_tag: Tag of the observed previous reference, may be empty.
        latest_tag: Tag just resolved.
        image: Image name.
    """
    if previous_tag and previous_tag != latest_tag:
        return Constants.READY_UPDATED_MSG.format(image=image, previous=previous_tag, tag=latest_tag)
    return Constants.READY_RESOLVED_MSG.format(image=image, tag=latest_tag)


@dataclass
class PolicyStatus:
    """Outcome of one evaluation, persisted and fed to the next one."""

    latest_ref: Optional[ImageRef] = None
    observed_previous_ref: Optional[ImageRef] = None
    ready: bool = False
    reason: str = ""
    message: str = ""
    stalled: bool = False
    error: Optional[PolicyError] = field(default=None, repr=False, compare=False)

    @property
    def retry(self) -> bool:
        """True when a failed evaluation should be attempted again later."""
        return not self.ready and not self.stalled

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape persisted between evaluations."""
        data: Dict[str, Any] = {
            "ready": self.ready,
            "reason": self.reason,
            "message": self.message,
        }
        if self.stalled:
            data["stalled"] = True
        if self.latest_ref is not None:
            data["latestRef"] = self.latest_ref.to_dict()
        if self.observed_previous_ref is not None:
            data["observedPreviousRef"] = self.observed_previous_ref.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PolicyStatus":
        """Rebuild a status from its persisted JSON shape.

        Statuses written with ``latestImage``/``observedPreviousImage`` strings
        (``name:tag``) are read too; the structured references win when both
        are present.

        Raises:
            ValueError: A string reference has no valid tag or digest.
        """
        data = data or {}
        return cls(
            latest_ref=_ref_from_status(data, "latestRef", "latestImage"),
            observed_previous_ref=_ref_from_status(data, "observedPreviousRef", "observedPreviousImage"),
            ready=bool(data.get("ready", False)),
            reason=str(data.get("reason", "")),
            message=str(data.get("message", "")),
            stalled=bool(data.get("stalled", False)),
        )


class PolicyEvaluator:
    """Evaluates an image policy against the tags of its repository.

    Wraps the resolution pipeline and the digest reflection state machine,
    translating policy errors into a failed status instead of raising.
    """

    def __init__(self, spec: ImagePolicySpec, digest_lookup: Optional[DigestLookup] = None):
        """Initialize the evaluator.

        Args:
            spec: Image policy to evaluate.
            digest_lookup: Returns the digest of ``(image, tag)``; required
                only when the reflection mode ever needs a digest.
        """
        self.spec = spec
        self._digest_lookup = digest_lookup

    def _fetch_digest(self, tag: str) -> str:
        if self._digest_lookup is None:
            raise DigestFetchError(
                f"digest reflection policy '{self.spec.digest_reflection.value}' requires a digest source"
            )
        return self._digest_lookup(self.spec.image, tag)

    def evaluate(self, tags: Sequence[Tag], previous: Optional[PolicyStatus] = None) -> PolicyStatus:
        """Evaluate the policy once.

        Args:
            tags: Tags observed in the repository.
            previous: Status returned by the previous evaluation, if any.

        Returns:
            The new status. Policy errors are reported in it; errors raised by
            a caller supplied digest lookup propagate.
        """
        previous = previous or PolicyStatus()
        # The latest reference is cleared for every pass; only the observed
        # previous reference survives a failure.
        status = PolicyStatus(observed_previous_ref=previous.observed_previous_ref)
        image = self.spec.image

        try:
            latest = resolve(tags, self.spec.filter_tags, self.spec.policy)
            ref = advance(
                image,
                latest,
                previous.latest_ref,
                self.spec.digest_reflection,
                lambda: self._fetch_digest(latest.name),
            )
        except PolicyError as exc:
            status.reason = exc.reason
            status.message = str(exc)
            status.stalled = not exc.retryable
            status.error = exc
            if status.stalled:
                logger.error("Policy for '%s' is invalid: %s", image, exc)
            else:
                logger.warning("Failed to resolve latest tag for '%s': %s", image, exc)
            return status

        # Recovery from a failed pass clears the observed previous reference,
        # so it is not reported as an update.
        if not ref.same_image(previous.latest_ref):
            status.observed_previous_ref = previous.latest_ref

        previous_tag = status.observed_previous_ref.tag if status.observed_previous_ref else ""
        status.latest_ref = ref
        status.ready = True
        status.reason = Reasons.SUCCEEDED
        status.message = compose_ready_message(previous_tag, ref.tag, image)
        logger.info(status.message)
        return status
