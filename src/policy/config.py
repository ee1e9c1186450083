"""Load image policy configuration from YAML (or JSON) documents.

Keys mirror the ImagePolicy resource::

    image: ghcr.io/org/app
    policy:
      semver:
        range: "^1.2"
    filterTags:
      pattern: '^v(?P<ver>.*)'
      extract: '$ver'
    digestReflectionPolicy: IfNotPresent
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants, PolicyKinds
from registry.image_ref import parse_image_reference

from .errors import InvalidPolicyError
from .models import (
    AlphabeticalPolicy,
    ImagePolicySpec,
    NewestPolicy,
    NumericalPolicy,
    PolicyChoice,
    ReflectionMode,
    SemVerPolicy,
    TagFilterSpec,
)

logger = logging.getLogger(__name__)


def _section(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    """Return a mapping section, None when absent; an empty value counts as set."""
    if key not in data:
        return None
    value = data[key]
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidPolicyError(f"'{key}' must be a mapping")
    return value


def _string(section: Dict[str, Any], key: str, where: str) -> str:
    value = section.get(key, "")
    if value is None:
        return ""
    # floats are rejected: YAML reads an unquoted 1.10 as 1.1
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidPolicyError(f"'{where}.{key}' must be a string, quote it in YAML")
    return str(value)


def policy_choice_from_dict(data: Optional[Dict[str, Any]]) -> PolicyChoice:
    """Build a PolicyChoice from the ``policy`` section.

    Several or no arms are passed through; the policy selector rejects them.
    """
    if data is None:
        return PolicyChoice()
    if not isinstance(data, dict):
        raise InvalidPolicyError("'policy' must be a mapping")

    unknown = set(data) - set(Constants.SUPPORTED_POLICIES)
    if unknown:
        raise InvalidPolicyError(f"unknown policy type(s): {', '.join(sorted(unknown))}")

    choice = PolicyChoice()
    semver = _section(data, PolicyKinds.SEMVER.value)
    if semver is not None:
        choice.semver = SemVerPolicy(range=_string(semver, "range", "policy.semver"))
    alphabetical = _section(data, PolicyKinds.ALPHABETICAL.value)
    if alphabetical is not None:
        choice.alphabetical = AlphabeticalPolicy(order=_string(alphabetical, "order", "policy.alphabetical"))
    numerical = _section(data, PolicyKinds.NUMERICAL.value)
    if numerical is not None:
        choice.numerical = NumericalPolicy(order=_string(numerical, "order", "policy.numerical"))
    newest = _section(data, PolicyKinds.NEWEST.value)
    if newest is not None:
        choice.newest = NewestPolicy(order=_string(newest, "order", "policy.newest"))
    return choice


def policy_spec_from_dict(data: Any) -> ImagePolicySpec:
    """Build an ImagePolicySpec from a decoded configuration document.

    An enclosing ``spec`` key is unwrapped.

    Raises:
        InvalidPolicyError: The document does not describe a valid policy.
    """
    if not isinstance(data, dict):
        raise InvalidPolicyError("policy configuration must be a mapping")
    if isinstance(data.get("spec"), dict):
        data = data["spec"]

    image = parse_image_reference(_string(data, "image", "spec"))
    choice = policy_choice_from_dict(data.get("policy"))

    filter_tags = None
    filter_section = _section(data, "filterTags")
    if filter_section is not None:
        filter_tags = TagFilterSpec(
            pattern=_string(filter_section, "pattern", "filterTags"),
            extract=_string(filter_section, "extract", "filterTags"),
        )

    mode = ReflectionMode.parse(_string(data, "digestReflectionPolicy", "spec") or None)
    return ImagePolicySpec(image=image, policy=choice, filter_tags=filter_tags, digest_reflection=mode)


def load_policy_spec(config_path: str) -> ImagePolicySpec:
    """Load an image policy from a YAML or JSON file.

    Args:
        config_path: Path to the configuration file.

    Raises:
        InvalidPolicyError: The file is missing, unparsable, or invalid.
    """
    if not os.path.isfile(config_path):
        raise InvalidPolicyError(f"config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise InvalidPolicyError(f"failed to load config '{config_path}': {exc}") from exc

    spec = policy_spec_from_dict(data)
    logger.debug("Loaded policy for image %s from %s", spec.image, config_path)
    return spec
