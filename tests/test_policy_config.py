"""Tests for loading image policies from YAML."""

import textwrap

import pytest

from policy.config import load_policy_spec, policy_choice_from_dict, policy_spec_from_dict
from policy.errors import InvalidPolicyError
from policy.models import AlphabeticalPolicy, PolicyChoice, ReflectionMode, SemVerPolicy, TagFilterSpec


def _write(tmp_path, text, name="policy.yaml"):
    path = tmp_path / name
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return str(path)


class TestLoadPolicySpec:
    """Tests for load_policy_spec."""

    def test_full_document(self, tmp_path):
        """Every supported key is read."""
        path = _write(tmp_path, """
            image: ghcr.io/org/app
            policy:
              semver:
                range: "^1.2"
            filterTags:
              pattern: '^v(?P<ver>.*)'
              extract: '$ver'
            digestReflectionPolicy: IfNotPresent
        """)
        spec = load_policy_spec(path)
        assert spec.image == "ghcr.io/org/app"
        assert spec.policy == PolicyChoice(semver=SemVerPolicy(range="^1.2"))
        assert spec.filter_tags == TagFilterSpec(pattern="^v(?P<ver>.*)", extract="$ver")
        assert spec.digest_reflection == ReflectionMode.IF_NOT_PRESENT

    def test_resource_spec_is_unwrapped(self, tmp_path):
        """A full resource document is read from its spec key."""
        path = _write(tmp_path, """
            apiVersion: image.toolkit.fluxcd.io/v1beta2
            kind: ImagePolicy
            metadata:
              name: app
            spec:
              image: registry:5000/app
              policy:
                alphabetical:
                  order: desc
        """)
        spec = load_policy_spec(path)
        assert spec.image == "registry:5000/app"
        assert spec.policy.alphabetical == AlphabeticalPolicy(order="desc")
        assert spec.filter_tags is None
        assert spec.digest_reflection == ReflectionMode.NEVER

    def test_json_document(self, tmp_path):
        """JSON documents load through the YAML parser."""
        path = _write(tmp_path, '{"image": "app", "policy": {"newest": {}}}', name="policy.json")
        spec = load_policy_spec(path)
        assert spec.policy.newest is not None

    def test_missing_file(self, tmp_path):
        """A missing file is an invalid policy."""
        with pytest.raises(InvalidPolicyError, match="not found"):
            load_policy_spec(str(tmp_path / "absent.yaml"))

    def test_malformed_yaml(self, tmp_path):
        """Unparsable YAML is an invalid policy."""
        path = _write(tmp_path, "image: [unterminated\n")
        with pytest.raises(InvalidPolicyError, match="failed to load"):
            load_policy_spec(path)


class TestPolicySpecFromDict:
    """Tests for policy_spec_from_dict."""

    @pytest.mark.parametrize(
        "data,message",
        [
            ([], "must be a mapping"),
            ({"image": "https://ghcr.io/org/app", "policy": {"newest": {}}}, "URL scheme"),
            ({"image": "ghcr.io/org/app:1.0", "policy": {"newest": {}}}, "should not contain a tag"),
            ({"image": "", "policy": {"newest": {}}}, "cannot be empty"),
            ({"image": "app", "policy": {"newest": {}}, "digestReflectionPolicy": "Sometimes"}, "digest reflection"),
            ({"image": "app", "policy": {"newest": {}}, "filterTags": "^v"}, "'filterTags' must be a mapping"),
            ({"image": "app", "policy": {"numerical": {"order": True}}}, "must be a string"),
        ],
    )
    def test_invalid(self, data, message):
        """Invalid documents raise InvalidPolicyError."""
        with pytest.raises(InvalidPolicyError, match=message):
            policy_spec_from_dict(data)

    def test_empty_arm_is_set(self):
        """A policy key with no body still selects that policy."""
        spec = policy_spec_from_dict({"image": "app", "policy": {"alphabetical": None}})
        assert spec.policy == PolicyChoice(alphabetical=AlphabeticalPolicy())

    def test_reflection_case_insensitive(self):
        """Reflection modes are matched case-insensitively."""
        spec = policy_spec_from_dict({"image": "app", "policy": {"newest": {}}, "digestReflectionPolicy": "AlWaYs"})
        assert spec.digest_reflection == ReflectionMode.ALWAYS

    def test_integer_range_is_accepted(self):
        """An unquoted integer range is read as text."""
        spec = policy_spec_from_dict({"image": "app", "policy": {"semver": {"range": 1}}})
        assert spec.policy.semver.range == "1"

    def test_float_range_is_rejected(self):
        """An unquoted float range is rejected since YAML drops trailing zeros."""
        with pytest.raises(InvalidPolicyError, match="quote it"):
            policy_spec_from_dict({"image": "app", "policy": {"semver": {"range": 1.10}}})


class TestPolicyChoiceFromDict:
    """Tests for policy_choice_from_dict."""

    def test_unknown_policy(self):
        """Unknown policy types are rejected."""
        with pytest.raises(InvalidPolicyError, match="unknown policy"):
            policy_choice_from_dict({"calver": {}})

    def test_several_arms_pass_through(self):
        """Several arms are kept for the selector to reject."""
        choice = policy_choice_from_dict({"semver": {"range": "1.x"}, "newest": {}})
        assert choice.semver is not None and choice.newest is not None

    def test_missing(self):
        """A missing policy section gives an empty choice."""
        assert policy_choice_from_dict(None) == PolicyChoice()
