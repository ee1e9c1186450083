"""Tests for the bundled digest fetchers."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from policy.errors import DigestFetchError
from registry.digest import CommandDigestFetcher, StaticDigestFetcher


class TestStaticDigestFetcher:
    """Tests for StaticDigestFetcher."""

    def test_returns_digest(self):
        """The configured digest is returned for any reference."""
        assert StaticDigestFetcher("sha256:abc")("app", "1.0") == "sha256:abc"

    def test_empty_digest(self):
        """An empty digest is a fetch error."""
        with pytest.raises(DigestFetchError):
            StaticDigestFetcher("")("app", "1.0")


class TestCommandDigestFetcher:
    """Tests for CommandDigestFetcher."""

    @patch("registry.digest.subprocess.run")
    def test_placeholders_and_output(self, mock_run):
        """Placeholders are substituted and stdout is stripped."""
        mock_run.return_value = MagicMock(returncode=0, stdout="sha256:abc\n", stderr="")
        fetcher = CommandDigestFetcher("crane digest {ref} # {image} {tag}", timeout=5)
        assert fetcher("ghcr.io/org/app", "1.0.0") == "sha256:abc"

        args, kwargs = mock_run.call_args
        assert args[0] == "crane digest ghcr.io/org/app:1.0.0 # ghcr.io/org/app 1.0.0"
        assert kwargs["shell"] is True
        assert kwargs["timeout"] == 5

    @patch("registry.digest.subprocess.run")
    def test_nonzero_exit(self, mock_run):
        """A failing command reports its stderr."""
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="MANIFEST_UNKNOWN\n")
        with pytest.raises(DigestFetchError, match="MANIFEST_UNKNOWN"):
            CommandDigestFetcher("crane digest {ref}")("app", "1.0")

    @patch("registry.digest.subprocess.run")
    def test_empty_output(self, mock_run):
        """A command printing nothing is a fetch error."""
        mock_run.return_value = MagicMock(returncode=0, stdout="  \n", stderr="")
        with pytest.raises(DigestFetchError, match="no output"):
            CommandDigestFetcher("true")("app", "1.0")

    @patch("registry.digest.subprocess.run")
    def test_timeout(self, mock_run):
        """A timed out command is a fetch error."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="crane", timeout=1)
        with pytest.raises(DigestFetchError, match="timed out"):
            CommandDigestFetcher("crane digest {ref}", timeout=1)("app", "1.0")

    @patch("registry.digest.subprocess.run")
    def test_os_error(self, mock_run):
        """A command that cannot be started is a fetch error."""
        mock_run.side_effect = OSError("no shell")
        with pytest.raises(DigestFetchError, match="failed to run"):
            CommandDigestFetcher("crane digest {ref}")("app", "1.0")
