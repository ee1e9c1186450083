"""Base class for ordering policies."""

from typing import List, Sequence

from .errors import EmptyInputError
from .models import Tag


class Policer:
    """An ordering policy reducing a list of tags to the latest one."""

    def latest(self, tags: Sequence[Tag]) -> Tag:
        """Return the latest tag under this policy.

        Args:
            tags: Candidate tags. The sequence is never mutated.

        Returns:
            One of the given tags.
        """
        raise NotImplementedError

    @staticmethod
    def _require_tags(tags: Sequence[Tag]) -> List[Tag]:
        """Copy ``tags`` into a list, rejecting empty input."""
        candidates = list(tags)
        if not candidates:
            raise EmptyInputError("version list argument cannot be empty")
        return candidates
