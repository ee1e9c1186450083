"""Alphabetical ordering policy."""

from typing import Optional, Sequence

from constants import Constants

from .base import Policer
from .models import OrderDirection, Tag


class Alphabetical(Policer):
    """Orders tags lexicographically by name.

    Given the letters of the alphabet as tags, ascending order selects Z and
    descending order selects A.
    """

    def __init__(self, order: Optional[str] = None, default_order: str = Constants.DEFAULT_ALPHABETICAL_ORDER):
        self.order = OrderDirection.parse(order, OrderDirection(default_order))

    def latest(self, tags: Sequence[Tag]) -> Tag:
        candidates = self._require_tags(tags)
        if self.order == OrderDirection.ASC:
            return max(candidates, key=lambda t: t.name)
        return min(candidates, key=lambda t: t.name)
