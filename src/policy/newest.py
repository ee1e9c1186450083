"""Creation time ordering policy."""

from typing import Optional, Sequence

from constants import Constants

from .base import Policer
from .models import OrderDirection, Tag


class Newest(Policer):
    """Orders tags by creation time, compared at one second resolution.

    Descending (the default) selects the most recently created tag, ascending
    the oldest. Tags without a creation time count as the oldest possible.
    """

    def __init__(self, order: Optional[str] = None, default_order: str = Constants.DEFAULT_NEWEST_ORDER):
        self.order = OrderDirection.parse(order, OrderDirection(default_order))

    def latest(self, tags: Sequence[Tag]) -> Tag:
        candidates = self._require_tags(tags)
        if self.order == OrderDirection.DESC:
            return max(candidates, key=lambda t: t.created_unix())
        return min(candidates, key=lambda t: t.created_unix())
