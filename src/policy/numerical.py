"""Numerical ordering policy."""

import math
from typing import List, Optional, Sequence, Tuple

from constants import Constants

from .base import Policer
from .errors import InvalidNumericValueError
from .models import OrderDirection, Tag


def parse_number(name: str) -> float:
    """Parse a tag name as a floating point number.

    Surrounding whitespace, digit separators (``1_000``) and NaN are
    rejected; Python's ``float()`` would otherwise accept them.

    Raises:
        InvalidNumericValueError: ``name`` is not a number.
    """
    if not name or name != name.strip() or "_" in name:
        raise InvalidNumericValueError(f"failed to parse invalid numeric value '{name}'")
    try:
        value = float(name)
    except ValueError as exc:
        raise InvalidNumericValueError(f"failed to parse invalid numeric value '{name}'") from exc
    if math.isnan(value):
        raise InvalidNumericValueError(f"failed to parse invalid numeric value '{name}'")
    return value


class Numerical(Policer):
    """Orders tags by their numeric value.

    Given the integers 0 to 9 as tags, ascending order selects 9 and
    descending order selects 0. A single tag that is not a number fails the
    whole evaluation.
    """

    def __init__(self, order: Optional[str] = None, default_order: str = Constants.DEFAULT_NUMERICAL_ORDER):
        self.order = OrderDirection.parse(order, OrderDirection(default_order))

    def latest(self, tags: Sequence[Tag]) -> Tag:
        candidates = self._require_tags(tags)
        parsed: List[Tuple[float, Tag]] = [(parse_number(tag.name), tag) for tag in candidates]

        if self.order == OrderDirection.ASC:
            return max(parsed, key=lambda item: item[0])[1]
        return min(parsed, key=lambda item: item[0])[1]
