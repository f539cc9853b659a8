from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from ..errors import ContractViolation

logger = logging.getLogger(__name__)


def find_floor_index(value: int, thresholds: Sequence[int]) -> Optional[int]:
    """Index of the greatest threshold not exceeding ``value``.

    With repeated thresholds the last equal entry wins. Returns None when
    ``value`` is below the first threshold.
    """
    idx = bisect_right(thresholds, value)
    if idx == 0:
        return None
    return idx - 1


@dataclass(frozen=True)
class ExperienceTable:
    """Ascending experience thresholds; ``thresholds[L - 1]`` reaches level L.

    Level indexing is 1-based: level 1 starts at ``thresholds[0]`` and the
    last entry is the level cap.
    """

    thresholds: Tuple[int, ...]

    def __init__(self, thresholds: Iterable[int]) -> None:
        values = tuple(int(v) for v in thresholds)
        if not values:
            raise ValueError("ExperienceTable requires at least one threshold")
        for i in range(1, len(values)):
            if values[i] < values[i - 1]:
                raise ValueError(f"Experience thresholds must be non-decreasing (index {i})")
        object.__setattr__(self, "thresholds", values)

    @property
    def max_level(self) -> int:
        return len(self.thresholds)

    def __len__(self) -> int:
        return len(self.thresholds)

    def level_for(self, experience: int) -> Optional[int]:
        """Level reached with ``experience``, or None below the first threshold."""
        idx = find_floor_index(experience, self.thresholds)
        if idx is None:
            logger.debug("Experience %d is below the minimum threshold %d", experience, self.thresholds[0])
            return None
        return idx + 1

    def experience_for(self, level: int) -> int:
        if not 1 <= level <= self.max_level:
            raise ContractViolation(f"Level {level} outside 1..{self.max_level}")
        return self.thresholds[level - 1]
