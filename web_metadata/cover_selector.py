"""
Cover image selection.

Small galleries use their first image. Pages with more than
DETERMINISTIC_LIMIT images often bury the hero image among icons and
thumbnails, so one is picked at random instead.
"""

import random
from typing import Optional, Sequence

from .models import CoverSelection

DETERMINISTIC_LIMIT = 3


class CoverImageSelector:
    """Pick one representative image from resolved candidates.

    Pass a seeded random.Random to make the random branch reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def select(self, candidates: Sequence[str]) -> CoverSelection:
        if not candidates:
            return CoverSelection()
        if len(candidates) <= DETERMINISTIC_LIMIT:
            return CoverSelection(candidates[0])
        return CoverSelection(self._rng.choice(list(candidates)))


def select_cover(candidates: Sequence[str], rng: Optional[random.Random] = None) -> CoverSelection:
    """Convenience wrapper around CoverImageSelector.select."""
    return CoverImageSelector(rng).select(candidates)
