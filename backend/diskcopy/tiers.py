"""Capacity tier lookup for copied managed disks.

A copied disk is sized up to the ceiling of the tier its source falls in,
e.g. a 100 GB source becomes a 128 GB copy.
"""
from bisect import bisect_left
from typing import Tuple

from .exceptions import TierOutOfRangeError

TIER_CEILINGS: Tuple[int, ...] = (32, 64, 128, 256, 512, 1024, 2048)
MIN_SIZE_GB = 1
MAX_SIZE_GB = TIER_CEILINGS[-1]


def resolve_tier_size(size_gb: int) -> int:
    """Return the smallest tier ceiling >= size_gb.

    Raises TierOutOfRangeError for sizes outside [1, 2048] and for values that
    are not integers (Azure reports no size for some disks).
    """
    if isinstance(size_gb, bool) or not isinstance(size_gb, int):
        raise TierOutOfRangeError(size_gb)
    if size_gb < MIN_SIZE_GB or size_gb > MAX_SIZE_GB:
        raise TierOutOfRangeError(size_gb)
    return TIER_CEILINGS[bisect_left(TIER_CEILINGS, size_gb)]
