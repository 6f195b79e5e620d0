"""Reviewer candidate filtering and random selection.

Eligibility is decided deterministically in Python over ID lists read from
the store; randomness is applied exactly once, over a sorted candidate list,
through an injectable ``random.Random``. A picker built with a fixed seed
therefore makes every engine decision reproducible.

Example:
    >>> picker = ReviewerPicker(seed=7)
    >>> picker.sample(["u3", "u1", "u2"], 2)
    >>> picker.choose(eligible_candidates(["u1", "u2"], exclude={"u1"}))
    'u2'
"""

from __future__ import annotations

import random
from collections.abc import Iterable

import structlog

logger = structlog.get_logger(__name__)


def eligible_candidates(
    active_member_ids: Iterable[str],
    exclude: Iterable[str] = (),
) -> list[str]:
    """Filter active team members down to assignable reviewers.

    Args:
        active_member_ids: IDs of active members of the relevant team.
        exclude: IDs that must not be picked (author, current reviewers,
            the reviewer being replaced).

    Returns:
        Remaining IDs, de-duplicated and sorted.
    """
    excluded = set(exclude)
    return sorted({member for member in active_member_ids if member not in excluded})


class ReviewerPicker:
    """Uniform random selection over candidate reviewer IDs.

    Attributes:
        seed: Seed the underlying generator was created with, if any.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        """Initialize the picker.

        Args:
            seed: Seed for a private ``random.Random``. Ignored when rng is given.
            rng: Pre-built generator to draw from.
        """
        self.seed = seed
        self._rng = rng if rng is not None else random.Random(seed)

    def sample(self, candidates: Iterable[str], k: int) -> list[str]:
        """Pick up to k distinct candidates without replacement.

        Args:
            candidates: Candidate IDs (duplicates are collapsed).
            k: Desired number of picks.

        Returns:
            min(k, len(candidates)) IDs in random order.
        """
        pool = sorted(set(candidates))
        count = max(0, min(k, len(pool)))
        picked = self._rng.sample(pool, count)
        logger.debug("reviewers_sampled", pool_size=len(pool), picked=picked)
        return picked

    def choose(self, candidates: Iterable[str]) -> str | None:
        """Pick one candidate uniformly at random, or None if there are none."""
        pool = sorted(set(candidates))
        if not pool:
            return None
        return self._rng.choice(pool)
