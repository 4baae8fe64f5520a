"""
Injectable randomness for option and question shuffling.

Generators never touch a global RNG; they receive a RandomSource so that
production wiring can use a real generator while tests pin the sequence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TypeVar

import numpy as np


T = TypeVar("T")


class RandomSource(ABC):
    """Base interface for shuffling strategies."""

    @abstractmethod
    def shuffled(self, items: Sequence[T]) -> List[T]:
        """
        Return a new list holding the items in a random order.

        Args:
            items: Items to reorder (left untouched)

        Returns:
            Reordered copy of the items
        """
        pass


class NumpyRandomSource(RandomSource):
    """RandomSource backed by numpy's Generator (PCG64)."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def shuffled(self, items: Sequence[T]) -> List[T]:
        items = list(items)
        if len(items) < 2:
            return items
        order = self._rng.permutation(len(items))
        return [items[int(i)] for i in order]
