# slot_engine/infrastructure/rng/strategies/mersenne_rng.py
import random
from typing import Any, List, Optional, Sequence


class MersenneTwisterRNG:
    """
    Random source backed by Python's Mersenne Twister.
    Each instance owns its own random.Random so machines never share state.
    """
    name = "mersenne"

    def __init__(self, seed_value: Optional[int] = None):
        """
        Args:
            seed_value: Optional seed for reproducible draws
        """
        self._random = random.Random()
        self._seed = seed_value

        if seed_value is not None:
            self.seed(seed_value)

    @property
    def seed_value(self) -> Optional[int]:
        return self._seed

    def get_random_int(self, min_val: int, max_val: int) -> int:
        return self._random.randint(min_val, max_val)

    def get_batch_ints(self, min_val: int, max_val: int, count: int) -> List[int]:
        return [self._random.randint(min_val, max_val) for _ in range(count)]

    def choice(self, items: Sequence[Any]) -> Any:
        """
        Pick one item uniformly.

        Raises:
            IndexError: If items is empty
        """
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        return self._random.choice(items)

    def seed(self, seed_value: int) -> None:
        self._seed = seed_value
        self._random.seed(seed_value)
