# slot_engine/infrastructure/rng/strategies/rng_strategy.py
from typing import Any, List, Protocol, Sequence


class RNGStrategy(Protocol):
    """Interface the grid generator and simulators expect from a random source."""

    def get_random_int(self, min_val: int, max_val: int) -> int:
        """Return an integer in [min_val, max_val], both ends inclusive."""
        ...

    def get_batch_ints(self, min_val: int, max_val: int, count: int) -> List[int]:
        """Return `count` integers drawn from [min_val, max_val]."""
        ...

    def choice(self, items: Sequence[Any]) -> Any:
        ...

    def seed(self, seed_value: int) -> None:
        ...
