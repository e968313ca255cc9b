# slot_engine/infrastructure/rng/rng_provider.py
import logging
from typing import Any, Dict, Optional

from .strategies.mersenne_rng import MersenneTwisterRNG
from .strategies.numpy_rng import NumpyRNG
from .strategies.rng_strategy import RNGStrategy


class RNGProvider:
    """
    Creates RNG strategies by name.

    Unseeded strategies are cached and shared per name unless the caller
    asks for its own instance. Seeded requests always get a fresh instance
    so each machine replays its own sequence.
    """
    _STRATEGIES = {
        "mersenne": MersenneTwisterRNG,
        "numpy": NumpyRNG,
    }

    def __init__(self):
        self.logger = logging.getLogger("infrastructure.rng")
        self._strategies = {}

    def get_rng(self, strategy_name: str, seed: Optional[int] = None,
                shared: bool = True) -> RNGStrategy:
        """
        Get a RNG strategy instance by name.

        Args:
            strategy_name: "mersenne" or "numpy"
            seed: Optional seed value
            shared: Reuse the cached unseeded instance for this name;
                False always builds a new one and leaves the cache alone

        Returns:
            RNG strategy instance

        Raises:
            ValueError: If the strategy name is unknown
        """
        strategy_name = strategy_name.lower()
        if seed is None and shared and strategy_name in self._strategies:
            return self._strategies[strategy_name]

        strategy = self._create_strategy(strategy_name, seed)
        if seed is None and shared:
            self._strategies[strategy_name] = strategy
        return strategy

    def _create_strategy(self, strategy_name: str, seed: Optional[int]) -> RNGStrategy:
        strategy_cls = self._STRATEGIES.get(strategy_name)
        if strategy_cls is None:
            self.logger.error(f"Unknown RNG strategy: {strategy_name}")
            raise ValueError(f"Unknown RNG strategy: {strategy_name}")

        self.logger.debug(f"Creating {strategy_cls.__name__} with seed: {seed}")
        return strategy_cls(seed)

    def create_from_config(self, config: Dict[str, Any]) -> RNGStrategy:
        """
        Create a strategy from {"strategy": "numpy", "seed": 12345}.
        Missing keys fall back to an unseeded Mersenne Twister.
        """
        return self.get_rng(config.get('strategy', 'mersenne'), config.get('seed'))

    @classmethod
    def get_available_strategies(cls) -> Dict[str, str]:
        return {
            "mersenne": "Mersenne Twister (Python's random module)",
            "numpy": "NumPy PCG64 generator (faster for large batches)",
        }
