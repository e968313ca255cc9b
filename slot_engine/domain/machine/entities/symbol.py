# slot_engine/domain/machine/entities/symbol.py
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple

from ..errors import ConfigurationError, UnknownSymbolError


@dataclass(frozen=True)
class Symbol:
    """A reel symbol and the base multiplier it pays per winning line."""
    name: str
    multiplier: float

    def __str__(self) -> str:
        return self.name


class SymbolCatalog:
    """
    Read-only table of the symbols a machine can draw.

    Symbols keep their declaration order, which is also the index order used
    when drawing a grid. The catalog holds no mutable state and can be shared
    between machines.
    """
    def __init__(self, symbols: List[Symbol]):
        """
        Build the catalog.

        Args:
            symbols: Symbols in draw order

        Raises:
            ConfigurationError: If the list is empty, a name repeats or a
                multiplier is negative or not finite
        """
        if not symbols:
            raise ConfigurationError("Symbol catalog must contain at least one symbol")

        by_name = {}
        for symbol in symbols:
            if not symbol.name:
                raise ConfigurationError("Symbol name must not be empty")
            if symbol.name in by_name:
                raise ConfigurationError(f"Duplicate symbol in catalog: {symbol.name}")
            if not math.isfinite(symbol.multiplier) or symbol.multiplier < 0:
                raise ConfigurationError(
                    f"Symbol {symbol.name} needs a finite, non-negative multiplier, got {symbol.multiplier}"
                )
            by_name[symbol.name] = symbol

        self._symbols = tuple(symbols)
        self._by_name = by_name
        self.logger = logging.getLogger("domain.machine.catalog")
        self.logger.debug(f"Catalog loaded with {len(self._symbols)} symbols: {list(by_name)}")

    @classmethod
    def from_config(cls, entries: List[Dict[str, Any]]) -> 'SymbolCatalog':
        """
        Create a catalog from configuration entries.

        Args:
            entries: List of {"name": str, "multiplier": float} dictionaries

        Returns:
            New SymbolCatalog
        """
        symbols = []
        for i, entry in enumerate(entries or []):
            if not isinstance(entry, dict) or 'name' not in entry or 'multiplier' not in entry:
                raise ConfigurationError(f"Invalid symbol entry at index {i}: {entry}")
            try:
                multiplier = float(entry['multiplier'])
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid multiplier for symbol {entry['name']}: {entry['multiplier']}"
                ) from e
            symbols.append(Symbol(str(entry['name']), multiplier))
        return cls(symbols)

    def resolve(self, name: str) -> Symbol:
        """Look up a symbol by name, raising UnknownSymbolError if absent."""
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownSymbolError(name) from None

    @property
    def symbols(self) -> Tuple[Symbol, ...]:
        return self._symbols

    @property
    def names(self) -> List[str]:
        return [symbol.name for symbol in self._symbols]

    def __getitem__(self, index: int) -> Symbol:
        return self._symbols[index]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolCatalog(symbols={self.names})"
