"""Transfer chain normalization and compatibility resolution."""

import json
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from chainarb.config.constants import DEFAULT_CHAIN_ALIASES, LEGACY_CHAIN
from chainarb.models.market import TransferChain


class ChainNormalizer:
    """Map venue-specific network labels to canonical chain names."""

    def __init__(self, aliases: Mapping[str, Iterable[str]] | None = None) -> None:
        """
        Initialize normalizer.

        Args:
            aliases: Canonical name -> known labels, defaults to the built-in table
        """
        table = DEFAULT_CHAIN_ALIASES if aliases is None else aliases
        self.aliases: dict[str, frozenset[str]] = {
            canonical: frozenset(label.upper() for label in labels)
            for canonical, labels in table.items()
        }

    @classmethod
    def from_file(cls, path: str | Path) -> "ChainNormalizer":
        """Load the alias table from a JSON object {canonical: [labels...]}."""
        return cls(json.loads(Path(path).read_text()))

    def normalize(self, raw_label: str) -> str:
        """
        Get the canonical name of a network label.

        Unknown labels are returned upper-cased, as if already canonical.
        """
        label = raw_label.upper()
        for canonical, labels in self.aliases.items():
            if label in labels:
                return canonical
        return label


class ResolvedChain(BaseModel):
    """Network selected to move funds from the buy venue to the sell venue."""

    model_config = ConfigDict(frozen=True)

    chain_name: str
    withdraw_fee: Decimal


class ChainResolver:
    """Find the cheapest network shared by a source and a destination venue."""

    def __init__(self, excluded_chains: Iterable[str] = ()) -> None:
        """
        Initialize resolver.

        Args:
            excluded_chains: Chain names never eligible; the legacy network is always added
        """
        self.excluded_chains = {chain.upper() for chain in excluded_chains} | {LEGACY_CHAIN}

    def resolve(
        self,
        source_chains: Iterable[TransferChain] | None,
        dest_chains: Iterable[TransferChain] | None,
    ) -> ResolvedChain | None:
        """
        Pick the transfer network for moving a currency between two venues.

        The source (buy) venue must allow withdrawal and the destination (sell)
        venue must accept deposits on a chain with the same name. Among eligible
        chains the lowest source withdrawal fee wins; ties keep source order.

        Args:
            source_chains: Chains of the currency on the buy venue
            dest_chains: Chains of the currency on the sell venue

        Returns:
            Selected chain, or None if the currency cannot be moved
        """
        if not source_chains or not dest_chains:
            return None

        depositable = {chain.chain_name for chain in dest_chains if chain.deposit_enabled}

        best: TransferChain | None = None
        for chain in source_chains:
            if not chain.withdraw_enabled:
                continue
            if chain.chain_name in self.excluded_chains:
                continue
            if chain.chain_name not in depositable:
                continue
            if best is None or chain.withdraw_fee < best.withdraw_fee:
                best = chain

        if best is None:
            return None
        return ResolvedChain(chain_name=best.chain_name, withdraw_fee=best.withdraw_fee)
