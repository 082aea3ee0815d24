"""Asset ledger interface.

Asset transfers and share-token creation happen outside the pool engine.
The engine only talks to an AssetLedger; InMemoryLedger is the reference
implementation used by the registry, the API and the tests.

Each mutating operation hands the ledger one Settlement: the amounts the
pool collects from depositors and the amounts it pays out. A ledger applies
a settlement whole or not at all.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class LedgerError(Exception):
    """Base class for ledger rejections."""

    pass


class InsufficientBalanceError(LedgerError):
    """A holder does not have the amount the pool tries to collect."""

    pass


@dataclass(frozen=True)
class Transfer:
    """An outbound transfer from a pool.

    Attributes:
        pool_id: Pool paying out
        asset_id: Asset (or share token) transferred
        receiver: Depositor receiving the amount
        amount: Amount in native units
    """

    pool_id: int
    asset_id: int
    receiver: str
    amount: int


@dataclass(frozen=True)
class Collection:
    """An inbound transfer into a pool, taken from a holder.

    Attributes:
        pool_id: Pool receiving the amount
        asset_id: Asset (or share token) taken
        holder: Depositor the amount is taken from
        amount: Amount in native units
    """

    pool_id: int
    asset_id: int
    holder: str
    amount: int


@dataclass
class Settlement:
    """Ledger movements queued by one pool operation."""

    collections: list[Collection] = field(default_factory=list)
    transfers: list[Transfer] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.collections or self.transfers)


@runtime_checkable
class AssetLedger(Protocol):
    """Protocol for the ledger a pool collects from and pays out through."""

    def create_share_token(self, pool_id: int, total_supply: int) -> int:
        """Create the share token for a pool, held entirely by the pool.

        Args:
            pool_id: Pool the token belongs to
            total_supply: Total supply of the token

        Returns:
            The new share token id
        """
        ...

    def balance_of(self, holder: str, asset_id: int) -> int:
        """Amount of asset_id currently held by holder."""
        ...

    def settle(self, settlement: Settlement) -> None:
        """Apply every collection and transfer of a settlement, or none.

        The whole settlement is validated before anything is applied. If the
        ledger raises, no movement of the settlement has taken effect.

        Raises:
            LedgerError: If the settlement cannot be applied
        """
        ...


class InMemoryLedger:
    """Ledger keeping transfers and holdings in memory.

    Share token ids are allocated sequentially from first_token_id. Only
    amounts the ledger has seen are tracked: a holder's balance is what
    pools sent them minus what pools collected from them.
    """

    def __init__(self, first_token_id: int = 1_000_000) -> None:
        self._next_token_id = first_token_id
        self.transfers: list[Transfer] = []
        self.collections: list[Collection] = []
        self.share_tokens: dict[int, int] = {}
        self._holdings: defaultdict[tuple[str, int], int] = defaultdict(int)

    def create_share_token(self, pool_id: int, total_supply: int) -> int:
        token_id = self._next_token_id
        self._next_token_id += 1
        self.share_tokens[token_id] = pool_id
        return token_id

    def balance_of(self, holder: str, asset_id: int) -> int:
        return self._holdings.get((holder, asset_id), 0)

    def settle(self, settlement: Settlement) -> None:
        """Collect, then pay out.

        Raises:
            InsufficientBalanceError: If a holder cannot cover the total
                collected from them. Nothing is applied in that case.
        """
        wanted: defaultdict[tuple[str, int], int] = defaultdict(int)
        for collection in settlement.collections:
            wanted[(collection.holder, collection.asset_id)] += collection.amount
        for (holder, asset_id), amount in wanted.items():
            held = self._holdings.get((holder, asset_id), 0)
            if amount > held:
                raise InsufficientBalanceError(
                    f"{holder} holds {held} of asset {asset_id}, cannot take {amount}"
                )

        for collection in settlement.collections:
            self.collections.append(collection)
            self._holdings[(collection.holder, collection.asset_id)] -= collection.amount
        for transfer in settlement.transfers:
            self.transfers.append(transfer)
            self._holdings[(transfer.receiver, transfer.asset_id)] += transfer.amount
