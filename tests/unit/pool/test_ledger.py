"""Tests for the in-memory asset ledger."""

import pytest

from tests.helpers import ALICE, ASSET_A, ASSET_B, BOB, FIRST_SHARE_TOKEN
from weighted_pool.pool import (
    AssetLedger,
    Collection,
    InMemoryLedger,
    InsufficientBalanceError,
    LedgerError,
    Settlement,
    Transfer,
)


@pytest.fixture
def ledger() -> InMemoryLedger:
    ledger = InMemoryLedger()
    ledger.settle(Settlement(transfers=[Transfer(1, FIRST_SHARE_TOKEN, ALICE, 1_000)]))
    return ledger


class TestInMemoryLedger:
    """Tests for InMemoryLedger."""

    def test_satisfies_protocol(self, ledger):
        assert isinstance(ledger, AssetLedger)

    def test_share_tokens_are_sequential(self):
        ledger = InMemoryLedger()
        assert ledger.create_share_token(1, 10) == FIRST_SHARE_TOKEN
        assert ledger.create_share_token(2, 10) == FIRST_SHARE_TOKEN + 1
        assert ledger.share_tokens == {FIRST_SHARE_TOKEN: 1, FIRST_SHARE_TOKEN + 1: 2}

    def test_unknown_holder_has_nothing(self, ledger):
        assert ledger.balance_of(BOB, FIRST_SHARE_TOKEN) == 0

    def test_settle_collects_then_pays(self, ledger):
        ledger.settle(
            Settlement(
                collections=[Collection(1, FIRST_SHARE_TOKEN, ALICE, 400)],
                transfers=[Transfer(1, ASSET_A, ALICE, 70), Transfer(1, ASSET_B, ALICE, 30)],
            )
        )

        assert ledger.balance_of(ALICE, FIRST_SHARE_TOKEN) == 600
        assert ledger.balance_of(ALICE, ASSET_A) == 70
        assert ledger.balance_of(ALICE, ASSET_B) == 30
        assert ledger.collections == [Collection(1, FIRST_SHARE_TOKEN, ALICE, 400)]

    def test_short_holder_rejects_whole_settlement(self, ledger):
        transfers_before = list(ledger.transfers)
        settlement = Settlement(
            collections=[Collection(1, FIRST_SHARE_TOKEN, BOB, 1)],
            transfers=[Transfer(1, ASSET_A, BOB, 500), Transfer(1, ASSET_B, BOB, 500)],
        )

        with pytest.raises(InsufficientBalanceError):
            ledger.settle(settlement)

        assert ledger.transfers == transfers_before
        assert ledger.collections == []
        assert ledger.balance_of(BOB, ASSET_A) == 0

    def test_collections_are_summed_per_holder(self, ledger):
        """Two collections that each fit but together do not are rejected."""
        settlement = Settlement(
            collections=[
                Collection(1, FIRST_SHARE_TOKEN, ALICE, 600),
                Collection(1, FIRST_SHARE_TOKEN, ALICE, 600),
            ]
        )
        with pytest.raises(InsufficientBalanceError):
            ledger.settle(settlement)
        assert ledger.balance_of(ALICE, FIRST_SHARE_TOKEN) == 1_000

    def test_error_is_a_ledger_error(self):
        assert issubclass(InsufficientBalanceError, LedgerError)

    def test_empty_settlement_is_falsy(self):
        assert not Settlement()
        assert Settlement(transfers=[Transfer(1, ASSET_A, ALICE, 1)])
