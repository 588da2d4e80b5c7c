"""Tests for arbagent.skills.batch: parsing, nonce sequencing, reporting."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from arbagent.errors import InvalidArguments
from arbagent.skills import execute_tool
from arbagent.skills.batch import (
    ASSET,
    NATIVE,
    USAGE,
    execute_batch,
    parse_batch,
)
from arbagent.skills.results import INVALID_ARGUMENTS, NO_SESSION

from conftest import ADDR_A, ADDR_B, TEST_ADDRESS, TOKEN_ADDR, FakeChain

ACCOUNT = SimpleNamespace(address=TEST_ADDRESS)


# ---------------------------------------------------------------------------
# parse_batch
# ---------------------------------------------------------------------------

class TestParseBatch:
    def test_native_and_asset_items(self, assets):
        assets.register("MTK", TOKEN_ADDR)
        items = parse_batch(f"ETH {ADDR_A} 0.01 TOKEN {ADDR_B} 10 MTK", assets)
        assert [i.kind for i in items] == [NATIVE, ASSET]
        assert items[0].raw_amount == 10 ** 16
        assert items[0].unit == "ETH"
        assert items[1].raw_amount == 10
        assert items[1].asset_address == TOKEN_ADDR
        assert items[1].unit == "MTK"

    def test_markers_are_case_insensitive(self, assets):
        assets.register("MTK", TOKEN_ADDR)
        items = parse_batch(f"eth {ADDR_A} 1 token {ADDR_B} 2 MTK", assets)
        assert len(items) == 2

    def test_extra_whitespace_is_ignored(self, assets):
        items = parse_batch(f"  ETH   {ADDR_A}\n 1  ", assets)
        assert len(items) == 1

    def test_token_decimals_scale_raw_amount(self, assets):
        assets.register("MTK", TOKEN_ADDR)
        items = parse_batch(f"TOKEN {ADDR_B} 1.5 MTK", assets, token_decimals=2)
        assert items[0].raw_amount == 150
        assert items[0].amount == Decimal("1.5")

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input(self, assets, text):
        with pytest.raises(InvalidArguments, match="Invalid format"):
            parse_batch(text, assets)

    def test_unregistered_asset(self, assets):
        with pytest.raises(InvalidArguments) as exc_info:
            parse_batch(f"ETH {ADDR_A} 0.01 TOKEN {ADDR_B} 10 MTK", assets)
        message = str(exc_info.value)
        assert "Item 2" in message
        assert "token MTK not found" in message
        assert "create_token" in message
        assert "Item 1" not in message

    def test_all_errors_reported_together(self, assets):
        with pytest.raises(InvalidArguments) as exc_info:
            parse_batch(f"ETH 0x123 0.01 ETH {ADDR_B} -5 ETH {ADDR_A} 1", assets)
        message = str(exc_info.value)
        assert "Item 1 (ETH to 0x123): invalid address 0x123" in message
        assert "Item 2" in message and "invalid amount -5" in message
        assert "Item 3" not in message
        assert message.endswith(USAGE)

    def test_unknown_marker_stops_walk(self, assets):
        with pytest.raises(InvalidArguments, match="invalid type 'BTC'"):
            parse_batch(f"ETH {ADDR_A} 1 BTC {ADDR_B} 1", assets)

    def test_truncated_native_item(self, assets):
        with pytest.raises(InvalidArguments, match="incomplete ETH transfer"):
            parse_batch(f"ETH {ADDR_A}", assets)

    def test_missing_token_name_at_end(self, assets):
        with pytest.raises(InvalidArguments, match="missing token name"):
            parse_batch(f"TOKEN {ADDR_A} 10", assets)

    def test_missing_token_name_before_next_item(self, assets):
        with pytest.raises(InvalidArguments) as exc_info:
            parse_batch(f"TOKEN {ADDR_A} 10 ETH {ADDR_B} abc", assets)
        message = str(exc_info.value)
        assert "Item 1: missing token name" in message
        # The walk resumes at the ETH marker
        assert "Item 2 (ETH to" in message and "invalid amount abc" in message

    def test_fractional_token_amount_with_zero_decimals(self, assets):
        assets.register("MTK", TOKEN_ADDR)
        with pytest.raises(InvalidArguments, match="more than 0 decimal places"):
            parse_batch(f"TOKEN {ADDR_B} 1.5 MTK", assets)


# ---------------------------------------------------------------------------
# execute_batch
# ---------------------------------------------------------------------------

def _items(assets, text):
    return parse_batch(text, assets)


class TestExecuteBatch:
    def test_nonces_follow_base_nonce(self, assets):
        assets.register("MTK", TOKEN_ADDR)
        chain = FakeChain(nonce=7)
        items = _items(assets, f"ETH {ADDR_A} 0.01 TOKEN {ADDR_B} 10 MTK ETH {ADDR_B} 1")
        record = execute_batch(chain, ACCOUNT, items)

        assert record.base_nonce == 7
        assert [o.nonce for o in record.outcomes] == [7, 8, 9]
        assert chain.call_names() == [
            "get_nonce", "send_native", "send_token_transfer", "send_native",
        ]
        assert chain.calls[2] == ("send_token_transfer", TOKEN_ADDR, ADDR_B, 10, 8)
        assert record.succeeded == 3 and record.failed == 0

    def test_failed_item_does_not_stop_batch(self, assets):
        chain = FakeChain(nonce=7, fail_nonces={8})
        items = _items(assets, f"ETH {ADDR_A} 1 ETH {ADDR_B} 2 ETH {ADDR_A} 3")
        record = execute_batch(chain, ACCOUNT, items)

        assert [o.success for o in record.outcomes] == [True, False, True]
        assert [o.nonce for o in record.outcomes] == [7, 8, 9]
        assert "nonce 8 rejected" in record.outcomes[1].reason
        assert record.outcomes[1].tx_hash is None
        # Nonce read exactly once
        assert chain.call_names().count("get_nonce") == 1

    def test_outcomes_keep_input_order(self, assets):
        chain = FakeChain(nonce=0)
        items = _items(assets, f"ETH {ADDR_B} 2 ETH {ADDR_A} 1")
        record = execute_batch(chain, ACCOUNT, items)
        assert [o.item.recipient for o in record.outcomes] == [ADDR_B, ADDR_A]

    def test_unexpected_exception_is_recorded(self, assets):
        chain = FakeChain()

        def boom(*args, **kwargs):
            raise RuntimeError()

        chain.send_native = boom
        record = execute_batch(chain, ACCOUNT, _items(assets, f"ETH {ADDR_A} 1"))
        assert record.outcomes[0].reason == "RuntimeError"


class TestReport:
    def test_report_format(self, assets):
        assets.register("MTK", TOKEN_ADDR)
        chain = FakeChain(nonce=3, fail_nonces={4})
        items = _items(assets, f"ETH {ADDR_A} 0.010 TOKEN {ADDR_B} 10 MTK")
        record = execute_batch(chain, ACCOUNT, items)
        report = record.report()

        tx_hash = record.outcomes[0].tx_hash
        assert report.startswith(
            "The batch mixed transfer completed with 2 operations:\n\n")
        assert (
            f"1. **ETH Transfer to {ADDR_A}**:\n"
            "   - Amount: 0.01 ETH\n"
            "   - Status: Successful\n"
            f"   - Transaction Link: [View Transaction]"
            f"(https://sepolia.arbiscan.io/tx/{tx_hash})"
        ) in report
        assert (
            f"2. **MTK Transfer to {ADDR_B}**:\n"
            "   - Amount: 10 MTK\n"
            "   - Status: Failed\n"
            "   - Error: Failed to send token transfer: insufficient balance"
        ) in report

    def test_to_dict(self, assets):
        chain = FakeChain(nonce=1, fail_nonces={2})
        record = execute_batch(chain, ACCOUNT,
                               _items(assets, f"ETH {ADDR_A} 1 ETH {ADDR_B} 2"))
        data = record.to_dict()
        assert data["base_nonce"] == 1
        assert data["succeeded"] == 1 and data["failed"] == 1
        assert data["items"][0]["status"] == "success"
        assert "tx_hash" in data["items"][0]
        assert data["items"][1]["status"] == "failure"
        assert data["items"][1]["nonce"] == 2
        assert "error" in data["items"][1]


# ---------------------------------------------------------------------------
# Through the executor
# ---------------------------------------------------------------------------

class TestBatchOperation:
    def test_unregistered_asset_makes_no_chain_call(self, wallet_ctx, chain):
        result = execute_tool(wallet_ctx, "batch_mixed_transfer", {
            "transfers": f"ETH {ADDR_A} 0.01 TOKEN {ADDR_B} 10 MTK",
        })
        assert not result.ok
        assert result.error_type == INVALID_ARGUMENTS
        assert "MTK" in result.message
        assert chain.calls == []

    def test_invalid_batch_without_wallet_is_invalid_arguments(self, ctx, chain):
        result = execute_tool(ctx, "batch_mixed_transfer",
                              {"transfers": "ETH nowhere 1"})
        assert result.error_type == INVALID_ARGUMENTS
        assert chain.calls == []

    def test_valid_batch_without_wallet(self, ctx, chain):
        result = execute_tool(ctx, "batch_mixed_transfer",
                              {"transfers": f"ETH {ADDR_A} 1"})
        assert result.error_type == NO_SESSION
        assert chain.calls == []

    @pytest.mark.parametrize("transfers", [
        f"ETH {ADDR_A} 1e999999",
        f"TOKEN {ADDR_B} 1e999999 MTK",
        f"ETH {ADDR_A} 0.1000000000000000000000000000001",
    ])
    def test_unrepresentable_amounts_rejected(self, wallet_ctx, chain, assets,
                                              transfers):
        assets.register("MTK", TOKEN_ADDR)
        result = execute_tool(wallet_ctx, "batch_mixed_transfer",
                              {"transfers": transfers})
        assert result.error_type == INVALID_ARGUMENTS
        assert "Item 1" in result.message
        assert chain.calls == []

    def test_many_digit_token_amount_sent_exactly(self, wallet_ctx, chain, assets):
        assets.register("MTK", TOKEN_ADDR)
        result = execute_tool(wallet_ctx, "batch_mixed_transfer", {
            "transfers": f"TOKEN {ADDR_B} 12345678901234567890123456789 MTK",
        })
        assert result.ok
        assert ("send_token_transfer", TOKEN_ADDR, ADDR_B,
                12345678901234567890123456789, 7) in chain.calls

    def test_partial_failure_is_reported_as_success(self, wallet_ctx, chain):
        chain.fail_nonces = {chain.nonce + 1}
        result = execute_tool(wallet_ctx, "batch_mixed_transfer", {
            "transfers": f"ETH {ADDR_A} 1 ETH {ADDR_B} 2 ETH {ADDR_A} 3",
        })
        assert result.ok
        assert result.data["succeeded"] == 2
        assert result.data["failed"] == 1
        assert "3 operations" in result.message
