"""
Tests for the duplicate aggregation engine (aggregation.aggregate).

Records are built directly as DuplicatedTransaction so each test controls
heights and argument payloads exactly.
"""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from ledger_reconcile.analytics.aggregation import (
    SendArgument,
    aggregate,
    decode_mint_argument,
    decode_send_argument,
)
from ledger_reconcile.analytics.aliases import AliasResolver
from ledger_reconcile.core.exceptions import MalformedArgumentError, MalformedRecordError
from ledger_reconcile.ingestion.models import DuplicatedTransaction

T0 = datetime(2023, 4, 1, 10, 0, 0)


def _tx(method: str, heights: tuple[int, ...], argument=None) -> DuplicatedTransaction:
    if isinstance(argument, dict):
        argument = json.dumps(argument)
    return DuplicatedTransaction(
        orig_time=T0,
        max_time=T0,
        method=method,
        heights=heights,
        hash=b"\x01\x02",
        argument=argument,
        neighborhood=0,
    )


def _mint(heights, amounts):
    return _tx("tokens.mint", heights, amounts)


def _send(heights, sender, receiver, amount, **extra):
    return _tx("ledger.send", heights, {"from": sender, "to": receiver, "amount": amount, **extra})


# --- Mint ---


def test_mint_example_table_and_totals():
    """heights [100,205,310] with two addresses: canonical 100 excluded, 205 and 310 counted."""
    result = aggregate([_mint((100, 205, 310), {"addr1": "50", "addr2": "30"})])
    assert result.mint == {205: {"addr1": 50, "addr2": 30}, 310: {"addr1": 50, "addr2": 30}}
    assert result.totals_by_address == {"addr1": 100, "addr2": 60}
    assert result.totals_by_height == {205: 80, 310: 80}
    assert result.grand_total == 160


def test_mint_canonical_height_never_contributes():
    records = [
        _mint((10, 20), {"a": "1"}),
        _mint((20, 30, 40), {"a": "2"}),
    ]
    result = aggregate(records)
    assert 10 not in result.mint
    # 20 is canonical for the second record but a duplicate for the first
    assert result.mint[20] == {"a": 1}
    assert result.mint[30] == {"a": 2}
    assert result.mint[40] == {"a": 2}


def test_mint_additions_k_times_m():
    """k addresses x m duplicate heights -> k*m cells, each equal to the parsed amount."""
    amounts = {f"addr{i}": str(i * 10) for i in range(1, 5)}
    heights = (1, 2, 3, 4)
    result = aggregate([_mint(heights, amounts)])
    rows = list(result.iter_mint_rows())
    assert len(rows) == len(amounts) * (len(heights) - 1)
    for height, address, amount in rows:
        assert height in heights[1:]
        assert amount == int(amounts[address])


def test_mint_accumulates_same_height_and_address():
    records = [_mint((1, 5), {"a": "7"}), _mint((2, 5), {"a": "8", "b": "1"})]
    result = aggregate(records)
    assert result.mint == {5: {"a": 15, "b": 1}}


def test_mint_totals_equal_sum_over_heights():
    records = [
        _mint((1, 2, 3), {"x": "5", "y": "1"}),
        _mint((4, 3, 9), {"y": "2", "z": "11"}),
        _mint((0, 2), {"x": "3"}),
    ]
    result = aggregate(records)
    for address, total in result.totals_by_address.items():
        assert total == sum(row.get(address, 0) for row in result.mint.values())
    assert result.grand_total == sum(result.totals_by_height.values())


def test_mint_large_amounts_do_not_wrap():
    big = str(2**64 - 1)
    result = aggregate([_mint((1, 2, 3), {"a": big})])
    assert result.totals_by_address["a"] == 2 * (2**64 - 1)


def test_mint_accepts_integer_amounts():
    assert decode_mint_argument('{"a": 5, "b": "6"}') == {"a": 5, "b": 6}


# --- Send ---


def test_send_same_pair_accumulates_across_heights():
    records = [_send((1, 2), "A", "B", "10"), _send((7, 8, 9), "A", "B", "15")]
    result = aggregate(records)
    assert result.sends == {("A", "B"): 25}
    assert result.send_total == 25


def test_send_counted_once_per_record_regardless_of_heights():
    result = aggregate([_send((1, 2, 3, 4, 5), "A", "B", 10)])
    assert result.sends == {("A", "B"): 10}


def test_send_symbol_ignored():
    result = aggregate([_send((1, 2), "A", "B", "3", symbol="TKN"), _send((1, 2), "A", "B", "4", symbol="OTHER")])
    assert result.sends == {("A", "B"): 7}


def test_send_does_not_touch_mint_tables():
    result = aggregate([_send((1, 2), "A", "B", "3")])
    assert result.mint == {}
    assert result.totals_by_address == {}
    assert result.grand_total == 0


def test_decode_send_argument():
    arg = decode_send_argument('{"from": "A", "to": "B", "amount": "12", "symbol": "TKN"}')
    assert arg == SendArgument(sender="A", receiver="B", amount=12, symbol="TKN")


# --- Omissions ---


def test_single_height_contributes_nothing():
    result = aggregate([_mint((42,), {"a": "1"}), _send((42,), "A", "B", "1")])
    assert result.mint == {}
    assert result.sends == {}
    assert result.mint_records == 1
    assert result.send_records == 1


def test_unknown_method_skipped():
    result = aggregate([_tx("unknown.op", (1, 2, 3), "not even json"), _mint((1, 2), {"a": "1"})])
    assert result.mint == {2: {"a": 1}}
    assert result.sends == {}
    assert result.skipped_records == 1
    assert result.records_seen == 2


def test_empty_input():
    result = aggregate([])
    assert result.mint == {}
    assert result.sends == {}
    assert result.grand_total == 0


# --- Ordering ---


def test_mint_rows_ascending_by_height_then_address():
    records = [
        _mint((0, 300, 100), {"zeta": "1", "alpha": "1"}),
        _mint((0, 200), {"mid": "1", "beta": "2"}),
    ]
    rows = [(h, a) for h, a, _ in aggregate(records).iter_mint_rows()]
    assert rows == sorted(rows)
    assert rows[0] == (100, "alpha")


def test_send_rows_ascending_by_pair():
    records = [_send((1, 2), "C", "A", 1), _send((1, 2), "A", "Z", 1), _send((1, 2), "A", "B", 1)]
    keys = [k for k, _ in aggregate(records).iter_send_rows()]
    assert keys == [("A", "B"), ("A", "Z"), ("C", "A")]


# --- Aliases ---


def test_aliases_never_change_amounts():
    records = [_mint((1, 2, 3), {"a": "5", "b": "6"}), _send((1, 2), "a", "b", "9")]
    plain = aggregate(records)
    aliased = aggregate(records, AliasResolver({"a": "Alice", "b": "Bob", "c": "Carol"}))
    assert plain.mint == aliased.mint
    assert plain.sends == aliased.sends
    assert plain.totals_by_address == aliased.totals_by_address
    assert aliased.aliases.lookup("a") == "Alice"


# --- Failures ---


@pytest.mark.parametrize(
    "argument",
    [None, "not json", '["a", "b"]', '{"a": "ten"}', '{"a": "-1"}', '{"a": -1}', '{"a": true}'],
)
def test_malformed_mint_argument_is_fatal(argument):
    records = [_mint((1, 2), {"ok": "1"}), _tx("tokens.mint", (1, 2), argument)]
    with pytest.raises(MalformedArgumentError) as exc:
        aggregate(records)
    assert exc.value.method == "tokens.mint"
    assert exc.value.index == 1
    assert isinstance(exc.value, MalformedRecordError)


@pytest.mark.parametrize(
    "payload",
    [
        {"to": "B", "amount": "1"},
        {"from": "A", "amount": "1"},
        {"from": "A", "to": "B"},
        {"from": "A", "to": "B", "amount": "1.5"},
        {"from": 1, "to": "B", "amount": "1"},
    ],
)
def test_malformed_send_argument_is_fatal(payload):
    with pytest.raises(MalformedArgumentError) as exc:
        aggregate([_tx("ledger.send", (1, 2), payload)])
    assert exc.value.method == "ledger.send"
    assert exc.value.index == 0


def test_malformed_argument_on_single_height_record_still_fatal():
    with pytest.raises(MalformedArgumentError):
        aggregate([_tx("tokens.mint", (42,), "oops")])


@pytest.mark.parametrize("amount", [" 50 ", "50 ", " 50", "+50", "5 0"])
def test_padded_or_signed_amount_is_fatal(amount):
    """Amounts must be bare digits, exactly as exported."""
    with pytest.raises(MalformedArgumentError):
        decode_mint_argument(json.dumps({"a": amount}))
    with pytest.raises(MalformedArgumentError):
        decode_send_argument(json.dumps({"from": "A", "to": "B", "amount": amount}))
