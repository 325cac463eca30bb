"""
Tests for AliasResolver lookup and display helpers.
"""

from __future__ import annotations

from ledger_reconcile.analytics.aliases import AliasResolver


def test_lookup_and_label():
    resolver = AliasResolver({"addr1": "Treasury"})
    assert resolver.lookup("addr1") == "Treasury"
    assert resolver.lookup("addr2") is None
    assert resolver.label("addr1") == "Treasury"
    assert resolver.label("addr2") == ""


def test_empty_resolver():
    """No aliases file: every lookup is absent and labels are empty."""
    resolver = AliasResolver()
    assert len(resolver) == 0
    assert resolver.lookup("anything") is None
    assert resolver.label("anything") == ""
    assert resolver.annotate("anything") == "anything"


def test_annotate_inline():
    resolver = AliasResolver({"A": "Alice"})
    assert resolver.annotate("A") == "A (Alice)"
    assert resolver.annotate("B") == "B"


def test_iteration_is_sorted():
    resolver = AliasResolver({"zz": "Z", "aa": "A", "mm": "M"})
    assert [address for address, _ in resolver] == ["aa", "mm", "zz"]
    assert "mm" in resolver


def test_source_mapping_changes_do_not_leak():
    source = {"a": "Alice"}
    resolver = AliasResolver(source)
    source["b"] = "Bob"
    assert resolver.lookup("b") is None
