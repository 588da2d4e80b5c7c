"""Tests for arbagent.assets: the named asset registry."""

import threading

from arbagent.assets import AssetRegistry

from conftest import ADDR_A, ADDR_B


def test_register_and_resolve():
    registry = AssetRegistry()
    registry.register("MTK", ADDR_A)
    assert registry.resolve("MTK") == ADDR_A
    assert "MTK" in registry
    assert len(registry) == 1


def test_unknown_name_resolves_to_none():
    assert AssetRegistry().resolve("NOPE") is None


def test_names_are_case_sensitive():
    registry = AssetRegistry()
    registry.register("MTK", ADDR_A)
    assert registry.resolve("mtk") is None


def test_reregister_last_writer_wins():
    registry = AssetRegistry()
    registry.register("MTK", ADDR_A)
    registry.register("MTK", ADDR_B)
    assert registry.resolve("MTK") == ADDR_B
    assert len(registry) == 1


def test_items_is_a_snapshot_in_insertion_order():
    registry = AssetRegistry()
    registry.register("AAA", ADDR_A)
    registry.register("BBB", ADDR_B)
    snapshot = registry.items()
    registry.register("CCC", ADDR_A)
    assert snapshot == [("AAA", ADDR_A), ("BBB", ADDR_B)]


def test_concurrent_registration():
    registry = AssetRegistry()

    def worker(n):
        for i in range(50):
            registry.register(f"T{n}-{i}", ADDR_A)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry) == 400
