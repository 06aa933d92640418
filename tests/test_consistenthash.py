import zlib

from geecache.consistenthash import HashRing


def _numeric_hash(data):
    return int(data.decode())


def test_hashing():
    ring = HashRing(3, _numeric_hash)
    # Replicas hash to 2, 4, 6, 12, 14, 16, 22, 24, 26.
    ring.add("6", "4", "2")

    cases = {"2": "2", "11": "2", "23": "4", "27": "2"}
    for key, expected in cases.items():
        assert ring.get(key) == expected

    # Adds 8, 18, 28.
    ring.add("8")
    cases["27"] = "8"
    for key, expected in cases.items():
        assert ring.get(key) == expected


def test_empty_ring_returns_none():
    ring = HashRing(3)
    assert ring.get("anything") is None


def test_default_hash_is_crc32():
    ring = HashRing(1)
    ring.add("node")
    # A single node on the ring owns every key.
    assert ring.get("x") == "node"
    assert ring._hash is zlib.crc32


def test_lookup_is_stable():
    ring = HashRing(50)
    nodes = ["http://localhost:8001", "http://localhost:8002", "http://localhost:8003"]
    ring.add(*nodes)
    for key in ("Tom", "Jack", "Sam", "kkk"):
        owner = ring.get(key)
        assert owner in nodes
        assert ring.get(key) == owner


def test_independent_of_add_order():
    nodes = ["a", "b", "c", "d"]
    first = HashRing(10)
    first.add(*nodes)
    second = HashRing(10)
    second.add(*reversed(nodes))
    for i in range(200):
        assert first.get(f"key{i}") == second.get(f"key{i}")