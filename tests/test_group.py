import pytest

from geecache.byteview import ByteView
from geecache.group import Group, KeyRequiredError, get_group, new_group

DB = {
    "Tom": "630",
    "Jack": "589",
    "Sam": "567",
}


def _counting_group(name, counts):
    def getter(key):
        if key in DB:
            counts[key] = counts.get(key, 0) + 1
            return DB[key].encode()
        raise LookupError(f"{key} not exist")

    return new_group(name, 2 << 10, getter)


class FakePeer:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def get(self, group, key):
        self.calls.append((group, key))
        if self.fail:
            raise ConnectionError("peer down")
        return b"remote:" + key.encode()


class FakePicker:
    def __init__(self, peer):
        self.peer = peer

    def pick_peer(self, key):
        return self.peer


def test_getter_callable_is_used_for_loading():
    group = new_group("echo", 2 << 10, lambda key: key.encode())
    assert group.get("key").byte_slice() == b"key"


def test_get_loads_each_key_once():
    counts = {}
    group = _counting_group("scores", counts)
    for key, value in DB.items():
        assert str(group.get(key)) == value
        assert str(group.get(key)) == value
        assert counts[key] == 1


def test_get_unknown_key_raises():
    group = _counting_group("scores", {})
    with pytest.raises(LookupError, match="unknown not exist"):
        group.get("unknown")


def test_get_empty_key_raises():
    group = _counting_group("scores", {})
    with pytest.raises(KeyRequiredError, match="key is required"):
        group.get("")


def test_get_group():
    new_group("scores", 2 << 10, lambda key: None)
    group = get_group("scores")
    assert group is not None
    assert group.name == "scores"
    assert get_group("scores111") is None


def test_new_group_requires_getter():
    with pytest.raises(TypeError):
        Group("broken", 2 << 10, None)


def test_getter_returning_none_gives_empty_view():
    group = new_group("empty", 2 << 10, lambda key: None)
    view = group.get("anything")
    assert len(view) == 0
    assert view == ByteView(b"")


def test_register_peers_twice_raises():
    group = _counting_group("peers-twice", {})
    picker = FakePicker(None)
    group.register_peers(picker)
    assert group.peers is picker
    with pytest.raises(RuntimeError):
        group.register_peers(picker)


def test_value_fetched_from_peer_is_not_cached_locally():
    counts = {}
    group = _counting_group("peer-test", counts)
    peer = FakePeer()
    group.register_peers(FakePicker(peer))
    assert group.get("Tom") == ByteView(b"remote:Tom")
    assert group.get("Tom") == ByteView(b"remote:Tom")
    assert peer.calls == [("peer-test", "Tom"), ("peer-test", "Tom")]
    assert counts == {}


def test_peer_failure_falls_back_to_local():
    counts = {}
    group = _counting_group("peer-fail", counts)
    peer = FakePeer(fail=True)
    group.register_peers(FakePicker(peer))
    assert str(group.get("Tom")) == "630"
    assert str(group.get("Tom")) == "630"
    assert counts == {"Tom": 1}
    assert peer.calls == [("peer-fail", "Tom")]


def test_picker_declining_uses_local_getter():
    counts = {}
    group = _counting_group("peer-none", counts)
    group.register_peers(FakePicker(None))
    assert str(group.get("Jack")) == "589"
    assert counts == {"Jack": 1}