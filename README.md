# geecache

A small distributed in-memory cache. Each node keeps a cache that is bounded
by byte size and evicts the least recently used entries first. A
consistent-hash ring decides which peer owns each key. Concurrent requests
for the same key are coalesced, so the backing data source is queried only
once for that key. Peers talk to each other over HTTP. The package uses only
the standard library.

## Library use

```python
from geecache.group import new_group, get_group

db = {"Tom": "630", "Jack": "589", "Sam": "567"}

def load(key):
    if key in db:
        return db[key].encode()
    raise KeyError(f"{key} not exist")

scores = new_group("scores", 2 << 10, load)
print(str(scores.get("Tom")))   # "630", loaded from db
print(str(scores.get("Tom")))   # "630", served from the cache
assert get_group("scores") is scores
```

- `new_group(name, cache_bytes, getter)` creates a `Group` and registers it
  under `name`. A later group with the same name replaces the earlier one.
  `get_group(name)` returns the registered group, or `None`.
- `Group.get(key)` returns a `ByteView`, which is an immutable view of the
  cached bytes. It supports `len()`, `str()` and `byte_slice()`. An empty key
  raises `KeyRequiredError`, which is a `ValueError`. An exception raised by
  the getter reaches the caller, and nothing is cached for that key. If the
  getter returns `None`, the value is stored as empty bytes.
- A `cache_bytes` of `0` means the cache has no size limit.

### Peers

To spread keys across several nodes, create an `HTTPPool` for this node and
register it with the group:

```python
from geecache.httppool import HTTPPool

pool = HTTPPool("http://localhost:8001")
pool.set("http://localhost:8001", "http://localhost:8002", "http://localhost:8003")
scores.register_peers(pool)
pool.serve("localhost", 8001)
```

`register_peers` may be called only once per group. A second call raises
`RuntimeError`.

On a cache miss, the group asks the pool for the owner of the key. The owner
is found on a ring with 50 virtual replicas per peer. If the owner is another
peer, the value is fetched with `HTTPGetter`. Values fetched this way are not
stored in the local cache. If that fetch fails, the failure is logged and the
value is loaded locally through the getter. Values loaded locally are cached.

Peers serve `GET /_geecache/<group>/<key>`. A request returns:

- status 400 if the path has no key part;
- status 404 for an unknown group;
- status 500 when the lookup fails;
- otherwise an `application/octet-stream` body.

The body is produced by `encode_response`. It is a message whose field 1
(length-delimited) holds the value, and `decode_response` reads it back.
`HTTPGetter.get` raises `PeerRequestError` on HTTP errors, on network errors
and on bodies it cannot decode.

`HTTPPool.handle(method, path)` holds the request logic apart from the
server. It returns `(status, content_type, body)`, and raises `ValueError`
when the path lies outside the pool's base path.

### Building blocks

- `geecache.lru.LRUCache(max_bytes, on_evicted=None)` is an LRU cache.
  Each entry's size is the key's UTF-8 length plus `len(value)`. It has
  `add`, `get` (which returns `None` on a miss), `remove_oldest`, `len()`,
  `in` and `nbytes`. The optional callback is called with `(key, value)` for
  each evicted entry.
- `geecache.cache.SyncCache` is a lock-guarded `LRUCache` of `ByteView`s.
- `geecache.consistenthash.HashRing(replicas, hash_fn=None)` is a
  consistent-hash ring. It uses CRC-32 by default. `add(*nodes)` places
  nodes on the ring. `get(key)` returns the owning node, or `None` when the
  ring is empty.
- `geecache.singleflight.CallGroup.do(key, fn)` runs `fn` once for all
  concurrent callers with the same key. Every caller gets the result, or has
  the exception raised.

## Command line

The `geecache` command starts a demo cache node. It serves a `scores` group
backed by a small in-memory table (`Tom`, `Jack`, `Sam`). The node runs on
port 8001, 8002 or 8003, and knows the other two as peers. Any other port is
rejected.

```
geecache --port 8001
geecache --port 8002
geecache --port 8003 --api
```

With `--api` the node also runs a front-end server at
`http://localhost:9999`:

```
$ curl "http://localhost:9999/api?key=Tom"
630
$ curl "http://localhost:9999/api?key=kkk"
kkk not exist
```

## Limits

The cache lives only in memory. Nothing is persisted, and entries leave only
through LRU eviction. The peer list of a pool is fixed by `HTTPPool.set`, and
nodes do not discover one another. The command line only runs the fixed
three-node demo on localhost.