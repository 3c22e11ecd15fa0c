import threading

from mcpd.context_store import ContextStore


def test_get_unknown_client_returns_none():
    store = ContextStore()
    assert store.get("c1", "k") is None


def test_set_then_get():
    store = ContextStore()
    store.set("c1", "user", "alice")
    assert store.get("c1", "user") == "alice"
    assert store.get("c1", "missing") is None


def test_empty_value_is_distinguished_from_missing():
    store = ContextStore()
    store.set("c1", "k", "")
    assert store.get("c1", "k") == ""


def test_set_overwrites():
    store = ContextStore()
    store.set("c1", "k", "one")
    store.set("c1", "k", "two")
    assert store.get("c1", "k") == "two"


def test_get_all_returns_copy():
    store = ContextStore()
    store.set("c1", "k", "v")
    values = store.get_all("c1")
    assert values == {"k": "v"}
    values["k"] = "changed"
    values["new"] = "x"
    assert store.get_all("c1") == {"k": "v"}


def test_get_all_unknown_client():
    assert ContextStore().get_all("nobody") is None


def test_set_multiple_merges():
    store = ContextStore()
    store.set("c1", "a", "1")
    store.set_multiple("c1", {"b": "2", "a": "3"})
    assert store.get_all("c1") == {"a": "3", "b": "2"}


def test_set_multiple_creates_client():
    store = ContextStore()
    store.set_multiple("c2", {"x": "y"})
    assert store.list_clients() == ["c2"]


def test_remove_key():
    store = ContextStore()
    store.set_multiple("c1", {"a": "1", "b": "2"})
    store.remove("c1", "a")
    assert store.get_all("c1") == {"b": "2"}


def test_remove_keeps_client_even_when_empty():
    store = ContextStore()
    store.set("c1", "a", "1")
    store.remove("c1", "a")
    assert store.get_all("c1") == {}
    assert store.list_clients() == ["c1"]


def test_remove_unknown_is_ignored():
    store = ContextStore()
    store.remove("nobody", "k")
    assert store.list_clients() == []


def test_clear_forgets_client():
    store = ContextStore()
    store.set("c1", "a", "1")
    store.set("c2", "a", "1")
    store.clear("c1")
    assert store.get_all("c1") is None
    assert store.list_clients() == ["c2"]


def test_list_clients():
    store = ContextStore()
    for client in ("c1", "c2", "c3"):
        store.set(client, "k", "v")
    assert sorted(store.list_clients()) == ["c1", "c2", "c3"]


def test_query_clients_matches_exact_value():
    store = ContextStore()
    store.set("c1", "room", "lobby")
    store.set("c2", "room", "kitchen")
    store.set("c3", "room", "lobby")
    store.set("c4", "other", "lobby")
    assert sorted(store.query_clients("room", "lobby")) == ["c1", "c3"]


def test_query_clients_no_match():
    store = ContextStore()
    store.set("c1", "room", "lobby")
    assert store.query_clients("room", "attic") == []


def test_concurrent_sets():
    store = ContextStore()

    def worker(n):
        for i in range(100):
            store.set(f"client-{n}", f"k{i}", str(i))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.list_clients()) == 8
    assert all(len(store.get_all(c)) == 100 for c in store.list_clients())