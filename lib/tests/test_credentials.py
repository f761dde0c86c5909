from __future__ import annotations

from qc_client.credentials import MemoryTokenStore, StoredCredentials, resolve_token, token_from_cookie


def test_token_from_cookie_finds_token_between_other_cookies() -> None:
    assert token_from_cookie("foo=bar; token=cookieTok; baz=qux") == "cookieTok"


def test_token_from_cookie_at_start_and_end() -> None:
    assert token_from_cookie("token=first; a=b") == "first"
    assert token_from_cookie("a=b; token=last") == "last"


def test_token_from_cookie_ignores_similar_names() -> None:
    assert token_from_cookie("mytoken=nope; a=b") is None


def test_token_from_cookie_absent_or_malformed() -> None:
    assert token_from_cookie(None) is None
    assert token_from_cookie("") is None
    assert token_from_cookie("token=") is None
    assert token_from_cookie("garbage") is None


def test_resolve_token_prefers_storage_over_cookie() -> None:
    creds = StoredCredentials(MemoryTokenStore("A"))
    assert resolve_token(creds, "token=B") == "A"


def test_resolve_token_falls_back_to_cookie() -> None:
    creds = StoredCredentials(MemoryTokenStore())
    assert resolve_token(creds, "foo=bar; token=cookieTok; baz=qux") == "cookieTok"


def test_empty_stored_token_is_absent() -> None:
    creds = StoredCredentials(MemoryTokenStore(""))
    assert creds.get() is None
    assert resolve_token(creds, None) is None


def test_clear_is_idempotent() -> None:
    store = MemoryTokenStore("tok123")
    creds = StoredCredentials(store)
    creds.clear()
    creds.clear()
    assert store.get() is None


def test_stored_credentials_read_fresh_each_time() -> None:
    store = MemoryTokenStore("one")
    creds = StoredCredentials(store)
    assert creds.get() == "one"
    store.set("two")
    assert creds.get() == "two"
