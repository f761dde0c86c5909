from __future__ import annotations

import httpx
import pytest

from qc_client import AuthError, QcClient, StoredCredentials
from qc_cli import config
from qc_cli.auth_state import ConfigTokenStore, resolve_auth_context


@pytest.fixture
def cfg_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    return tmp_path


def test_store_reads_file_on_every_get(cfg_dir) -> None:
    store = ConfigTokenStore()
    assert store.get() is None

    store.set("tok123")
    assert store.get() == "tok123"

    cfg = config.load_config()
    cfg.auth.token = "rotated"
    config.save_config(cfg)
    assert store.get() == "rotated"


def test_delete_is_noop_when_empty(cfg_dir) -> None:
    store = ConfigTokenStore()
    store.delete()
    assert not cfg_dir.joinpath("config.toml").exists()


def test_auth_context_follows_token(cfg_dir) -> None:
    assert resolve_auth_context().state == "no_token"
    ConfigTokenStore().set("tok123")
    assert resolve_auth_context().state == "authed"


def test_401_clears_token_in_config_file(cfg_dir) -> None:
    config.save_config(config.AppConfig(base_url="http://qc.test", auth=config.AuthConfig(token="tok123")))
    seen = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(401, json={"success": False, "error": "Not authorized to access this route"})

    client = QcClient(
        "http://qc.test",
        StoredCredentials(ConfigTokenStore()),
        transport=httpx.MockTransport(_handler),
    )
    try:
        with pytest.raises(AuthError):
            client.defects_list()
    finally:
        client.close()

    assert seen == ["Bearer tok123"]
    loaded = config.load_config()
    assert loaded.auth.token == ""
    assert loaded.base_url == "http://qc.test"
