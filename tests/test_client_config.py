import dataclasses

import pytest
from requests.adapters import HTTPAdapter

from client_config import ClientConfig, build_session, derive_v7_config
from constants import DEFAULT_API_ENDPOINT, DEFAULT_USER_AGENT
from rate_limiter import RateLimiter


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("TE_TOKEN", "TE_AID", "TE_API_ENDPOINT", "TE_USER_AGENT", "TE_RATE_LIMIT", "TE_PROXY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_derive_v7_config_returns_independent_copy(config):
    v6 = dataclasses.replace(config, api_endpoint="https://api.thousandeyes.com/v6", account_group_id="42")

    v7 = derive_v7_config(v6)

    assert v7.api_endpoint == "https://api.thousandeyes.com/v7"
    assert v6.api_endpoint == "https://api.thousandeyes.com/v6"
    assert v7 is not v6
    assert v7.auth_token == v6.auth_token
    assert v7.account_group_id == "42"


def test_config_is_immutable(config):
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.api_endpoint = "https://elsewhere.example.com"


def test_from_env_requires_token(clean_env):
    with pytest.raises(ValueError, match="token"):
        ClientConfig.from_env()


def test_from_env_defaults(clean_env):
    clean_env.setenv("TE_TOKEN", "abc")

    config = ClientConfig.from_env()

    assert config.auth_token == "abc"
    assert config.api_endpoint == DEFAULT_API_ENDPOINT
    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.account_group_id is None
    assert config.limiter is None
    assert config.timeout is None


def test_from_env_reads_variables(clean_env):
    clean_env.setenv("TE_TOKEN", "abc")
    clean_env.setenv("TE_AID", "1234")
    clean_env.setenv("TE_API_ENDPOINT", "https://api.example.com/v6")
    clean_env.setenv("TE_USER_AGENT", "terraform")
    clean_env.setenv("TE_RATE_LIMIT", "4")

    config = ClientConfig.from_env()

    assert config.account_group_id == "1234"
    assert config.api_endpoint == "https://api.example.com/v6"
    assert config.user_agent == "terraform"
    assert isinstance(config.limiter, RateLimiter)
    assert config.limiter.rate == 4.0


def test_arguments_override_environment(clean_env):
    clean_env.setenv("TE_TOKEN", "from-env")
    clean_env.setenv("TE_AID", "1")

    config = ClientConfig.from_env(auth_token="from-arg", account_group_id="2")

    assert config.auth_token == "from-arg"
    assert config.account_group_id == "2"


def test_from_env_rejects_non_numeric_rate(clean_env):
    clean_env.setenv("TE_TOKEN", "abc")
    clean_env.setenv("TE_RATE_LIMIT", "fast")

    with pytest.raises(ValueError, match="TE_RATE_LIMIT"):
        ClientConfig.from_env()


def test_build_session_does_not_retry():
    session = build_session()

    adapter = session.get_adapter("https://api.thousandeyes.com/v7/stream.json")
    assert isinstance(adapter, HTTPAdapter)
    assert adapter.max_retries.total == 0


def test_build_session_with_proxy(monkeypatch):
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:3128")
    monkeypatch.setenv("HTTP_PROXY", "http://proxy.local:3128")

    session = build_session(proxy=True)

    assert session.proxies["https"] == "http://proxy.local:3128"
