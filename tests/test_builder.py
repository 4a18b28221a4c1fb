from datetime import timedelta

import httpx
import pytest

from exa_client import (
    DEFAULT_TIMEOUT,
    EXA_API_BASE_URL,
    AsyncExa,
    ConfigError,
    Exa,
    ExaClientBuilder,
    InvalidBaseUrlError,
    InvalidTimeoutError,
    MissingCredentialError,
    builder_from_env,
)


def test_build_without_api_key_fails():
    with pytest.raises(MissingCredentialError):
        ExaClientBuilder().build()


@pytest.mark.parametrize("key", ["", "   "])
def test_build_with_blank_api_key_fails(key):
    with pytest.raises(MissingCredentialError):
        ExaClientBuilder().with_api_key(key).build()


def test_defaults_apply_when_only_key_given():
    with ExaClientBuilder().with_api_key("k").build() as exa:
        assert isinstance(exa, Exa)
        assert exa.base_url == EXA_API_BASE_URL
        assert exa.config.timeout == DEFAULT_TIMEOUT
        assert exa.config.api_key == "k"


def test_builder_methods_chain_and_return_builder():
    builder = ExaClientBuilder()
    assert builder.with_api_key("k") is builder
    assert builder.with_base_url("https://example.com") is builder
    assert builder.with_timeout(5) is builder


def test_base_url_trailing_slash_is_stripped():
    config = ExaClientBuilder().with_api_key("k").with_base_url("http://localhost:8080/").config()
    assert config.base_url == "http://localhost:8080"


@pytest.mark.parametrize("url", ["not a valid url", "/search", "ftp://example.com", "https://"])
def test_invalid_base_url(url):
    with pytest.raises(InvalidBaseUrlError) as exc_info:
        ExaClientBuilder().with_api_key("k").with_base_url(url).build()
    assert exc_info.value.url == url
    assert isinstance(exc_info.value, ConfigError)


@pytest.mark.parametrize("timeout", [0, -1, -0.5, timedelta(seconds=0), float("nan"), "10"])
def test_invalid_timeout(timeout):
    with pytest.raises(InvalidTimeoutError):
        ExaClientBuilder().with_api_key("k").with_timeout(timeout).build()


def test_timedelta_timeout_converted_to_seconds():
    config = ExaClientBuilder().with_api_key("k").with_timeout(timedelta(milliseconds=1500)).config()
    assert config.timeout == 1.5


def test_validation_order_credential_first():
    builder = ExaClientBuilder().with_base_url("nope").with_timeout(-1)
    with pytest.raises(MissingCredentialError):
        builder.build()


def test_validation_order_base_url_before_timeout():
    builder = ExaClientBuilder().with_api_key("k").with_base_url("nope").with_timeout(-1)
    with pytest.raises(InvalidBaseUrlError):
        builder.build()


def test_config_repr_hides_api_key():
    config = ExaClientBuilder().with_api_key("super-secret").config()
    assert "super-secret" not in repr(config)


def test_build_async_returns_async_client():
    exa = ExaClientBuilder().with_api_key("k").build_async()
    assert isinstance(exa, AsyncExa)
    assert exa.base_url == EXA_API_BASE_URL


def test_mismatched_http_client_rejected():
    with httpx.Client() as http_client:
        with pytest.raises(TypeError):
            ExaClientBuilder().with_api_key("k").with_http_client(http_client).build_async()


def test_injected_http_client_is_not_closed():
    http_client = httpx.Client()
    exa = ExaClientBuilder().with_api_key("k").with_http_client(http_client).build()
    exa.close()
    assert not http_client.is_closed
    http_client.close()


def test_builder_from_env():
    env = {"EXA_API_KEY": "env-key", "EXA_BASE_URL": "https://proxy.example.com/exa", "EXA_TIMEOUT": "12.5"}
    config = builder_from_env(env).config()
    assert config.api_key == "env-key"
    assert config.base_url == "https://proxy.example.com/exa"
    assert config.timeout == 12.5


def test_builder_from_env_without_key():
    with pytest.raises(MissingCredentialError):
        builder_from_env({}).build()


def test_builder_from_env_bad_timeout():
    with pytest.raises(InvalidTimeoutError):
        builder_from_env({"EXA_API_KEY": "k", "EXA_TIMEOUT": "soon"}).build()


@pytest.mark.parametrize("key", ["clé", "key\nwith-newline", "tab\tkey"])
def test_api_key_must_be_a_valid_header_value(key):
    with pytest.raises(MissingCredentialError):
        ExaClientBuilder().with_api_key(key).build()
