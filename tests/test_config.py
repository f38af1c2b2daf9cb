import pytest

from fluenthttp import config


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FLUENTHTTP_DEFAULT_TIMEOUT", "12.5")
    monkeypatch.setenv("FLUENTHTTP_VERIFY_SSL_CERTIFICATE", "off")
    monkeypatch.setenv("FLUENTHTTP_USER_AGENT", "tests/1.0")
    defaults = config.reset()
    assert defaults.timeout == 12.5
    assert defaults.verify_ssl_certificate is False
    assert defaults.user_agent == "tests/1.0"


def test_environment_defaults(monkeypatch):
    for name in ("FLUENTHTTP_DEFAULT_TIMEOUT", "FLUENTHTTP_VERIFY_SSL_CERTIFICATE", "FLUENTHTTP_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    defaults = config.reset()
    assert defaults.timeout == config.DEFAULT_TIMEOUT
    assert defaults.verify_ssl_certificate is True
    assert defaults.user_agent.startswith("fluenthttp/")
    assert defaults.headers == {}


def test_invalid_timeout_in_environment(monkeypatch):
    monkeypatch.setenv("FLUENTHTTP_DEFAULT_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        config.reset()


def test_configure_updates_defaults():
    defaults = config.configure(timeout="5", headers={"Accept": "application/json"})
    assert defaults is config.get_defaults()
    assert defaults.timeout == 5.0
    assert defaults.headers == {"Accept": "application/json"}


@pytest.mark.parametrize("timeout", [0, -1, "0"])
def test_configure_rejects_non_positive_timeout(timeout):
    before = config.get_defaults().timeout
    with pytest.raises(ValueError):
        config.configure(timeout=timeout, headers={"X-A": "1"})
    assert config.get_defaults().timeout == before
    assert config.get_defaults().headers == {}


def test_configure_rejects_unknown_options():
    with pytest.raises(ValueError):
        config.configure(retries=3)
