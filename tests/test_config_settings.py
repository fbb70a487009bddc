from decimal import Decimal

from launchpad.config import Settings


def test_defaults(monkeypatch):
    """Planning defaults apply when nothing is configured."""

    for name in ("DEFAULT_SLIPPAGE_PERCENT", "ROUTER_DEADLINE_SECONDS", "SWAP_FEE_BPS", "PORT", "SERVER_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.default_slippage_percent == Decimal("1")
    assert settings.quote_slippage_percent == Decimal("0.5")
    assert settings.router_deadline_seconds == 600
    assert settings.swap_fee_bps == 30


def test_signing_url_alias(monkeypatch):
    """SIGNING_URL is accepted as an alias and trailing slashes are dropped."""

    monkeypatch.delenv("SIGNING_BASE_URL", raising=False)
    monkeypatch.setenv("SIGNING_URL", "https://sign.example.com/")

    settings = Settings(_env_file=None)

    assert settings.resolved_signing_base_url == "https://sign.example.com"


def test_signing_url_falls_back_to_local_port(monkeypatch):
    monkeypatch.delenv("SIGNING_BASE_URL", raising=False)
    monkeypatch.delenv("SIGNING_URL", raising=False)
    monkeypatch.setenv("PORT", "9100")

    settings = Settings(_env_file=None)

    assert settings.resolved_signing_base_url == "http://localhost:9100"


def test_legacy_server_port(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.setenv("SERVER_PORT", "8123")

    assert Settings(_env_file=None).port == 8123


def test_slippage_from_env(monkeypatch):
    monkeypatch.setenv("DEFAULT_SLIPPAGE_PERCENT", "2.5")

    assert Settings(_env_file=None).default_slippage_percent == Decimal("2.5")
