import pytest
from fastapi.testclient import TestClient

from checkout.config import Settings
from checkout.main import create_app, run
from checkout.models import Order


def test_settings_from_env(monkeypatch):
    monkeypatch.setattr("checkout.config.load_dotenv", lambda **kwargs: False)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./checkout.db")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_env")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_env")
    monkeypatch.setenv("CHECKOUT_CURRENCY", "USD")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://shop.example")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///./checkout.db"
    assert settings.stripe_secret_key == "sk_test_env"
    assert settings.currency == "usd"
    assert settings.cors_origins == ["http://localhost:3000", "https://shop.example"]
    assert settings.port == 8080
    assert settings.success_url == "http://localhost:3000/success"
    settings.validate()


def test_settings_defaults():
    settings = Settings()

    assert settings.currency == "inr"
    assert settings.port == 7000
    assert settings.cors_origins == ["*"]


@pytest.mark.parametrize("missing", ["database_url", "stripe_secret_key", "stripe_webhook_secret"])
def test_validate_requires_secrets(settings, missing):
    setattr(settings, missing, None)

    with pytest.raises(RuntimeError, match="is not set"):
        settings.validate()


def test_validate_rejects_bad_currency(settings):
    settings.currency = "rupees"

    with pytest.raises(RuntimeError, match="CHECKOUT_CURRENCY"):
        settings.validate()


def test_app_refuses_to_start_without_webhook_secret(settings):
    settings.stripe_webhook_secret = ""
    app = create_app(settings)

    with pytest.raises(RuntimeError, match="STRIPE_WEBHOOK_SECRET"):
        with TestClient(app):
            pass


def test_configured_currency_flows_into_orders(settings, mocker):
    settings.currency = "jpy"
    mock_session = mocker.Mock()
    mock_session.id = "cs_jpy"
    create = mocker.patch("stripe.checkout.Session.create", return_value=mock_session)

    with TestClient(create_app(settings)) as client:
        response = client.post(
            "/api/create-checkout-session",
            json={"email": "a@b.com", "products": [{"dish": "Ramen", "price": 900, "qnty": 2}]},
        )
        assert response.status_code == 200

        db = client.app.state.session_factory()
        order = db.query(Order).filter_by(stripe_session_id="cs_jpy").one()
        assert order.currency == "jpy"
        assert order.amount == 1800
        db.close()

    assert create.call_args.kwargs["line_items"][0]["price_data"]["unit_amount"] == 900


def test_create_app_with_settings_does_not_read_env(settings, mocker):
    load_dotenv = mocker.patch("checkout.config.load_dotenv")

    app = create_app(settings)

    assert app.state.settings is settings
    load_dotenv.assert_not_called()


def test_run_builds_app_from_env(settings, mocker):
    settings.port = 8123
    mocker.patch("checkout.main.Settings.from_env", return_value=settings)
    uvicorn_run = mocker.patch("checkout.main.uvicorn.run")

    run()

    app = uvicorn_run.call_args.args[0]
    assert app.state.settings is settings
    assert uvicorn_run.call_args.kwargs == {"host": "0.0.0.0", "port": 8123}
