import pytest
from fastapi.testclient import TestClient

from checkout.config import Settings
from checkout.main import create_app

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test_checkout.db'}",
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client):
    session = client.app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def mock_session_create(mocker):
    mock_session = mocker.Mock()
    mock_session.id = "cs_test_123"
    return mocker.patch("stripe.checkout.Session.create", return_value=mock_session)
