"""
Pytest fixtures for ShopDesk backend tests.

Every test gets a fresh app with its own in-memory store built from the
mock seed data, plus a customer to sell to.
"""

import json

import httpx
import pytest

from shopdesk import create_app
from shopdesk.extensions import get_store
from shopdesk.models import Customer
from shopdesk.seed import build_initial_state
from shopdesk.services.document_intelligence import GeminiAssistant
from shopdesk.store import ShopState, ShopStore


PASSWORD = "123"


def initial_state() -> ShopState:
    """Seed data plus one walk-in customer with no debt."""
    seed = build_initial_state()
    return ShopState(
        employees=seed.employees,
        products=seed.products,
        suppliers=seed.suppliers,
        purchase_orders=seed.purchase_orders,
        customers=(Customer(id="c1", name="Phạm Khách Hàng", phone="0912000111"),),
    )


class FakeParser:
    """Stands in for the Gemini client; returns a fixed draft."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def parse_from_text(self, text):
        self.calls.append(("text", text))
        return self.result

    def parse_from_image(self, data, mime_type):
        self.calls.append(("image", mime_type))
        return self.result


class GeminiStub:
    """MockTransport handler answering every generateContent call with .reply."""

    def __init__(self, reply="Kiểm tra IC nguồn trước."):
        self.reply = reply
        self.status_code = 200
        self.rejected_keys = set()
        self.prompts = []
        self.keys = []

    def __call__(self, request):
        body = json.loads(request.content)
        key = request.headers.get("x-goog-api-key")
        self.prompts.append(body["contents"][0]["parts"][0]["text"])
        self.keys.append(key)
        if key in self.rejected_keys:
            return httpx.Response(400, json={"error": {"message": "API key not valid"}})
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"message": "API key not valid"}})
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": self.reply}]}}]})


@pytest.fixture(scope='function')
def parser():
    return FakeParser()


@pytest.fixture(scope='function')
def gemini():
    return GeminiStub()


@pytest.fixture(scope='function')
def assistant(gemini):
    return GeminiAssistant("test-key", client=httpx.Client(transport=httpx.MockTransport(gemini)))


@pytest.fixture(scope='function')
def app(parser, assistant):
    """Create application for testing."""
    app = create_app(
        initial_state=initial_state(),
        config={'TESTING': True, 'SHOPDESK_LOGIN_PASSWORD': PASSWORD},
        document_parser=parser,
        assistant=assistant,
    )
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def store(app) -> ShopStore:
    return get_store()


@pytest.fixture(scope='function')
def admin(store):
    return store.employees.get("emp1")


@pytest.fixture(scope='function')
def tech(store):
    return store.employees.get("emp2")


@pytest.fixture(scope='function')
def sales(store):
    return store.employees.get("emp3")


@pytest.fixture(scope='function')
def bare_store() -> ShopStore:
    """A store outside any app, for pure service tests."""
    return ShopStore(initial_state())


def get_auth_token(client, username: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client):
    return auth_headers(get_auth_token(client, "admin"))


@pytest.fixture(scope='function')
def tech_headers(client):
    return auth_headers(get_auth_token(client, "tech"))


@pytest.fixture(scope='function')
def sales_headers(client):
    return auth_headers(get_auth_token(client, "sales"))

