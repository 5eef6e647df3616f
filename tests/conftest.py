"""
Shared fixtures.

The app runs against an in-memory SQLite database. The Razorpay client and
the mailer are the real classes wired to ``httpx.MockTransport`` stubs, so
requests they would send are recorded instead of leaving the process.
"""
import itertools
import json
from typing import Any, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campaign_desk.database import get_db, init_db
from campaign_desk.main import app
from campaign_desk.services import campaign_service, catalog_service
from campaign_desk.services.auth_service import ADMIN, CLIENT, get_auth_service
from campaign_desk.services.email_service import EmailService
from campaign_desk.services.pricing_service import ActionLine
from campaign_desk.services.razorpay_service import RazorpayService, compute_signature

KEY_ID = "rzp_test_key"
KEY_SECRET = "rzp_test_secret"
PASSWORD = "correct-horse-1"


# ====================
# External service stubs
# ====================


class GatewayStub:
    """Razorpay API stand-in: records orders and serves payment statuses."""

    def __init__(self):
        self.orders: List[Dict[str, Any]] = []
        self.payment_statuses: Dict[str, str] = {}
        self.fail_with: int = 0
        self._ids = itertools.count(1)
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"error": {"description": "stubbed failure"}})

        if request.method == "POST" and request.url.path == "/v1/orders":
            body = json.loads(request.content)
            order = {
                "id": f"order_{next(self._ids):04d}",
                "entity": "order",
                "amount": body["amount"],
                "currency": body["currency"],
                "receipt": body["receipt"],
                "status": "created",
            }
            self.orders.append(order)
            return httpx.Response(200, json=order)

        if request.method == "GET" and request.url.path.startswith("/v1/payments/"):
            payment_id = request.url.path.rsplit("/", 1)[-1]
            status = self.payment_statuses.get(payment_id, "captured")
            return httpx.Response(200, json={"id": payment_id, "entity": "payment", "status": status})

        return httpx.Response(404, json={"error": {"description": "not found"}})


class MailStub:
    """Mail API stand-in recording every accepted message."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.sent.append(json.loads(request.content))
        return httpx.Response(200, json={"id": f"email_{len(self.sent)}"})

    def subjects(self) -> List[str]:
        return [message["subject"] for message in self.sent]


def sign(order_id: str, payment_id: str) -> str:
    return compute_signature(KEY_SECRET, order_id, payment_id)


# ====================
# Database
# ====================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# ====================
# Collaborators
# ====================


@pytest.fixture
def gateway_stub():
    return GatewayStub()


@pytest.fixture
def gateway(gateway_stub):
    return RazorpayService(KEY_ID, KEY_SECRET, transport=gateway_stub.transport)


@pytest.fixture
def mail_stub():
    return MailStub()


@pytest.fixture
def email_service(mail_stub):
    return EmailService(
        api_url="https://mail.test",
        api_key="test-mail-key",
        from_address="Campaign Desk <noreply@example.com>",
        support_address="care@example.com",
        transport=mail_stub.transport,
    )


# ====================
# HTTP client
# ====================


@pytest.fixture
def api(session_factory, gateway, email_service):
    """TestClient bound to the test database and stubbed collaborators."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.payment_gateway = gateway
    app.state.email_service = email_service

    yield TestClient(app)

    app.dependency_overrides.clear()


# ====================
# Data factories
# ====================


@pytest.fixture
def make_client(db_session):
    counter = itertools.count(1)

    def _make(first_name="Ada", last_name="Lovelace", email=None, password=PASSWORD):
        email = email or f"client{next(counter)}@example.com"
        return get_auth_service().register_client(db_session, first_name, last_name, email, password)

    return _make


@pytest.fixture
def make_service(db_session):
    def _make(heading="Instagram Growth", description="Organic engagement", contents=None):
        if contents is None:
            contents = [("100 Likes", "5.00"), ("50 Followers", "2.50")]
        return catalog_service.create_service(
            db_session,
            heading=heading,
            description=description,
            contents=[{"key": key, "value": value} for key, value in contents],
        )

    return _make


@pytest.fixture
def make_campaign(db_session):
    def _make(client, service, quantities=(3,), link="https://instagram.com/p/abc"):
        lines = [
            ActionLine(content_id=service.contents[index].content_id, quantity=quantity)
            for index, quantity in enumerate(quantities)
        ]
        return campaign_service.create_campaign(db_session, client.id, service.id, link, lines)

    return _make


@pytest.fixture
def client_headers():
    def _headers(client) -> Dict[str, str]:
        token = get_auth_service().create_access_token(client.id, client.email, CLIENT)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(db_session):
    return get_auth_service().create_admin(db_session, "admin@example.com", PASSWORD)


@pytest.fixture
def admin_headers(admin):
    token = get_auth_service().create_access_token(admin.id, admin.email, ADMIN)
    return {"Authorization": f"Bearer {token}"}
