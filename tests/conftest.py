"""
Pytest configuration and shared fixtures
"""

import json
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kct_admin.config.settings import Settings, reset_settings
from kct_admin.db.models import Base, Order, OrderItem
from kct_admin.functions import EdgeFunctionClient
from kct_admin.inventory import create_product
from kct_admin.models.product import ProductForm, VariantInput

FUNCTIONS_URL = "http://functions.test"

Responder = Union[Dict[str, Any], List[Any], Callable[[Any], httpx.Response], httpx.Response]


class FunctionStub:
    """
    Canned edge function responses for an httpx.MockTransport.

    Register a payload (or a callable taking the decoded body) per function
    name. A list registered with `sequence` is consumed one call at a time.
    Every call is recorded in `calls`.
    """

    def __init__(self):
        self.responders: Dict[str, List[Responder]] = {}
        self.calls: List[Dict[str, Any]] = []

    def on(self, name: str, payload: Responder, status_code: int = 200) -> None:
        self.responders[name] = [self._wrap(payload, status_code)]

    def sequence(self, name: str, payloads: List[Responder]) -> None:
        self.responders[name] = [self._wrap(p, 200) for p in payloads]

    def calls_to(self, name: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["name"] == name]

    @staticmethod
    def _wrap(payload: Responder, status_code: int) -> Callable[[Any], httpx.Response]:
        if callable(payload):
            return payload
        if isinstance(payload, httpx.Response):
            return lambda body: payload
        return lambda body: httpx.Response(status_code, json=payload)

    def handle(self, request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        body = json.loads(request.content) if request.content else None
        self.calls.append({
            "method": request.method,
            "name": name,
            "body": body,
            "params": dict(request.url.params),
            "headers": dict(request.headers),
        })

        queue = self.responders.get(name)
        if not queue:
            return httpx.Response(404, json={"error": {"message": f"no stub for {name}"}})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        return responder(body)


@pytest.fixture(autouse=True)
def _reset_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SUPABASE_URL=FUNCTIONS_URL,
        SUPABASE_SERVICE_KEY="service-key",
        DATABASE_URL="sqlite://",
        REDIS_URL="redis://localhost:6399/0",
        API_REQUIRE_KEY=False,
        VENDOR_IMPORT_BATCH_SIZE=2,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE VIEW v_vendor_inbox_count AS "
            "SELECT COUNT(*) AS inbox_count FROM v_vendor_inbox "
            "WHERE decision IS NULL OR decision = 'none'"
        ))
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def function_stub() -> FunctionStub:
    return FunctionStub()


@pytest.fixture
def functions(function_stub, settings):
    http_client = httpx.Client(transport=httpx.MockTransport(function_stub.handle))
    client = EdgeFunctionClient(settings=settings, http_client=http_client)
    yield client
    http_client.close()


@pytest.fixture
def make_product(db_session):
    """Create a product through the writer; variants are (sku, quantity) pairs."""

    def _make(
        sku: str = "SUIT-001",
        name: Optional[str] = None,
        category: str = "Suits",
        price: str = "299.99",
        status: str = "active",
        variants: Optional[List[tuple]] = None,
        **fields: Any,
    ):
        form = ProductForm(
            name=name or f"Product {sku}",
            category=category,
            sku=sku,
            price=price,
            status=status,
            variants=[
                VariantInput(sku=variant_sku, inventory_quantity=quantity, price_cents=29999)
                for variant_sku, quantity in (variants or [])
            ],
            **fields,
        )
        return create_product(db_session, form)

    return _make


@pytest.fixture
def make_order(db_session):
    def _make(order_number: str = "KCT-1001", items: Optional[List[dict]] = None, **fields: Any):
        values = {
            "customer_name": "Alex Morgan",
            "customer_email": "alex@example.com",
            "status": "processing",
            "total_amount": Decimal("150.00"),
            "subtotal": Decimal("140.00"),
            "shipping_first_name": "Alex",
            "shipping_last_name": "Morgan",
            "shipping_address_line_1": "123 Main St",
            "shipping_city": "Kalamazoo",
            "shipping_state": "MI",
            "shipping_postal_code": "49007",
            "shipping_country": "US",
        }
        values.update(fields)
        order = Order(order_number=order_number, **values)
        for item in items or []:
            order.items.append(OrderItem(**item))
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order

    return _make
