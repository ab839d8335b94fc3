"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from datetime import date
from fastapi.testclient import TestClient
from inala_ledger.domain.exceptions import RecordsAPIError
from inala_ledger.domain.models import BusinessPeriod, Expense, Payment, Sale

pytestmark = pytest.mark.integration


@pytest.fixture
def march_ledger(client: TestClient) -> TestClient:
    """Store the March 2025 credit sales used across the ledger tests"""
    sales = [
        {"customer_name": "Amy", "total_cents": 20000, "payment_type": "credit", "date": "2025-03-10"},
        {"customer_name": "amy ", "total_cents": 5000, "payment_type": "Credit", "date": "2025-04-02"},
        {"customer_name": "Ben", "total_cents": 12000, "payment_type": "credit", "date": "2025-03-06"},
        {"customer_name": "Ben", "total_cents": 8000, "payment_type": "credit", "date": "2025-02-20"},
        {"customer_name": "Amy", "total_cents": 9900, "payment_type": "cash", "date": "2025-03-12"},
    ]
    for sale in sales:
        response = client.post("/v1/sales", json=sale)
        assert response.status_code == 201
    return client


@pytest.fixture
def mock_records():
    """Documents as the remote records store would return them, already mapped"""
    return {
        "sales": [
            Sale(customer_name="Amy", total_cents=20000, payment_type="credit", date=date(2025, 3, 10), sale_id="s1"),
            Sale(customer_name="Ben", total_cents=4000, payment_type="cash", date=date(2025, 3, 11), sale_id="s2"),
        ],
        "payments": [
            Payment(
                customer_name="Amy",
                amount_cents=5000,
                date=date(2025, 3, 15),
                received_by="Thandi",
                payment_id="p1",
            ),
        ],
        "expenses": [Expense(amount_cents=3000, date=date(2025, 3, 7), category="Beef", expense_id="e1")],
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "inala_ledger_builds_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_creditors_for_period(march_ledger: TestClient):
    """Test GET /v1/creditors for an explicit business period"""
    response = march_ledger.get("/v1/creditors", params={"period": "2025-03"})

    assert response.status_code == 200
    data = response.json()
    assert data["period"]["key"] == "2025-03"
    assert data["period"]["display_name"] == "March 2025"
    assert data["totals"]["total_clients"] == 2
    assert data["totals"]["clients_with_debt"] == 2
    assert data["totals"]["total_outstanding_cents"] == 37000

    # Largest balance first; spellings of Amy merged
    amy, ben = data["customers"]
    assert amy["customer_key"] == "amy"
    assert amy["total_credit_cents"] == 25000
    assert amy["transaction_count"] == 2
    assert amy["last_purchase"] == "2025-04-02"
    assert ben["outstanding_cents"] == 12000


def test_creditors_default_to_current_period(client: TestClient):
    today = date.today().isoformat()
    client.post(
        "/v1/sales",
        json={"customer_name": "Amy", "total_cents": 1000, "payment_type": "credit", "date": today},
    )

    data = client.get("/v1/creditors").json()

    assert data["all_periods"] is False
    assert [c["name"] for c in data["customers"]] == ["Amy"]


def test_creditors_all_periods(march_ledger: TestClient):
    data = march_ledger.get("/v1/creditors", params={"all_periods": True}).json()

    assert data["period"] is None
    assert data["totals"]["total_outstanding_cents"] == 45000


def test_creditors_invalid_period(client: TestClient):
    response = client.get("/v1/creditors", params={"period": "2025-13"})
    assert response.status_code == 422


def test_record_payment(march_ledger: TestClient):
    """Test POST /v1/payments reduces the outstanding balance"""
    response = march_ledger.post(
        "/v1/payments",
        json={
            "customer_name": "AMY",
            "amount_cents": 5000,
            "date": "2025-03-15",
            "payment_method": "cash",
            "received_by": "Thandi",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["customer_name"] == "Amy"
    assert data["applies_to_period"] == "2025-03"
    assert data["outstanding_before_cents"] == 25000
    assert data["outstanding_after_cents"] == 20000

    ledger = march_ledger.get("/v1/creditors", params={"period": "2025-03"}).json()
    amy = next(c for c in ledger["customers"] if c["customer_key"] == "amy")
    assert amy["total_paid_cents"] == 5000
    assert amy["outstanding_cents"] == 20000


def test_payment_pinned_to_previous_period(march_ledger: TestClient):
    """A March payment settling February debt clears February only"""
    response = march_ledger.post(
        "/v1/payments",
        json={
            "customer_name": "Ben",
            "amount_cents": 8000,
            "date": "2025-03-08",
            "applies_to_period": "2025-02",
            "received_by": "Sipho",
        },
    )
    assert response.status_code == 201
    assert response.json()["outstanding_after_cents"] == 0

    february = march_ledger.get("/v1/creditors", params={"period": "2025-02", "status": "paid"}).json()
    assert [c["customer_key"] for c in february["customers"]] == ["ben"]

    march = march_ledger.get("/v1/creditors", params={"period": "2025-03"}).json()
    ben = next(c for c in march["customers"] if c["customer_key"] == "ben")
    assert ben["total_paid_cents"] == 0


def test_overpayment_rejected(march_ledger: TestClient):
    response = march_ledger.post(
        "/v1/payments",
        json={"customer_name": "Amy", "amount_cents": 30000, "date": "2025-03-15", "received_by": "Thandi"},
    )
    assert response.status_code == 422
    assert "exceeds outstanding balance" in response.json()["detail"]


def test_payment_for_unknown_customer(march_ledger: TestClient):
    response = march_ledger.post(
        "/v1/payments",
        json={"customer_name": "Zed", "amount_cents": 100, "date": "2025-03-15", "received_by": "Thandi"},
    )
    assert response.status_code == 404


@pytest.mark.parametrize("field", ["customer_name", "received_by"])
def test_payment_blank_names_rejected(march_ledger: TestClient, field: str):
    body = {"customer_name": "Amy", "amount_cents": 100, "date": "2025-03-15", "received_by": "Thandi"}
    body[field] = "   "

    response = march_ledger.post("/v1/payments", json=body)

    assert response.status_code == 422


def test_sale_blank_customer_rejected(client: TestClient):
    response = client.post(
        "/v1/sales",
        json={"customer_name": "  ", "total_cents": 1000, "payment_type": "credit", "date": "2025-03-10"},
    )

    assert response.status_code == 422
    assert client.get("/v1/creditors", params={"all_periods": True}).json()["customers"] == []


def test_payment_invalid_period(march_ledger: TestClient):
    response = march_ledger.post(
        "/v1/payments",
        json={
            "customer_name": "Amy",
            "amount_cents": 100,
            "date": "2025-03-15",
            "applies_to_period": "2025-14",
            "received_by": "Thandi",
        },
    )
    assert response.status_code == 422


def test_creditor_detail(march_ledger: TestClient):
    response = march_ledger.get("/v1/creditors/AMY", params={"period": "2025-03"})

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Amy"
    assert sorted(t["total_cents"] for t in data["transactions"]) == [5000, 20000]
    assert data["payments"] == []


def test_creditor_detail_not_found(march_ledger: TestClient):
    response = march_ledger.get("/v1/creditors/Zed", params={"period": "2025-03"})
    assert response.status_code == 404


def test_rename_customer(march_ledger: TestClient):
    response = march_ledger.put("/v1/customers/AMY/name", json={"new_name": "Amy Mokoena"})

    assert response.status_code == 200
    data = response.json()
    assert data["sales_updated"] == 3
    assert data["payments_updated"] == 0

    ledger = march_ledger.get("/v1/creditors", params={"period": "2025-03"}).json()
    assert "amy mokoena" in [c["customer_key"] for c in ledger["customers"]]


def test_rename_unknown_customer(client: TestClient):
    response = client.put("/v1/customers/Nobody/name", json={"new_name": "Somebody"})
    assert response.status_code == 404


def test_rename_to_blank_name_rejected(march_ledger: TestClient):
    response = march_ledger.put("/v1/customers/Amy/name", json={"new_name": " "})
    assert response.status_code == 422


def test_collection_report(march_ledger: TestClient):
    march_ledger.post(
        "/v1/payments",
        json={
            "customer_name": "Ben",
            "amount_cents": 8000,
            "date": "2025-03-08",
            "applies_to_period": "2025-02",
            "received_by": "Sipho",
        },
    )
    march_ledger.post(
        "/v1/payments",
        json={"customer_name": "Amy", "amount_cents": 5000, "date": "2025-03-15", "received_by": "Thandi"},
    )

    data = march_ledger.get("/v1/reports/collections", params={"period": "2025-03"}).json()

    assert data["total_collected_cents"] == 13000
    assert [c["name"] for c in data["collectors"]] == ["Sipho", "Thandi"]
    ben = data["collectors"][0]["customers"][0]
    assert ben["periods"][0]["period"]["key"] == "2025-02"
    assert [p["total_cents"] for p in ben["purchases"]] == [8000]


def test_overview_report(march_ledger: TestClient):
    march_ledger.post("/v1/expenses", json={"amount_cents": 4000, "date": "2025-03-07", "category": "Beef"})

    business = march_ledger.get("/v1/reports/overview", params={"period": "2025-03"}).json()
    calendar = march_ledger.get("/v1/reports/overview", params={"period": "2025-03", "calendar": True}).json()

    assert business["total_sales_cents"] == 46900
    assert business["net_profit_cents"] == 42900
    # 2 April drops out of calendar March
    assert calendar["total_sales_cents"] == 41900
    assert calendar["calendar"] is True


def test_month_comparison(client: TestClient):
    response = client.get("/v1/reports/month-comparison", params={"months": 3})

    assert response.status_code == 200
    months = response.json()["months"]
    assert len(months) == 3
    today = date.today()
    assert months[-1]["period"]["key"] == BusinessPeriod(month=today.month, year=today.year).key


def test_month_comparison_range(client: TestClient):
    assert client.get("/v1/reports/month-comparison", params={"months": 0}).status_code == 422


@patch("inala_ledger.infrastructure.clients.records.RecordsClient.fetch_expenses", new_callable=AsyncMock)
@patch("inala_ledger.infrastructure.clients.records.RecordsClient.fetch_payments", new_callable=AsyncMock)
@patch("inala_ledger.infrastructure.clients.records.RecordsClient.fetch_sales", new_callable=AsyncMock)
def test_sync_imports_records(
    mock_sales: AsyncMock,
    mock_payments: AsyncMock,
    mock_expenses: AsyncMock,
    client: TestClient,
    mock_records: dict,
):
    """Test POST /v1/sync imports once and skips known records on repeat"""
    mock_sales.return_value = mock_records["sales"]
    mock_payments.return_value = mock_records["payments"]
    mock_expenses.return_value = mock_records["expenses"]

    first = client.post("/v1/sync")
    second = client.post("/v1/sync")

    assert first.status_code == 200
    assert first.json() == {"sales_imported": 2, "payments_imported": 1, "expenses_imported": 1}
    assert second.json() == {"sales_imported": 0, "payments_imported": 0, "expenses_imported": 0}

    ledger = client.get("/v1/creditors", params={"period": "2025-03"}).json()
    assert ledger["customers"][0]["outstanding_cents"] == 15000


@patch("inala_ledger.infrastructure.clients.records.RecordsClient.fetch_sales", new_callable=AsyncMock)
def test_sync_records_store_unavailable(mock_sales: AsyncMock, client: TestClient):
    """Test POST /v1/sync returns 503 and writes nothing when the store fails"""
    mock_sales.side_effect = RecordsAPIError("Records API unavailable after 3 attempts")

    response = client.post("/v1/sync")

    assert response.status_code == 503
    assert client.get("/v1/creditors", params={"all_periods": True}).json()["customers"] == []
