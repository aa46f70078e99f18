"""Tests for the REST API."""

import pytest


@pytest.fixture
def api_user(api_client):
    response = api_client.post(
        "/users", json={"name": "Ana", "email": "ana@example.com", "password": "secret"}
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def api_transactions(api_client, api_user):
    rows = [
        {"type": "income", "amount": 1000, "description": "Pay", "category": "Salary", "date": "2024-01-05"},
        {"type": "expense", "amount": 300, "description": "Market", "category": "Food", "date": "2024-01-10"},
        {"type": "expense", "amount": "200", "description": "Dinner", "category": "Food", "date": "2024-02-01T18:30:00.000Z"},
    ]
    created = []
    for row in rows:
        response = api_client.post("/transactions", json={"userId": api_user["id"], **row})
        assert response.status_code == 201
        created.append(response.json())
    return created


@pytest.fixture
def api_goal(api_client, api_user):
    response = api_client.post(
        "/goals",
        json={
            "userId": api_user["id"],
            "title": "Vacation",
            "targetAmount": 1000,
            "currentAmount": 800,
            "deadline": "2024-06-01",
        },
    )
    assert response.status_code == 201
    return response.json()


def test_index_and_health(api_client):
    assert api_client.get("/health").json() == {"status": "ok"}
    assert "endpoints" in api_client.get("/").json()


def test_create_user_hides_password(api_user):
    assert api_user["name"] == "Ana"
    assert api_user["email"] == "ana@example.com"
    assert "password" not in api_user
    assert "passwordHash" not in api_user
    assert "createdAt" in api_user


def test_duplicate_email_is_bad_request(api_client, api_user):
    response = api_client.post(
        "/users", json={"name": "Copy", "email": "ana@example.com", "password": "x"}
    )
    assert response.status_code == 400
    assert "already in use" in response.json()["error"]


def test_missing_field_is_bad_request(api_client):
    response = api_client.post("/users", json={"name": "No email"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_user_crud(api_client, api_user):
    user_id = api_user["id"]
    assert api_client.get(f"/users/{user_id}").json()["name"] == "Ana"

    response = api_client.put(f"/users/{user_id}", json={"name": "Ana Souza"})
    assert response.status_code == 200
    assert response.json()["name"] == "Ana Souza"

    assert [u["id"] for u in api_client.get("/users").json()] == [user_id]

    response = api_client.delete(f"/users/{user_id}")
    assert response.status_code == 204
    assert response.content == b""

    response = api_client.get(f"/users/{user_id}")
    assert response.status_code == 404
    assert response.json() == {"error": f"User {user_id} not found"}


def test_transaction_response_shape(api_transactions):
    txn = api_transactions[2]
    assert txn["amount"] == 200.0
    assert txn["date"] == "2024-02-01"
    assert txn["type"] == "expense"
    assert set(txn) == {
        "id", "userId", "type", "amount", "description", "category", "date", "createdAt"
    }


@pytest.mark.parametrize(
    "override",
    [
        {"amount": 0},
        {"amount": -10},
        {"amount": "lots"},
        {"amount": "1e30"},
        {"amount": 10000000000},
        {"type": "transfer"},
        {"description": ""},
        {"date": "not a date"},
    ],
)
def test_create_transaction_validation(api_client, api_user, override):
    payload = {
        "userId": api_user["id"],
        "type": "expense",
        "amount": 10,
        "description": "Coffee",
        "category": "Food",
        "date": "2024-01-02",
    }
    payload.update(override)
    response = api_client.post("/transactions", json=payload)
    assert response.status_code == 400
    assert response.json()["error"]


def test_create_transaction_unknown_user(api_client):
    response = api_client.post(
        "/transactions",
        json={
            "userId": 999,
            "type": "expense",
            "amount": 10,
            "description": "Coffee",
            "category": "Food",
            "date": "2024-01-02",
        },
    )
    assert response.status_code == 404


def test_list_transactions_requires_user_id(api_client):
    response = api_client.get("/transactions")
    assert response.status_code == 400


def test_list_and_filter_transactions(api_client, api_user, api_transactions):
    user_id = api_user["id"]
    listed = api_client.get("/transactions", params={"userId": user_id}).json()
    assert [t["description"] for t in listed] == ["Dinner", "Market", "Pay"]

    food = api_client.get("/transactions/category/Food", params={"userId": user_id}).json()
    assert len(food) == 2

    income = api_client.get("/transactions/type/income", params={"userId": user_id}).json()
    assert [t["description"] for t in income] == ["Pay"]

    january = api_client.get(
        "/transactions",
        params={"userId": user_id, "startDate": "2024-01-01", "endDate": "2024-01-31"},
    ).json()
    assert len(january) == 2


def test_list_by_unknown_type(api_client, api_user):
    response = api_client.get("/transactions/type/gift", params={"userId": api_user["id"]})
    assert response.status_code == 400


def test_summary_for_current_month(api_client, api_user, api_transactions):
    response = api_client.get(
        "/transactions/summary", params={"userId": api_user["id"], "period": "month"}
    )
    assert response.status_code == 200
    assert response.json() == {
        "period": "month",
        "totalIncome": 1000.0,
        "totalExpenses": 300.0,
        "balance": 700.0,
        "transactionCount": 2,
        "expensesByCategory": [{"category": "Food", "amount": 300.0, "percentage": 100.0}],
    }


def test_summary_with_date_range(api_client, api_user, api_transactions):
    summary = api_client.get(
        "/transactions/summary",
        params={"userId": api_user["id"], "startDate": "2024-02-01"},
    ).json()
    assert summary["totalExpenses"] == 200.0
    assert summary["balance"] == -200.0


def test_summary_unknown_period(api_client, api_user):
    response = api_client.get(
        "/transactions/summary", params={"userId": api_user["id"], "period": "decade"}
    )
    assert response.status_code == 400


def test_update_and_delete_transaction(api_client, api_user, api_transactions):
    txn_id = api_transactions[1]["id"]
    response = api_client.put(f"/transactions/{txn_id}", json={"amount": 350.5})
    assert response.status_code == 200
    assert response.json()["amount"] == 350.5

    assert api_client.delete(f"/transactions/{txn_id}").status_code == 204
    assert api_client.get(f"/transactions/{txn_id}").status_code == 404
    assert api_client.delete(f"/transactions/{txn_id}").status_code == 404

    remaining = api_client.get("/transactions", params={"userId": api_user["id"]}).json()
    assert [t["id"] for t in remaining] == [api_transactions[2]["id"], api_transactions[0]["id"]]


def test_create_goal(api_goal):
    assert api_goal["title"] == "Vacation"
    assert api_goal["targetAmount"] == 1000.0
    assert api_goal["currentAmount"] == 800.0
    assert api_goal["deadline"] == "2024-06-01"


def test_create_goal_with_past_deadline(api_client, api_user):
    response = api_client.post(
        "/goals",
        json={"userId": api_user["id"], "title": "Late", "targetAmount": 10, "deadline": "2024-01-15"},
    )
    assert response.status_code == 400
    assert "future" in response.json()["error"]


def test_create_goal_with_oversized_target(api_client, api_user):
    response = api_client.post(
        "/goals",
        json={"userId": api_user["id"], "title": "Moon", "targetAmount": "1e30", "deadline": "2024-06-01"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "target_amount must be less than 10,000,000,000"}


def test_goal_add_progress_signals_completion_once(api_client, api_goal):
    goal_id = api_goal["id"]

    first = api_client.post(f"/goals/{goal_id}/add-progress", json={"amount": 300}).json()
    assert first["currentAmount"] == 1000.0
    assert first["justCompleted"] is True
    assert first["isCompleted"] is True
    assert first["status"] == "completed"
    assert first["progress"] == 100.0

    second = api_client.post(f"/goals/{goal_id}/add-progress", json={"amount": 50}).json()
    assert second["currentAmount"] == 1000.0
    assert second["justCompleted"] is False


def test_goal_add_progress_requires_positive_amount(api_client, api_goal):
    response = api_client.post(f"/goals/{api_goal['id']}/add-progress", json={"amount": 0})
    assert response.status_code == 400


def test_goal_progress_endpoints(api_client, api_goal):
    goal_id = api_goal["id"]
    progress = api_client.get(f"/goals/{goal_id}/progress").json()
    assert progress["progress"] == 80.0
    assert progress["amountRemaining"] == 200.0
    assert progress["status"] == "active"
    assert progress["daysRemaining"] == 138

    updated = api_client.put(f"/goals/{goal_id}/progress", json={"amount": 100}).json()
    assert updated["currentAmount"] == 100.0
    assert updated["justCompleted"] is False


def test_goal_lists(api_client, api_user, api_goal):
    user_id = api_user["id"]
    api_client.post(
        "/goals",
        json={"userId": user_id, "title": "Soon", "targetAmount": 50, "deadline": "2024-01-18", "currentAmount": 50},
    )

    listed = api_client.get("/goals", params={"userId": user_id}).json()
    assert [g["title"] for g in listed] == ["Soon", "Vacation"]
    assert listed[0]["status"] == "completed"

    upcoming = api_client.get("/goals/upcoming", params={"userId": user_id}).json()
    assert [g["title"] for g in upcoming] == ["Soon"]

    completed = api_client.get("/goals/completed", params={"userId": user_id}).json()
    assert [g["title"] for g in completed] == ["Soon"]


def test_goal_update_and_delete(api_client, api_goal):
    goal_id = api_goal["id"]
    response = api_client.put(f"/goals/{goal_id}", json={"targetAmount": 500})
    assert response.status_code == 200
    assert response.json()["currentAmount"] == 500.0

    assert api_client.put(f"/goals/{goal_id}", json={"deadline": "2023-01-01"}).status_code == 400
    assert api_client.delete(f"/goals/{goal_id}").status_code == 204
    assert api_client.get(f"/goals/{goal_id}").status_code == 404


def test_categories(api_client):
    response = api_client.post("/categories", json={"name": "Pets", "kind": "expense"})
    assert response.status_code == 201
    assert response.json()["kind"] == "expense"

    assert api_client.post("/categories", json={"name": "Pets", "kind": "expense"}).status_code == 400
    assert [c["name"] for c in api_client.get("/categories", params={"kind": "expense"}).json()] == ["Pets"]
    assert api_client.get("/categories", params={"kind": "income"}).json() == []


def test_unknown_route_returns_error_body(api_client):
    response = api_client.get("/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


def test_unexpected_error_is_generic_500(temp_db, clock, monkeypatch):
    from fastapi.testclient import TestClient
    from moneytrack.api import create_app

    def broken(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(temp_db, "list_users", broken)
    client = TestClient(create_app(temp_db, clock=clock), raise_server_exceptions=False)

    response = client.get("/users")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
