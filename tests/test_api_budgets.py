import pytest

from conftest import auth_headers, register


@pytest.fixture
def alice(client):
    token, _ = register(client, name="Alice")
    return auth_headers(token)


@pytest.fixture
def bob(client):
    token, _ = register(client, name="Bob")
    return auth_headers(token)


def test_budget_routes_require_a_token(client):
    assert client.get("/api/budgets").status_code == 401
    assert client.post("/api/budgets", json={"category": "Food", "amount": 5}).status_code == 401


def test_create_defaults_to_monthly(client, alice):
    response = client.post("/api/budgets", json={"category": "Food", "amount": 500}, headers=alice)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["category"] == "Food"
    assert data["amount"] == 500
    assert data["period"] == "monthly"


def test_duplicate_category_for_same_owner(client, alice):
    first = client.post("/api/budgets", json={"category": "Food", "amount": 500}, headers=alice)
    second = client.post("/api/budgets", json={"category": "Food", "amount": 200}, headers=alice)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"success": False, "error": "A budget for this category already exists"}

    listed = client.get("/api/budgets", headers=alice).json()
    assert listed["count"] == 1
    assert listed["data"][0]["amount"] == 500


def test_same_category_for_different_owners(client, alice, bob):
    assert client.post("/api/budgets", json={"category": "Food", "amount": 500}, headers=alice).status_code == 201
    assert client.post("/api/budgets", json={"category": "Food", "amount": 300}, headers=bob).status_code == 201

    assert client.get("/api/budgets", headers=alice).json()["count"] == 1


def test_invalid_period(client, alice):
    response = client.post(
        "/api/budgets",
        json={"category": "Food", "amount": 500, "period": "daily"},
        headers=alice,
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("period:")


def test_update_and_filter(client, alice):
    budget_id = client.post(
        "/api/budgets", json={"category": "Housing", "amount": 900}, headers=alice
    ).json()["data"]["id"]
    client.post("/api/budgets", json={"category": "Food", "amount": 300}, headers=alice)

    response = client.put(f"/api/budgets/{budget_id}", json={"period": "yearly"}, headers=alice)
    assert response.status_code == 200
    assert response.json()["data"]["period"] == "yearly"
    assert response.json()["data"]["amount"] == 900

    housing = client.get("/api/budgets", params={"category": "Housing"}, headers=alice).json()
    assert housing["count"] == 1
    assert housing["data"][0]["id"] == budget_id


def test_update_into_taken_category(client, alice):
    client.post("/api/budgets", json={"category": "Food", "amount": 300}, headers=alice)
    budget_id = client.post(
        "/api/budgets", json={"category": "Housing", "amount": 900}, headers=alice
    ).json()["data"]["id"]

    response = client.put(f"/api/budgets/{budget_id}", json={"category": "Food"}, headers=alice)
    assert response.status_code == 400

    unchanged = client.get(f"/api/budgets/{budget_id}", headers=alice).json()["data"]
    assert unchanged["category"] == "Housing"


def test_other_owner_sees_not_found(client, alice, bob):
    budget_id = client.post(
        "/api/budgets", json={"category": "Food", "amount": 500}, headers=alice
    ).json()["data"]["id"]

    assert client.get(f"/api/budgets/{budget_id}", headers=bob).status_code == 404
    assert client.put(f"/api/budgets/{budget_id}", json={"amount": 1}, headers=bob).status_code == 404
    assert client.delete(f"/api/budgets/{budget_id}", headers=bob).status_code == 404

    assert client.get(f"/api/budgets/{budget_id}", headers=alice).json()["data"]["amount"] == 500


def test_delete(client, alice):
    budget_id = client.post(
        "/api/budgets", json={"category": "Food", "amount": 500}, headers=alice
    ).json()["data"]["id"]

    assert client.delete(f"/api/budgets/{budget_id}", headers=alice).status_code == 200
    assert client.get(f"/api/budgets/{budget_id}", headers=alice).status_code == 404
    # the category is free again
    assert client.post("/api/budgets", json={"category": "Food", "amount": 100}, headers=alice).status_code == 201


def test_overflowing_amount_is_rejected(client, alice):
    response = client.post(
        "/api/budgets",
        content=b'{"category": "Food", "amount": 1e309}',
        headers={**alice, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert client.get("/api/budgets", headers=alice).json()["count"] == 0
