"""Tests for property endpoints."""

import pytest

from app.models import AgentProperty, Property
from app.models_visit import Visit

PROPERTY_PAYLOAD = {
    "title": "Penthouse with terrace",
    "price": 550000,
    "location": "Centro, Sevilla",
    "image": "https://example.com/penthouse.jpg",
    "bedrooms": 2,
    "bathrooms": 2,
    "area": 95,
    "type": "sale",
    "description": "Top floor with views",
    "propertyType": "Penthouse",
    "address": "Calle Sierpes 78",
    "features": ["Terrace", "Lift"],
    "status": "published",
}


@pytest.mark.api
def test_list_properties_is_public(client, make_property):
    make_property(title="First listing")
    make_property(title="Second listing")

    response = client.get("/api/properties")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert {p["title"] for p in body["data"]} == {"First listing", "Second listing"}
    assert "password" not in response.text


@pytest.mark.api
def test_list_properties_filters(client, make_property):
    make_property(title="Cheap rental flat", type="rental", price=900, bedrooms=1, location="Granada",
                  description="Quiet street")
    make_property(title="Large family house", type="sale", price=400000, bedrooms=4, location="Marbella",
                  description="Garden and pool")
    make_property(title="Seaside studio", type="sale", price=150000, bedrooms=1, location="Malaga",
                  description="Steps from the beach", is_featured=True)

    def titles(**params):
        response = client.get("/api/properties", params=params)
        assert response.status_code == 200
        return {p["title"] for p in response.json()["data"]}

    assert titles(type="rental") == {"Cheap rental flat"}
    assert titles(minPrice=100000, maxPrice=200000) == {"Seaside studio"}
    assert titles(minBedrooms=3) == {"Large family house"}
    assert titles(location="marbella") == {"Large family house"}
    assert titles(keyword="BEACH") == {"Seaside studio"}
    assert titles(featured="true") == {"Seaside studio"}


@pytest.mark.api
def test_list_properties_rejects_unknown_type(client):
    response = client.get("/api/properties", params={"type": "auction"})
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.api
def test_featured_properties(client, make_property):
    make_property(title="Featured published", is_featured=True, status="published")
    make_property(title="Featured status", is_featured=True, status="featured")
    make_property(title="Featured draft", is_featured=True, status="draft")
    make_property(title="Not featured", is_featured=False, status="published")

    response = client.get("/api/properties/featured")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["count"] == 2
    assert {p["title"] for p in data["properties"]} == {"Featured published", "Featured status"}
    assert "description" not in data["properties"][0]


@pytest.mark.api
def test_featured_properties_limit(client, make_property):
    for i in range(4):
        make_property(title=f"Featured listing {i}", is_featured=True)

    response = client.get("/api/properties/featured", params={"limit": 2})

    assert response.json()["data"]["count"] == 2


@pytest.mark.api
def test_get_property_by_id(client, make_property):
    prop = make_property()

    response = client.get(f"/api/properties/{prop.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == prop.id
    assert data["propertyType"] == "Apartment"
    assert data["features"] == ["Lift", "Terrace"]


@pytest.mark.api
def test_get_missing_property_returns_404(client):
    response = client.get("/api/properties/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Property not found", "success": False}


@pytest.mark.api
def test_create_property_requires_authentication(client):
    response = client.post("/api/properties", json=PROPERTY_PAYLOAD)
    assert response.status_code == 401


@pytest.mark.api
def test_create_property_requires_permission(client, agent_headers):
    response = client.post("/api/properties", json=PROPERTY_PAYLOAD, headers=agent_headers)
    assert response.status_code == 403


@pytest.mark.api
def test_create_property(client, admin_headers, db_session):
    response = client.post("/api/properties", json=PROPERTY_PAYLOAD, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["title"] == "Penthouse with terrace"
    assert data["isFeatured"] is False
    assert db_session.query(Property).filter(Property.id == data["id"]).count() == 1


@pytest.mark.api
def test_create_property_validation_errors(client, admin_headers):
    payload = {**PROPERTY_PAYLOAD, "title": "Flat", "price": -5, "type": "auction"}

    response = client.post("/api/properties", json=payload, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    fields = {detail["field"] for detail in body["details"]}
    assert {"title", "price", "type"} <= fields


@pytest.mark.api
def test_replace_property(client, admin_headers, make_property):
    prop = make_property()
    payload = {**PROPERTY_PAYLOAD, "title": "Completely new title", "features": []}

    response = client.put(f"/api/properties/{prop.id}", json=payload, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Completely new title"
    assert data["features"] == []
    assert data["propertyType"] == "Penthouse"


@pytest.mark.api
def test_patch_property_changes_only_sent_fields(client, admin_headers, make_property):
    prop = make_property(price=100000)

    response = client.patch(
        f"/api/properties/{prop.id}",
        json={"price": 120000, "status": "inactive", "address": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["price"] == 120000
    assert data["status"] == "inactive"
    assert data["address"] is None
    assert data["title"] == prop.title


@pytest.mark.api
def test_patch_missing_property_returns_404(client, admin_headers):
    response = client.patch("/api/properties/nope", json={"price": 1}, headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.api
def test_delete_property_removes_visits_and_assignments(
    client, admin_headers, make_property, make_visit, client_user, agent, assign_agent, db_session
):
    prop = make_property()
    make_visit(prop.id, client_user.id, time="10:00")
    make_visit(prop.id, client_user.id, time="12:00", status="completed")
    assign_agent(agent.id, prop.id)

    response = client.delete(f"/api/properties/{prop.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Property deleted", "success": True}
    assert db_session.query(Property).count() == 0
    assert db_session.query(Visit).count() == 0
    assert db_session.query(AgentProperty).count() == 0


@pytest.mark.api
def test_properties_with_visits(client, agent_headers, make_property, make_visit, client_user):
    busy = make_property(title="Busy listing")
    quiet = make_property(title="Quiet listing")
    make_visit(busy.id, client_user.id, time="10:00", status="pending")
    make_visit(busy.id, client_user.id, time="12:00", status="confirmed")
    make_visit(busy.id, client_user.id, time="16:00", status="cancelled")
    make_visit(quiet.id, client_user.id, time="10:00", status="completed")

    response = client.get(
        "/api/properties/with-visits", params={"includeVisitCount": "true"}, headers=agent_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["title"] == "Busy listing"
    assert data[0]["visitCount"] == 2


@pytest.mark.api
def test_properties_with_visits_without_count(client, agent_headers, make_property, make_visit, client_user):
    prop = make_property()
    make_visit(prop.id, client_user.id)

    response = client.get("/api/properties/with-visits", headers=agent_headers)

    assert "visitCount" not in response.json()["data"][0]


@pytest.mark.api
def test_properties_with_visits_requires_permission(client, client_headers):
    response = client.get("/api/properties/with-visits", headers=client_headers)
    assert response.status_code == 403

