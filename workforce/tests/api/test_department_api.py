"""Tests for department API endpoints."""

import inspect
import uuid

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from workforce.config.settings import Settings
from workforce.data.factory import build_memory_repositories
from workforce.main import create_app
from workforce.middleware.request_logging import REQUEST_ID_HEADER


@pytest.fixture
def client():
    """Client over a fresh in-memory store."""
    app = create_app(
        settings=Settings(store_backend="memory"),
        repositories=build_memory_repositories(),
    )
    return TestClient(app)


def create_department(client, name="Engineering"):
    response = client.post("/api/v1/departments", json={"name": name})
    assert response.status_code == 201
    return response.json()["data"]


def create_employee(client, department_id, name="John Doe", email="john@example.com"):
    response = client.post(
        "/api/v1/employees",
        json={"name": name, "email": email, "department_id": department_id},
    )
    assert response.status_code == 201
    return response.json()["data"]


# =============================================================================
# CRUD Endpoint Tests
# =============================================================================

class TestDepartmentEndpoints:
    """Test cases for department endpoints."""

    def test_create_department(self, client):
        response = client.post("/api/v1/departments", json={"name": "Engineering"})

        assert response.status_code == 201
        result = response.json()
        assert result["message"] == "Department created successfully"
        assert result["data"]["name"] == "Engineering"
        assert uuid.UUID(result["data"]["id"])

    def test_create_department_blank_name(self, client):
        response = client.post("/api/v1/departments", json={"name": "  "})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation_error"
        assert error["kind"] == "invalid_input"
        assert error["message"] == "department name is required"
        assert error["retryable"] is False

    def test_create_department_missing_body_field(self, client):
        response = client.post("/api/v1/departments", json={})

        assert response.status_code == 400
        assert response.json()["error"]["field_errors"][0]["field"] == "name"

    def test_list_departments_empty(self, client):
        response = client.get("/api/v1/departments")

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_get_department(self, client):
        department = create_department(client)

        response = client.get(f"/api/v1/departments/{department['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Engineering"

    def test_get_department_not_found(self, client):
        response = client.get(f"/api/v1/departments/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    def test_get_department_malformed_id(self, client):
        response = client.get("/api/v1/departments/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "invalid department ID"

    def test_update_department(self, client):
        department = create_department(client)

        response = client.put(
            f"/api/v1/departments/{department['id']}",
            json={"name": "Platform"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Platform"

    def test_list_department_employees(self, client):
        department = create_department(client)
        create_employee(client, department["id"], name="Zed", email="zed@example.com")
        create_employee(client, department["id"], name="Amy", email="amy@example.com")

        response = client.get(f"/api/v1/departments/{department['id']}/employees")

        assert [e["name"] for e in response.json()["data"]] == ["Amy", "Zed"]


# =============================================================================
# Cascade Delete Tests
# =============================================================================

class TestDepartmentCascadeDelete:
    """Test cases for deleting departments with employees."""

    def test_delete_department_with_employees(self, client):
        department = create_department(client)
        first = create_employee(client, department["id"], "Alice", "alice@example.com")
        second = create_employee(client, department["id"], "Bob", "bob@example.com")

        response = client.delete(f"/api/v1/departments/{department['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["complete"] is True
        assert sorted(data["deleted_employee_ids"]) == sorted([first["id"], second["id"]])
        assert data["failed_employee_deletes"] == []
        assert client.get(f"/api/v1/employees/{first['id']}").status_code == 404

    def test_delete_department_twice(self, client):
        department = create_department(client)

        assert client.delete(f"/api/v1/departments/{department['id']}").status_code == 200
        assert client.delete(f"/api/v1/departments/{department['id']}").status_code == 404


class TestHealthAndHeaders:
    """Test cases for health check and request ids."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "1.0.0"}

    def test_request_id_generated(self, client):
        response = client.get("/api/v1/departments")

        assert response.headers[REQUEST_ID_HEADER]

    def test_request_id_echoed(self, client):
        response = client.get("/api/v1/departments", headers={REQUEST_ID_HEADER: "abc-123"})

        assert response.headers[REQUEST_ID_HEADER] == "abc-123"

    def test_store_endpoints_are_sync(self, client):
        routes = [
            route
            for route in client.app.routes
            if isinstance(route, APIRoute) and route.path.startswith(("/api/v1", "/graph"))
        ]

        assert routes
        assert not [route.path for route in routes if inspect.iscoroutinefunction(route.endpoint)]

    def test_update_department_name_too_long(self, client):
        department = create_department(client)

        response = client.put(f"/api/v1/departments/{department['id']}", json={"name": "x" * 300})

        assert response.status_code == 400
        assert response.json()["error"]["retryable"] is False
