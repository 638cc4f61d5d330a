"""
User and auth API tests
"""
from fastapi.testclient import TestClient


def _register(client, email="dewi@example.com", phone="081255550000", role="SOCIETY"):
    return client.post("/users", json={
        "name": "Dewi",
        "email": email,
        "phone_number": phone,
        "password": "rahasia",
        "role": role,
    })


class TestRegisterAndLogin:

    def test_register_login_profile(self, client: TestClient):
        response = _register(client)
        assert response.status_code == 201
        assert "password_hash" not in response.json()["data"]

        response = client.post("/auth/login", json={"email": "dewi@example.com", "password": "rahasia"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "SOCIETY"

        headers = {"Authorization": f"Bearer {data['access_token']}"}
        profile = client.get("/users/profile", headers=headers).json()["data"]
        assert profile["email"] == "dewi@example.com"

    def test_duplicate_email(self, client: TestClient):
        _register(client)
        response = _register(client, phone="081255550001")
        assert response.status_code == 400
        assert response.json()["status"] is False

    def test_invalid_role(self, client: TestClient):
        response = _register(client, role="ADMIN")
        assert response.status_code == 400

    def test_bad_login(self, client: TestClient, renter):
        response = client.post("/auth/login", json={"email": renter.email, "password": "wrong"})
        assert response.status_code == 401
        assert response.json()["status"] is False


class TestUsers:

    def test_list_owner_only(self, client: TestClient, owner_headers, renter_headers, renter):
        assert client.get("/users", headers=renter_headers).status_code == 403
        response = client.get("/users", headers=owner_headers, params={"search": "Andi"})
        assert [u["id"] for u in response.json()["data"]] == [renter.id]

    def test_update_self_only(self, client: TestClient, renter_headers, renter, other_renter):
        response = client.put(f"/users/{renter.id}", headers=renter_headers, json={"name": "Andi P."})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Andi P."

        response = client.put(f"/users/{other_renter.id}", headers=renter_headers, json={"name": "X"})
        assert response.status_code == 403

    def test_delete(self, client: TestClient, owner_headers, other_renter):
        response = client.delete(f"/users/{other_renter.id}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == other_renter.id
