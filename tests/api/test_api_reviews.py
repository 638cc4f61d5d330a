"""
Review API tests
"""
from fastapi.testclient import TestClient


def _review(client, headers, kos_id, rating=4):
    return client.post("/reviews", headers=headers, json={
        "kosId": kos_id, "content": "Nyaman", "rating": rating
    })


class TestReviews:

    def test_create_reply_delete(self, client: TestClient, renter_headers, owner_headers, sample_kos):
        response = _review(client, renter_headers, sample_kos.id)
        assert response.status_code == 201
        review_id = response.json()["data"]["id"]

        response = client.put(f"/reviews/{review_id}/reply", headers=owner_headers,
                              json={"reply_content": "Terima kasih"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["reply_content"] == "Terima kasih"
        assert data["reply_at"] is not None

        listed = client.get(f"/reviews/kos/{sample_kos.id}").json()["data"]
        assert len(listed) == 1

        assert client.delete(f"/reviews/{review_id}", headers=renter_headers).status_code == 200

    def test_rating_range(self, client: TestClient, renter_headers, sample_kos):
        assert _review(client, renter_headers, sample_kos.id, rating=6).status_code == 400
        assert _review(client, renter_headers, sample_kos.id, rating=0).status_code == 400

    def test_one_per_kos(self, client: TestClient, renter_headers, sample_kos):
        _review(client, renter_headers, sample_kos.id)
        response = _review(client, renter_headers, sample_kos.id)
        assert response.status_code == 400

    def test_owner_cannot_review(self, client: TestClient, owner_headers, sample_kos):
        assert _review(client, owner_headers, sample_kos.id).status_code == 403

    def test_reply_other_owner(self, client: TestClient, renter_headers, other_owner_headers, sample_kos):
        review_id = _review(client, renter_headers, sample_kos.id).json()["data"]["id"]
        response = client.put(f"/reviews/{review_id}/reply", headers=other_owner_headers,
                              json={"reply_content": "Hmm"})
        assert response.status_code == 403
