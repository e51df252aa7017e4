"""
Reviews API: submission, moderation, rating aggregation and helpful votes.
"""

import pytest

from archmarket.modules.designs.models import DESIGNS
from archmarket.modules.reviews.models import record_vote, helpful_count


def review_payload(design_id=None, **overrides):
    payload = {
        "type": "design" if design_id else "overall",
        "rating": 4,
        "title": "Great plans",
        "comment": "Clear drawings and a lovely model.",
    }
    if design_id:
        payload["design"] = design_id
    payload.update(overrides)
    return payload


async def _submit(client, headers, payload):
    resp = await client.post("/api/reviews", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["review"]


# ═══════════════════════════════════════════════════════════════════════════
# Submission
# ═══════════════════════════════════════════════════════════════════════════

class TestSubmit:

    @pytest.mark.asyncio
    async def test_submit_design_review(self, client, customer, published_design):
        resp = await client.post("/api/reviews", json=review_payload(published_design["id"]), headers=customer)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Review submitted for approval"
        review = body["review"]
        assert review["status"] == "pending"
        assert review["user"] == "customer-1"
        assert review["design"] == published_design["id"]
        assert review["helpfulCount"] == 0

    @pytest.mark.asyncio
    async def test_requires_login(self, client):
        assert (await client.post("/api/reviews", json=review_payload())).status_code == 401

    @pytest.mark.asyncio
    async def test_design_review_needs_design(self, client, customer):
        resp = await client.post("/api/reviews", json=review_payload(type="design"), headers=customer)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Design ID is required for design reviews"

    @pytest.mark.asyncio
    async def test_design_review_unknown_design(self, client, customer):
        resp = await client.post("/api/reviews", json=review_payload("nope"), headers=customer)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_one_review_per_item(self, client, customer, other_customer, published_design):
        await _submit(client, customer, review_payload(published_design["id"]))
        resp = await client.post("/api/reviews", json=review_payload(published_design["id"]), headers=customer)
        assert resp.status_code == 400
        assert resp.json()["message"] == "You have already reviewed this item"

        await _submit(client, other_customer, review_payload(published_design["id"]))
        await _submit(client, customer, review_payload())

    @pytest.mark.asyncio
    async def test_validation(self, client, customer):
        resp = await client.post(
            "/api/reviews", json=review_payload(rating=0, title="ok", type="rant"), headers=customer
        )
        assert resp.status_code == 400
        errors = {e["field"]: e["message"] for e in resp.json()["errors"]}
        assert errors["rating"] == "Rating must be between 1 and 5"
        assert errors["type"] == "Invalid review type"
        assert "title" in errors


# ═══════════════════════════════════════════════════════════════════════════
# Reading & ownership
# ═══════════════════════════════════════════════════════════════════════════

class TestReadAndEdit:

    @pytest.mark.asyncio
    async def test_list_filters(self, client, customer, other_customer, published_design):
        await _submit(client, customer, review_payload(published_design["id"]))
        await _submit(client, other_customer, review_payload())

        body = (await client.get("/api/reviews", params={"design": published_design["id"]})).json()
        assert [r["user"] for r in body["reviews"]] == ["customer-1"]
        assert body["pagination"]["totalItems"] == 1

        body = (await client.get("/api/reviews", params={"status": "pending"})).json()
        assert body["pagination"]["totalItems"] == 2

    @pytest.mark.asyncio
    async def test_get_missing(self, client):
        resp = await client.get("/api/reviews/nope")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Review not found"

    @pytest.mark.asyncio
    async def test_owner_edit_returns_to_moderation(self, client, customer, admin):
        review = await _submit(client, customer, review_payload())
        await client.put(f"/api/reviews/{review['id']}/approve", headers=admin)

        resp = await client.put(
            f"/api/reviews/{review['id']}", json={"rating": 5}, headers=customer
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Review updated and submitted for approval"
        assert body["review"]["rating"] == 5
        assert body["review"]["status"] == "pending"
        assert body["review"]["title"] == "Great plans"

    @pytest.mark.asyncio
    async def test_other_user_cannot_edit_or_delete(self, client, customer, other_customer):
        review = await _submit(client, customer, review_payload())
        url = f"/api/reviews/{review['id']}"
        assert (await client.put(url, json={"rating": 1}, headers=other_customer)).status_code == 403
        assert (await client.delete(url, headers=other_customer)).status_code == 403

    @pytest.mark.asyncio
    async def test_owner_and_admin_delete(self, client, customer, admin):
        first = await _submit(client, customer, review_payload())
        resp = await client.delete(f"/api/reviews/{first['id']}", headers=customer)
        assert resp.json() == {"message": "Review deleted successfully"}

        second = await _submit(client, customer, review_payload())
        assert (await client.delete(f"/api/reviews/{second['id']}", headers=admin)).status_code == 200
        assert (await client.get(f"/api/reviews/{second['id']}")).status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# Moderation
# ═══════════════════════════════════════════════════════════════════════════

class TestModeration:

    @pytest.mark.asyncio
    async def test_approve_feeds_design_rating_once(self, client, customer, other_customer, admin, published_design, store):
        first = await _submit(client, customer, review_payload(published_design["id"], rating=4))
        second = await _submit(client, other_customer, review_payload(published_design["id"], rating=5))

        resp = await client.put(f"/api/reviews/{first['id']}/approve", headers=admin)
        assert resp.json() == {"message": "Review approved"}
        await client.put(f"/api/reviews/{first['id']}/approve", headers=admin)
        await client.put(f"/api/reviews/{second['id']}/approve", headers=admin)

        design = await store.get(DESIGNS, published_design["id"])
        assert design["rating"] == {"average": 4.5, "count": 2}

    @pytest.mark.asyncio
    async def test_overall_review_leaves_designs_alone(self, client, customer, admin, published_design, store):
        review = await _submit(client, customer, review_payload())
        await client.put(f"/api/reviews/{review['id']}/approve", headers=admin)
        design = await store.get(DESIGNS, published_design["id"])
        assert design["rating"] == {"average": 0, "count": 0}

    @pytest.mark.asyncio
    async def test_reject(self, client, customer, admin):
        review = await _submit(client, customer, review_payload())
        resp = await client.put(f"/api/reviews/{review['id']}/reject", headers=admin)
        assert resp.json() == {"message": "Review rejected"}
        assert (await client.get(f"/api/reviews/{review['id']}")).json()["status"] == "rejected"

    @pytest.mark.asyncio
    async def test_moderation_is_admin_only(self, client, customer):
        review = await _submit(client, customer, review_payload())
        resp = await client.put(f"/api/reviews/{review['id']}/approve", headers=customer)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_approve_missing(self, client, admin):
        assert (await client.put("/api/reviews/nope/approve", headers=admin)).status_code == 404


class TestHelpfulVotes:

    @pytest.mark.asyncio
    async def test_vote_replaces_previous(self, client, customer, other_customer):
        review = await _submit(client, customer, review_payload())
        url = f"/api/reviews/{review['id']}/helpful"

        resp = await client.post(url, json={"helpful": True}, headers=customer)
        assert resp.json() == {"message": "Vote recorded", "helpfulCount": 1}
        resp = await client.post(url, json={"helpful": True}, headers=other_customer)
        assert resp.json()["helpfulCount"] == 2
        resp = await client.post(url, json={"helpful": False}, headers=customer)
        assert resp.json()["helpfulCount"] == 1

    @pytest.mark.asyncio
    async def test_vote_requires_flag(self, client, customer):
        review = await _submit(client, customer, review_payload())
        resp = await client.post(f"/api/reviews/{review['id']}/helpful", json={}, headers=customer)
        assert resp.status_code == 400

    def test_record_vote(self):
        votes = record_vote([{"user": "a", "helpful": True}], "b", False)
        votes = record_vote(votes, "a", False)
        assert votes == [{"user": "b", "helpful": False}, {"user": "a", "helpful": False}]
        assert helpful_count(votes) == 0
