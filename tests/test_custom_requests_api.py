"""
Custom requests API: submission, visibility, status and communications.
"""

import pytest


REQUEST = {
    "title": "Hillside family home",
    "description": "Three bedrooms on a steep south-facing plot.",
    "category": "residential",
    "projectType": "concept-design",
    "budget": {"min": 5000, "max": 12000},
    "timeline": {"startDate": "2025-03-01T00:00:00Z", "urgency": "high"},
    "specifications": {"style": "modern", "materials": ["timber", "glass"]},
}


async def _submit(client, headers, **overrides):
    resp = await client.post("/api/custom-requests", json={**REQUEST, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["customRequest"]


# ═══════════════════════════════════════════════════════════════════════════
# Submission & visibility
# ═══════════════════════════════════════════════════════════════════════════

class TestSubmit:

    @pytest.mark.asyncio
    async def test_submit(self, client, customer):
        resp = await client.post("/api/custom-requests", json=REQUEST, headers=customer)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Custom request submitted"
        created = body["customRequest"]
        assert created["status"] == "submitted"
        assert created["client"] == "customer-1"
        assert created["priority"] == "medium"
        assert created["budget"] == {"min": 5000.0, "max": 12000.0, "currency": "USD"}
        assert created["timeline"]["startDate"] == "2025-03-01T00:00:00+00:00"
        assert created["communications"] == []

    @pytest.mark.asyncio
    async def test_requires_login(self, client):
        resp = await client.post("/api/custom-requests", json=REQUEST)
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_budget_rules(self, client, customer):
        resp = await client.post(
            "/api/custom-requests",
            json={**REQUEST, "budget": {"min": 900, "max": 100}},
            headers=customer,
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [
            {"field": "budget.max", "message": "Maximum budget must not be below the minimum"}
        ]

    @pytest.mark.asyncio
    async def test_validation(self, client, customer):
        payload = {**REQUEST, "category": "castle", "projectType": "napkin"}
        del payload["budget"]
        resp = await client.post("/api/custom-requests", json=payload, headers=customer)
        errors = {e["field"]: e["message"] for e in resp.json()["errors"]}
        assert errors == {
            "category": "Invalid category",
            "projectType": "Invalid project type",
            "budget": "This field is required.",
        }


class TestVisibility:

    @pytest.mark.asyncio
    async def test_customers_see_only_their_own(self, client, customer, other_customer, admin):
        await _submit(client, customer)
        await _submit(client, other_customer)

        mine = (await client.get("/api/custom-requests", headers=customer)).json()
        assert [r["client"] for r in mine["requests"]] == ["customer-1"]
        assert mine["pagination"]["totalItems"] == 1

        everything = (await client.get("/api/custom-requests", headers=admin)).json()
        assert everything["pagination"]["totalItems"] == 2

    @pytest.mark.asyncio
    async def test_status_filter(self, client, customer, admin):
        first = await _submit(client, customer)
        await _submit(client, customer)
        await client.put(f"/api/custom-requests/{first['id']}/status", json={"status": "quoted"}, headers=admin)

        body = (await client.get("/api/custom-requests", params={"status": "quoted"}, headers=customer)).json()
        assert [r["id"] for r in body["requests"]] == [first["id"]]

    @pytest.mark.asyncio
    async def test_read_guarded_by_ownership(self, client, customer, other_customer, admin):
        created = await _submit(client, customer)
        url = f"/api/custom-requests/{created['id']}"
        assert (await client.get(url, headers=customer)).status_code == 200
        assert (await client.get(url, headers=admin)).status_code == 200
        assert (await client.get(url, headers=other_customer)).status_code == 403

    @pytest.mark.asyncio
    async def test_missing(self, client, customer):
        resp = await client.get("/api/custom-requests/nope", headers=customer)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Custom request not found"


# ═══════════════════════════════════════════════════════════════════════════
# Changes
# ═══════════════════════════════════════════════════════════════════════════

class TestChanges:

    @pytest.mark.asyncio
    async def test_owner_update_merges_budget(self, client, customer):
        created = await _submit(client, customer)
        resp = await client.put(
            f"/api/custom-requests/{created['id']}",
            json={"budget": {"min": 6000, "max": 15000}, "notes": "Flexible on dates"},
            headers=customer,
        )
        assert resp.json()["message"] == "Custom request updated"
        updated = resp.json()["customRequest"]
        assert updated["budget"] == {"min": 6000.0, "max": 15000.0, "currency": "USD"}
        assert updated["notes"] == "Flexible on dates"
        assert updated["title"] == REQUEST["title"]

    @pytest.mark.asyncio
    async def test_other_customer_cannot_update_or_delete(self, client, customer, other_customer):
        created = await _submit(client, customer)
        url = f"/api/custom-requests/{created['id']}"
        assert (await client.put(url, json={"notes": "mine now"}, headers=other_customer)).status_code == 403
        assert (await client.delete(url, headers=other_customer)).status_code == 403

    @pytest.mark.asyncio
    async def test_delete(self, client, customer):
        created = await _submit(client, customer)
        url = f"/api/custom-requests/{created['id']}"
        assert (await client.delete(url, headers=customer)).json() == {"message": "Custom request deleted"}
        assert (await client.get(url, headers=customer)).status_code == 404

    @pytest.mark.asyncio
    async def test_status_is_admin_only(self, client, customer, admin):
        created = await _submit(client, customer)
        url = f"/api/custom-requests/{created['id']}/status"

        assert (await client.put(url, json={"status": "reviewing"}, headers=customer)).status_code == 403
        resp = await client.put(url, json={"status": "reviewing"}, headers=admin)
        assert resp.json()["message"] == "Status updated"
        assert resp.json()["customRequest"]["status"] == "reviewing"

        resp = await client.put(url, json={"status": "teleported"}, headers=admin)
        assert resp.status_code == 400
        assert resp.json()["errors"] == [{"field": "status", "message": "Invalid status"}]


class TestCommunications:

    @pytest.mark.asyncio
    async def test_internal_notes_hidden_from_client(self, client, customer, admin):
        created = await _submit(client, customer)
        url = f"/api/custom-requests/{created['id']}/communications"

        resp = await client.post(url, json={"message": "Can we add a studio?"}, headers=customer)
        assert resp.status_code == 201
        assert resp.json()["message"] == "Message sent"

        await client.post(url, json={"message": "Quote high, client is flexible", "isInternal": True}, headers=admin)
        await client.post(url, json={"message": "Yes, quote attached"}, headers=admin)

        seen_by_client = (await client.get(f"/api/custom-requests/{created['id']}", headers=customer)).json()
        assert [m["message"] for m in seen_by_client["communications"]] == [
            "Can we add a studio?",
            "Yes, quote attached",
        ]

        seen_by_admin = (await client.get(f"/api/custom-requests/{created['id']}", headers=admin)).json()
        assert len(seen_by_admin["communications"]) == 3
        assert seen_by_admin["communications"][1]["isInternal"] is True

    @pytest.mark.asyncio
    async def test_client_cannot_post_internal_note(self, client, customer):
        created = await _submit(client, customer)
        resp = await client.post(
            f"/api/custom-requests/{created['id']}/communications",
            json={"message": "psst", "isInternal": True},
            headers=customer,
        )
        assert resp.status_code == 403
        assert resp.json()["message"] == "Only admins can post internal notes"

    @pytest.mark.asyncio
    async def test_strangers_cannot_post(self, client, customer, other_customer):
        created = await _submit(client, customer)
        resp = await client.post(
            f"/api/custom-requests/{created['id']}/communications",
            json={"message": "hello"},
            headers=other_customer,
        )
        assert resp.status_code == 403
