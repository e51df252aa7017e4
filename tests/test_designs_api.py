"""
Designs API: catalogue reads, admin maintenance, favorites and seeding.
"""

import pytest

from archmarket.modules.designs import DesignService
from archmarket.modules.designs.models import DESIGNS
from archmarket.modules.designs.seed import seed_designs

from conftest import design_document


NEW_DESIGN = {
    "title": "Forest Cabin",
    "description": "A timber cabin for steep woodland plots.",
    "category": "residential",
    "style": "scandinavian",
    "price": 49.5,
    "model3d": {"file": "https://cdn.example.com/cabin.glb", "format": "glb"},
    "tags": ["cabin", "timber"],
}


async def _catalogue(store):
    await store.insert(DESIGNS, design_document(title="Villa", price=300.0, tags=["coast"], isFeatured=True))
    await store.insert(DESIGNS, design_document(title="Office", category="commercial", price=120.0))
    await store.insert(DESIGNS, design_document(title="Loft", category="interior", style="industrial", price=80.0))
    await store.insert(DESIGNS, design_document(title="Sketch", status="draft", price=10.0, isFeatured=True))


# ═══════════════════════════════════════════════════════════════════════════
# Catalogue
# ═══════════════════════════════════════════════════════════════════════════

class TestCatalogue:

    @pytest.mark.asyncio
    async def test_lists_published_only(self, client, store):
        await _catalogue(store)
        resp = await client.get("/api/designs")
        assert resp.status_code == 200
        body = resp.json()
        assert sorted(d["title"] for d in body["designs"]) == ["Loft", "Office", "Villa"]
        assert body["pagination"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalItems": 3,
            "itemsPerPage": 12,
        }

    @pytest.mark.asyncio
    async def test_filters(self, client, store):
        await _catalogue(store)

        resp = await client.get("/api/designs", params={"category": "commercial"})
        assert [d["title"] for d in resp.json()["designs"]] == ["Office"]

        resp = await client.get("/api/designs", params={"minPrice": "100", "maxPrice": "200"})
        assert [d["title"] for d in resp.json()["designs"]] == ["Office"]

        resp = await client.get("/api/designs", params={"search": "COAST"})
        assert [d["title"] for d in resp.json()["designs"]] == ["Villa"]

    @pytest.mark.asyncio
    async def test_sort_by_price(self, client, store):
        await _catalogue(store)
        resp = await client.get("/api/designs", params={"sortBy": "price", "sortOrder": "asc"})
        assert [d["price"] for d in resp.json()["designs"]] == [80.0, 120.0, 300.0]

    @pytest.mark.asyncio
    async def test_pages(self, client, store):
        await _catalogue(store)
        resp = await client.get("/api/designs", params={"sortBy": "price", "limit": "2", "page": "2"})
        body = resp.json()
        assert [d["title"] for d in body["designs"]] == ["Loft"]
        assert body["pagination"]["totalPages"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params,field", [
        ({"limit": "51"}, "limit"),
        ({"page": "0"}, "page"),
        ({"page": "abc"}, "page"),
        ({"category": "castle"}, "category"),
        ({"minPrice": "-1"}, "minPrice"),
    ])
    async def test_bad_query(self, client, params, field):
        resp = await client.get("/api/designs", params=params)
        assert resp.status_code == 400
        assert [e["field"] for e in resp.json()["errors"]] == [field]

    @pytest.mark.asyncio
    async def test_featured(self, client, store):
        await _catalogue(store)
        resp = await client.get("/api/designs/featured")
        assert [d["title"] for d in resp.json()] == ["Villa"]

    @pytest.mark.asyncio
    async def test_categories_and_styles(self, client, store):
        await _catalogue(store)
        assert (await client.get("/api/designs/categories")).json() == ["commercial", "interior", "residential"]
        assert (await client.get("/api/designs/styles")).json() == ["industrial", "modern"]


class TestDesignDetail:

    @pytest.mark.asyncio
    async def test_anonymous_read_is_not_a_view(self, client, published_design):
        resp = await client.get(f"/api/designs/{published_design['id']}")
        assert resp.status_code == 200
        assert resp.json()["viewCount"] == 0

    @pytest.mark.asyncio
    async def test_authenticated_read_counts_view(self, client, customer, published_design, store):
        resp = await client.get(f"/api/designs/{published_design['id']}", headers=customer)
        assert resp.json()["viewCount"] == 1
        assert (await store.get(DESIGNS, published_design["id"]))["viewCount"] == 1

    @pytest.mark.asyncio
    async def test_missing(self, client):
        resp = await client.get("/api/designs/nope")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Design not found", "code": "DESIGN_NOT_FOUND"}


# ═══════════════════════════════════════════════════════════════════════════
# Admin
# ═══════════════════════════════════════════════════════════════════════════

class TestAdmin:

    @pytest.mark.asyncio
    async def test_create(self, client, admin, store):
        resp = await client.post("/api/designs", json=NEW_DESIGN, headers=admin)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Design created successfully"
        design = body["design"]
        assert design["status"] == "draft"
        assert design["author"] == "admin-1"
        assert design["rating"] == {"average": 0, "count": 0}
        assert await store.get(DESIGNS, design["id"]) is not None

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client, customer):
        assert (await client.post("/api/designs", json=NEW_DESIGN)).status_code == 401
        resp = await client.post("/api/designs", json=NEW_DESIGN, headers=customer)
        assert resp.status_code == 403
        assert resp.json()["message"] == "Access denied. Admin only."

    @pytest.mark.asyncio
    async def test_create_validation(self, client, admin):
        payload = {**NEW_DESIGN, "title": "ab", "price": -1}
        del payload["model3d"]
        resp = await client.post("/api/designs", json=payload, headers=admin)
        assert resp.status_code == 400
        errors = {e["field"]: e["message"] for e in resp.json()["errors"]}
        assert errors == {
            "title": "Title must be between 3 and 200 characters",
            "price": "Price must be a positive number",
            "model3d": "3D model file is required",
        }

    @pytest.mark.asyncio
    async def test_update(self, client, admin, published_design):
        resp = await client.put(
            f"/api/designs/{published_design['id']}", json={"price": 150}, headers=admin
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Design updated successfully"
        assert body["design"]["price"] == 150.0
        assert body["design"]["title"] == "Coastal Villa"

    @pytest.mark.asyncio
    async def test_update_missing(self, client, admin):
        resp = await client.put("/api/designs/nope", json={"price": 1}, headers=admin)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, client, admin, customer, published_design):
        url = f"/api/designs/{published_design['id']}"
        await client.post(f"{url}/favorite", headers=customer)

        resp = await client.delete(url, headers=admin)
        assert resp.json() == {"message": "Design deleted successfully"}
        assert (await client.get(url)).status_code == 404
        assert (await client.delete(url, headers=admin)).status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# Favorites
# ═══════════════════════════════════════════════════════════════════════════

class TestFavorites:

    @pytest.mark.asyncio
    async def test_add_and_remove(self, client, customer, published_design):
        url = f"/api/designs/{published_design['id']}/favorite"
        resp = await client.post(url, headers=customer)
        assert resp.json() == {"message": "Design added to favorites"}

        resp = await client.post(url, headers=customer)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Design already in favorites"

        resp = await client.delete(url, headers=customer)
        assert resp.json() == {"message": "Design removed from favorites"}
        assert (await client.post(url, headers=customer)).status_code == 200

    @pytest.mark.asyncio
    async def test_favorites_are_per_user(self, client, customer, other_customer, published_design):
        url = f"/api/designs/{published_design['id']}/favorite"
        assert (await client.post(url, headers=customer)).status_code == 200
        assert (await client.post(url, headers=other_customer)).status_code == 200

    @pytest.mark.asyncio
    async def test_requires_login(self, client, published_design):
        resp = await client.post(f"/api/designs/{published_design['id']}/favorite")
        assert resp.status_code == 401
        assert resp.json()["message"] == "No token, authorization denied"

    @pytest.mark.asyncio
    async def test_missing_design(self, client, customer):
        assert (await client.post("/api/designs/nope/favorite", headers=customer)).status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# Seed
# ═══════════════════════════════════════════════════════════════════════════

class TestSeed:

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, store):
        service = DesignService(store)
        inserted, skipped = await seed_designs(service, "admin-1")
        assert (inserted, skipped) == (5, 0)
        assert await seed_designs(service, "admin-1") == (0, 5)
        assert await store.count(DESIGNS) == 5

    @pytest.mark.asyncio
    async def test_seeded_catalogue_is_browsable(self, client, store):
        await seed_designs(DesignService(store), "admin-1")
        body = (await client.get("/api/designs")).json()
        assert body["pagination"]["totalItems"] == 5
        assert len((await client.get("/api/designs/featured")).json()) == 3
