"""
Material catalog tests: seeding, listing, category filter, admin price edits.
"""

from powderpro.routers.materials import DEFAULT_MATERIALS, seed_materials


def test_seed_is_idempotent(db):
    assert seed_materials(db) == len(DEFAULT_MATERIALS)
    assert seed_materials(db) == 0


def test_seed_endpoint_requires_admin(client, auth_headers, admin_headers):
    assert client.get("/api/materials/seed", headers=auth_headers).status_code == 403
    response = client.get("/api/materials/seed", headers=admin_headers)
    assert response.json() == {"ok": True, "seeded": len(DEFAULT_MATERIALS)}


def test_list_and_filter(client, db):
    seed_materials(db)
    everything = client.get("/api/materials/").json()
    assert len(everything) == len(DEFAULT_MATERIALS)

    automotive = client.get("/api/materials/?category=automotive").json()
    assert {m["name"] for m in automotive} == {
        "Alloy Wheels", "Suspension Components", "Engine Components", "Body Panels",
    }


def test_categories_and_coating_types(client):
    categories = client.get("/api/materials/categories").json()
    assert "automotive" in [c["id"] for c in categories]

    coating = client.get("/api/materials/coating-types").json()
    multipliers = {t["id"]: t["multiplier"] for t in coating["types"]}
    assert multipliers["standard"] == 1.0
    assert multipliers["custom"] == 1.8
    assert "Gloss Black" in coating["colors"]
    assert "Textured" in coating["finishes"]


def test_admin_updates_price(client, db, admin_headers, auth_headers):
    seed_materials(db)
    wheels = next(m for m in client.get("/api/materials/").json() if m["name"] == "Alloy Wheels")

    assert client.patch(f"/api/materials/{wheels['id']}", json={"price_per_unit": 50}, headers=auth_headers).status_code == 403

    response = client.patch(f"/api/materials/{wheels['id']}", json={"price_per_unit": 50}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["price_per_unit"] == 50.0
    assert response.json()["unit"] == "wheel"


def test_update_missing_material(client, admin_headers):
    response = client.patch("/api/materials/999", json={"price_per_unit": 1}, headers=admin_headers)
    assert response.status_code == 404


def test_health(client):
    data = client.get("/api/health").json()
    assert data["status"] == "healthy"
    assert data["company"] == "PowderPro Coatings"
