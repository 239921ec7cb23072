"""
Quote API tests: create, server-side totals, ownership, edit/cancel rules,
status workflow, PDF download.
"""

import pytest


def _quote_payload(**overrides):
    payload = {
        "items": [
            {"item_type": "Alloy Wheels", "size": "18 in", "quantity": 4, "price": 45.00},
            # No price: priced from dimensions: (10,10,10) → $90.00
            {"item_type": "Bracket", "quantity": 6, "height": 10, "width": 10, "depth": 10},
        ],
        "coating": {"type": "standard", "color": "Gloss Black", "finish": "Smooth"},
        "additional_services": {"sandblasting": True, "priming": False},
        "contact_info": {"name": "Jane Doe", "email": "jane@example.com", "phone": "555-0100"},
    }
    payload.update(overrides)
    return payload


def _create_quote(client, headers, **overrides):
    response = client.post("/api/quotes/", json=_quote_payload(**overrides), headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


# ============================================================
# Create
# ============================================================

def test_create_quote_requires_auth(client):
    response = client.post("/api/quotes/", json=_quote_payload())
    assert response.status_code == 401


def test_create_quote_computes_totals(client, auth_headers):
    quote = _create_quote(client, auth_headers)

    assert quote["quote_number"].startswith("PP-")
    assert quote["status"] == "pending"
    assert quote["status_label"] == "Pending Review"
    assert quote["editable"] is True

    wheels, bracket = quote["items"]
    assert wheels["price"] == 45.0
    assert wheels["line_total"] == 180.0
    assert bracket["price"] == 90.0
    assert bracket["surface_area"] == 600
    assert bracket["line_total"] == 540.0

    # 720 subtotal, 10 units → 5%, +50 sandblasting
    assert quote["subtotal"] == 720.0
    assert quote["discount_percent"] == 5.0
    assert quote["discount_amount"] == 36.0
    assert quote["services_total"] == 50.0
    assert quote["total"] == 734.0


def test_create_quote_with_promo(client, auth_headers):
    quote = _create_quote(client, auth_headers, promo_code="WELCOME10")
    assert quote["promo_code"] == "WELCOME10"
    assert quote["discount_percent"] == 15.0
    assert quote["total"] == 662.0


def test_dimension_pricing_uses_current_config(client, auth_headers, admin_headers):
    client.patch("/api/pricing/config", json={"material_multiplier": 2}, headers=admin_headers)
    quote = _create_quote(client, auth_headers)
    assert quote["items"][1]["price"] == 180.0


def test_create_quote_validation(client, auth_headers):
    assert client.post("/api/quotes/", json=_quote_payload(items=[]), headers=auth_headers).status_code == 422

    bad_qty = _quote_payload(items=[{"item_type": "Wheel", "quantity": 0, "price": 10}])
    assert client.post("/api/quotes/", json=bad_qty, headers=auth_headers).status_code == 422

    bad_email = _quote_payload(contact_info={"name": "Jane", "email": "not-an-email", "phone": "555"})
    assert client.post("/api/quotes/", json=bad_email, headers=auth_headers).status_code == 422


def test_create_quote_rejects_unpriceable_item(client, auth_headers):
    huge = _quote_payload(items=[{"item_type": "Beam", "quantity": 1, "height": 1e200, "width": 1e200, "depth": 1e200}])
    response = client.post("/api/quotes/", json=huge, headers=auth_headers)
    assert response.status_code == 422
    assert client.get("/api/quotes/mine", headers=auth_headers).json() == []


def test_create_quote_cannot_skip_review(client, auth_headers):
    response = client.post("/api/quotes/", json=_quote_payload(status="approved"), headers=auth_headers)
    assert response.status_code == 400


def test_quote_numbers_are_unique(client, auth_headers):
    first = _create_quote(client, auth_headers)
    second = _create_quote(client, auth_headers)
    assert first["quote_number"] != second["quote_number"]


# ============================================================
# Visibility
# ============================================================

def test_list_my_quotes(client, auth_headers, other_headers):
    _create_quote(client, auth_headers)
    _create_quote(client, auth_headers)
    _create_quote(client, other_headers)

    mine = client.get("/api/quotes/mine", headers=auth_headers).json()
    assert len(mine) == 2
    # Newest first
    assert mine[0]["id"] > mine[1]["id"]


def test_other_customer_cannot_see_quote(client, auth_headers, other_headers):
    quote = _create_quote(client, auth_headers)
    assert client.get(f"/api/quotes/{quote['id']}", headers=other_headers).status_code == 403
    assert client.get(f"/api/quotes/{quote['id']}", headers=auth_headers).status_code == 200


def test_admin_sees_all_quotes(client, auth_headers, other_headers, admin_headers):
    first = _create_quote(client, auth_headers)
    _create_quote(client, other_headers)

    assert client.get("/api/quotes/", headers=auth_headers).status_code == 403
    assert len(client.get("/api/quotes/", headers=admin_headers).json()) == 2
    assert client.get(f"/api/quotes/{first['id']}", headers=admin_headers).status_code == 200


def test_admin_list_filters_by_status(client, auth_headers, admin_headers):
    _create_quote(client, auth_headers)
    _create_quote(client, auth_headers, status="draft")

    drafts = client.get("/api/quotes/?status=draft", headers=admin_headers).json()
    assert [q["status"] for q in drafts] == ["draft"]


def test_missing_quote_is_404(client, auth_headers):
    assert client.get("/api/quotes/9999", headers=auth_headers).status_code == 404


# ============================================================
# Edit + cancel
# ============================================================

def test_edit_recomputes_totals(client, auth_headers):
    quote = _create_quote(client, auth_headers)
    response = client.patch(f"/api/quotes/{quote['id']}", json={
        "items": [{"item_type": "Railing", "quantity": 25, "price": 40}],
        "additional_services": {},
    }, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data["items"]) == 1
    assert data["subtotal"] == 1000.0
    assert data["services_total"] == 0.0
    assert data["total"] == 900.0
    assert data["updated_by"] == "customer@example.com"


def test_edit_keeps_unsent_fields(client, auth_headers):
    quote = _create_quote(client, auth_headers)
    response = client.patch(f"/api/quotes/{quote['id']}", json={"promo_code": "WELCOME10"}, headers=auth_headers)
    data = response.json()
    assert len(data["items"]) == 2
    assert data["coating"]["color"] == "Gloss Black"
    assert data["total"] == 662.0


def test_customer_cannot_edit_after_approval(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    client.post(f"/api/quotes/{quote['id']}/advance", headers=admin_headers)

    response = client.patch(f"/api/quotes/{quote['id']}", json={"promo_code": "WELCOME10"}, headers=auth_headers)
    assert response.status_code == 400

    # Admin still can
    response = client.patch(f"/api/quotes/{quote['id']}", json={"promo_code": "WELCOME10"}, headers=admin_headers)
    assert response.status_code == 200


def test_customer_cancels_pending_quote(client, auth_headers):
    quote = _create_quote(client, auth_headers)
    response = client.post(f"/api/quotes/{quote['id']}/cancel", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["cancellable"] is False

    # Already cancelled
    assert client.post(f"/api/quotes/{quote['id']}/cancel", headers=auth_headers).status_code == 400


def test_cannot_cancel_once_coating(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    client.put(f"/api/quotes/{quote['id']}/status", json={"status": "coating"}, headers=admin_headers)
    assert client.post(f"/api/quotes/{quote['id']}/cancel", headers=auth_headers).status_code == 400


def test_other_customer_cannot_cancel(client, auth_headers, other_headers):
    quote = _create_quote(client, auth_headers)
    assert client.post(f"/api/quotes/{quote['id']}/cancel", headers=other_headers).status_code == 403


# ============================================================
# Status workflow (admin)
# ============================================================

def test_status_update_requires_admin(client, auth_headers):
    quote = _create_quote(client, auth_headers)
    response = client.put(f"/api/quotes/{quote['id']}/status", json={"status": "approved"}, headers=auth_headers)
    assert response.status_code == 403


def test_status_update_with_tracking(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    response = client.put(f"/api/quotes/{quote['id']}/status", json={
        "status": "delivered",
        "tracking_number": "1Z999",
    }, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "delivered"
    assert response.json()["tracking_number"] == "1Z999"
    assert response.json()["updated_by"] == "admin@powderpro.test"


def test_status_update_rejects_unknown_status(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    response = client.put(f"/api/quotes/{quote['id']}/status", json={"status": "teleported"}, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.parametrize("steps,expected", [
    (1, "approved"),
    (2, "in_preparation"),
    (5, "quality_check"),
    (8, "completed"),
])
def test_advance(client, auth_headers, admin_headers, steps, expected):
    quote = _create_quote(client, auth_headers)
    for _ in range(steps):
        response = client.post(f"/api/quotes/{quote['id']}/advance", headers=admin_headers)
        assert response.status_code == 200
    assert response.json()["status"] == expected


def test_advance_past_completed_fails(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    client.put(f"/api/quotes/{quote['id']}/status", json={"status": "completed"}, headers=admin_headers)
    assert client.post(f"/api/quotes/{quote['id']}/advance", headers=admin_headers).status_code == 400


def test_revert(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    client.post(f"/api/quotes/{quote['id']}/advance", headers=admin_headers)
    response = client.post(f"/api/quotes/{quote['id']}/revert", headers=admin_headers)
    assert response.json()["status"] == "pending"

    client.post(f"/api/quotes/{quote['id']}/revert", headers=admin_headers)
    # Draft is the start of the workflow
    assert client.post(f"/api/quotes/{quote['id']}/revert", headers=admin_headers).status_code == 400


def test_cancelled_quote_cannot_advance(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    client.post(f"/api/quotes/{quote['id']}/cancel", headers=auth_headers)
    assert client.post(f"/api/quotes/{quote['id']}/advance", headers=admin_headers).status_code == 400


def test_delete_quote(client, auth_headers, admin_headers):
    quote = _create_quote(client, auth_headers)
    assert client.delete(f"/api/quotes/{quote['id']}", headers=auth_headers).status_code == 403
    assert client.delete(f"/api/quotes/{quote['id']}", headers=admin_headers).json() == {"ok": True}
    assert client.get(f"/api/quotes/{quote['id']}", headers=admin_headers).status_code == 404


# ============================================================
# PDF
# ============================================================

def test_download_pdf(client, auth_headers):
    quote = _create_quote(client, auth_headers, promo_code="WELCOME10")
    response = client.get(f"/api/quotes/{quote['id']}/pdf", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f"Quote-{quote['quote_number']}.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_pdf_respects_ownership(client, auth_headers, other_headers):
    quote = _create_quote(client, auth_headers)
    assert client.get(f"/api/quotes/{quote['id']}/pdf", headers=other_headers).status_code == 403
