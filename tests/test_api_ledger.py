from decimal import Decimal

import pytest


def amount(value):
    return Decimal(str(value))


def settlement_row(client, headers, partner_id):
    resp = client.get("/api/v1/partners/settlement", headers=headers)
    assert resp.status_code == 200, resp.text
    return next(r for r in resp.json()["data"]["settlement"] if r["partner_id"] == partner_id)


@pytest.fixture
def sold_watch(client, operator, partners):
    """1000 + 200 cost basis sold at 1500 and fully paid in two instalments."""
    resp = client.post("/api/v1/inventory/", json={"cost": "1000", "serial": "X123"}, headers=operator)
    assert resp.status_code == 200, resp.text
    item_id = resp.json()["data"]["id"]

    assert client.post(f"/api/v1/inventory/{item_id}/approve", headers=operator).status_code == 200
    resp = client.post(
        f"/api/v1/inventory/{item_id}/costs",
        json={"cost_type": "Repair", "amount": "200"},
        headers=operator,
    )
    assert amount(resp.json()["data"]["total_cost_basis"]) == Decimal("1200")

    resp = client.post("/api/v1/sales/", json={"watch_id": item_id, "agreed_price": "1500"}, headers=operator)
    assert resp.status_code == 200, resp.text
    sale_id = resp.json()["data"]["id"]

    resp = client.post(f"/api/v1/sales/{sale_id}/payments", json={"amount": "1000"}, headers=operator)
    assert resp.json()["data"]["status"] == "Partial"
    resp = client.post(f"/api/v1/sales/{sale_id}/payments", json={"amount": "500"}, headers=operator)
    assert resp.json()["data"]["status"] == "Liquidated"

    return {"item_id": item_id, "sale_id": sale_id}


def test_item_lifecycle_is_persisted(client, operator, sold_watch):
    resp = client.get(f"/api/v1/inventory/{sold_watch['item_id']}", headers=operator)
    item = resp.json()["data"]

    assert item["stage"] == "liquidated"
    assert item["status"] == "Sold"
    assert item["validated_by"] == "operator"
    assert [c["cost_type"] for c in item["additional_costs"]] == ["Repair"]

    sale = client.get(f"/api/v1/sales/{sold_watch['sale_id']}", headers=operator).json()["data"]
    assert amount(sale["amount_paid"]) == Decimal("1500")
    assert amount(sale["balance_due"]) == Decimal("0")
    assert len(sale["payments"]) == 2


def test_profit_is_split_by_participation(client, director, partners, sold_watch):
    assert amount(settlement_row(client, director, partners["Ana"])["corresponds"]) == Decimal("120")
    assert amount(settlement_row(client, director, partners["Beto"])["corresponds"]) == Decimal("180")

    resp = client.get("/api/v1/partners/allocations", headers=director)
    [allocation] = resp.json()["data"]["allocations"]
    assert amount(allocation["profit"]) == Decimal("300")


def test_distribution_reduces_pending(client, operator, director, partners, sold_watch):
    resp = client.post(
        f"/api/v1/partners/{partners['Ana']}/movements",
        json={"movement_type": "Distribution", "amount": "100", "concept": "Payout"},
        headers=operator,
    )
    assert resp.status_code == 200, resp.text
    assert amount(resp.json()["data"]["movements"][0]["amount"]) == Decimal("-100")

    row = settlement_row(client, director, partners["Ana"])
    assert amount(row["distributed"]) == Decimal("100")
    assert amount(row["pending"]) == Decimal("20")


def test_item_cannot_be_sold_twice(client, operator, sold_watch):
    resp = client.post(
        "/api/v1/sales/",
        json={"watch_id": sold_watch["item_id"], "agreed_price": "2000"},
        headers=operator,
    )
    assert resp.status_code == 400

    sales = client.get("/api/v1/sales/", headers=operator).json()["data"]["sales"]
    assert [s["id"] for s in sales] == [sold_watch["sale_id"]]


def test_liquidated_sale_rejects_payment(client, operator, sold_watch):
    resp = client.post(f"/api/v1/sales/{sold_watch['sale_id']}/payments", json={"amount": "1"}, headers=operator)
    assert resp.status_code == 400


def test_rejected_command_writes_nothing(client, director, partners):
    resp = client.put(
        "/api/v1/partners/",
        json={"partners": [
            {"id": partners["Ana"], "name": "Ana", "participation": "50"},
            {"name": "Carla", "participation": "10"},
        ]},
        headers=director,
    )
    assert resp.status_code == 400

    table = client.get("/api/v1/partners/", headers=director).json()["data"]["partners"]
    assert sorted((p["name"], amount(p["participation"])) for p in table) == [
        ("Ana", Decimal("40")),
        ("Beto", Decimal("60")),
    ]


def test_opportunity_cannot_be_sold(client, operator, partners):
    item_id = client.post("/api/v1/inventory/", json={"cost": "700"}, headers=operator).json()["data"]["id"]

    resp = client.post("/api/v1/sales/", json={"watch_id": item_id, "agreed_price": "900"}, headers=operator)
    assert resp.status_code == 400


def test_validation_errors(client, operator, partners):
    assert client.post("/api/v1/inventory/", json={"cost": "-5"}, headers=operator).status_code == 400
    resp = client.post(
        "/api/v1/inventory/",
        json={"cost": "5", "acquisition_mode": "contribution", "contributing_partner_id": "P-NOPE"},
        headers=operator,
    )
    assert resp.status_code == 400
    assert client.get("/api/v1/inventory/W-NOPE", headers=operator).status_code == 404
    resp = client.post(
        f"/api/v1/partners/{partners['Ana']}/movements",
        json={"movement_type": "Contribution", "amount": "0"},
        headers=operator,
    )
    assert resp.status_code == 400


def test_contribution_item_goes_to_contributor(client, operator, director, partners):
    resp = client.post(
        "/api/v1/inventory/",
        json={
            "cost": "1000",
            "status": "Available",
            "acquisition_mode": "contribution",
            "contributing_partner_id": partners["Ana"],
        },
        headers=operator,
    )
    item_id = resp.json()["data"]["id"]
    sale_id = client.post(
        "/api/v1/sales/", json={"watch_id": item_id, "agreed_price": "1300"}, headers=operator
    ).json()["data"]["id"]
    client.post(f"/api/v1/sales/{sale_id}/payments", json={"amount": "1300"}, headers=operator)

    assert amount(settlement_row(client, director, partners["Ana"])["corresponds"]) == Decimal("300")
    assert amount(settlement_row(client, director, partners["Beto"])["corresponds"]) == Decimal("0")


def test_operator_cannot_configure_partners(client, operator, partners):
    resp = client.put(
        "/api/v1/partners/",
        json={"partners": [{"name": "Solo", "participation": "100"}]},
        headers=operator,
    )
    assert resp.status_code == 403


def test_operator_cannot_read_reports(client, operator, director, partners):
    assert client.get("/api/v1/reports/sales", headers=operator).status_code == 403
    assert client.get("/api/v1/reports/sales", headers=director).status_code == 200
    assert client.get("/api/v1/reports/dashboard", headers=operator).status_code == 200


def test_investor_reads_only_own_settlement(client, make_user, partners, sold_watch):
    investor = make_user("investor", "ana@ledger.test", partner_id=partners["Ana"])

    resp = client.get(f"/api/v1/partners/{partners['Ana']}/settlement", headers=investor)
    assert resp.status_code == 200
    assert amount(resp.json()["data"]["corresponds"]) == Decimal("120")

    assert client.get(f"/api/v1/partners/{partners['Beto']}/settlement", headers=investor).status_code == 403
    assert client.get("/api/v1/partners/settlement", headers=investor).status_code == 403
    assert client.get("/api/v1/inventory/", headers=investor).status_code == 403


def test_dashboard_uses_catalog_labels(client, operator, partners):
    brand = client.post("/api/v1/catalogs/brands", json={"name": "Rolex"}, headers=operator).json()["data"]
    model = client.post(
        "/api/v1/catalogs/models", json={"brand_id": brand["id"], "name": "Submariner"}, headers=operator
    ).json()["data"]
    reference = client.post(
        "/api/v1/catalogs/references", json={"model_id": model["id"], "ref": "124060"}, headers=operator
    ).json()["data"]
    client.post("/api/v1/inventory/", json={"cost": "9000", "reference_id": reference["id"]}, headers=operator)

    data = client.get("/api/v1/reports/dashboard", headers=operator).json()["data"]

    assert data["counts"]["opportunity"] == 1
    [alert] = data["alerts"]
    assert alert["type"] == "info"
    assert "Rolex Submariner 124060" in alert["message"]


def test_default_cost_types_are_seeded(client, operator):
    names = [c["name"] for c in client.get("/api/v1/catalogs/cost-types", headers=operator).json()["data"]["cost_types"]]
    assert "Shipping" in names
    assert "Authentication" in names


def test_contacts_crud(client, operator):
    resp = client.post("/api/v1/contacts/clients", json={"name": "Luis", "city": "Monterrey", "tier": "VIP"}, headers=operator)
    assert resp.status_code == 200
    client_id = resp.json()["data"]["id"]

    resp = client.put(f"/api/v1/contacts/clients/{client_id}", json={"phone": "555-0100"}, headers=operator)
    assert resp.json()["data"]["phone"] == "555-0100"

    clients = client.get("/api/v1/contacts/clients?tier=VIP", headers=operator).json()["data"]["clients"]
    assert [c["id"] for c in clients] == [client_id]

    resp = client.post("/api/v1/contacts/suppliers", json={"name": "Dealer Uno", "rating": 9}, headers=operator)
    assert resp.status_code == 422


def test_house_item_needs_a_house_partner(client, operator, director, partners):
    resp = client.post(
        "/api/v1/inventory/",
        json={"cost": "800", "status": "Available", "acquisition_mode": "house"},
        headers=operator,
    )
    assert resp.status_code == 400

    assert client.get("/api/v1/inventory/", headers=operator).json()["data"]["items"] == []
    assert client.get("/api/v1/partners/settlement", headers=director).status_code == 200


def test_house_flag_stays_while_house_items_exist(client, operator, director, partners):
    resp = client.put(
        "/api/v1/partners/",
        json={"partners": [
            {"id": partners["Ana"], "name": "Ana", "participation": "40", "is_house": True},
            {"id": partners["Beto"], "name": "Beto", "participation": "60"},
        ]},
        headers=director,
    )
    assert resp.status_code == 200, resp.text

    resp = client.post(
        "/api/v1/inventory/",
        json={"cost": "800", "status": "Available", "acquisition_mode": "house"},
        headers=operator,
    )
    assert resp.status_code == 200, resp.text
    item_id = resp.json()["data"]["id"]

    resp = client.put(
        "/api/v1/partners/",
        json={"partners": [{"id": partners["Ana"], "name": "Ana", "participation": "40", "is_house": False}]},
        headers=director,
    )
    assert resp.status_code == 400

    sale_id = client.post(
        "/api/v1/sales/", json={"watch_id": item_id, "agreed_price": "1000"}, headers=operator
    ).json()["data"]["id"]
    client.post(f"/api/v1/sales/{sale_id}/payments", json={"amount": "1000"}, headers=operator)

    assert amount(settlement_row(client, director, partners["Ana"])["corresponds"]) == Decimal("200")
    assert amount(settlement_row(client, director, partners["Beto"])["corresponds"]) == Decimal("0")


def test_participation_beyond_cents_is_rejected(client, director, partners):
    resp = client.put(
        "/api/v1/partners/",
        json={"partners": [
            {"id": partners["Ana"], "name": "Ana", "participation": "33.333"},
            {"id": partners["Beto"], "name": "Beto", "participation": "33.333"},
            {"name": "Carla", "participation": "33.334"},
        ]},
        headers=director,
    )
    assert resp.status_code == 422

    table = client.get("/api/v1/partners/", headers=director).json()["data"]["partners"]
    assert sum(amount(p["participation"]) for p in table) == Decimal("100")


def test_amounts_beyond_cents_are_rejected(client, operator, partners):
    resp = client.post("/api/v1/inventory/", json={"cost": "10.005"}, headers=operator)
    assert resp.status_code == 422

    item_id = client.post(
        "/api/v1/inventory/", json={"cost": "50", "status": "Available"}, headers=operator
    ).json()["data"]["id"]
    resp = client.post("/api/v1/sales/", json={"watch_id": item_id, "agreed_price": "100.004"}, headers=operator)
    assert resp.status_code == 422

    resp = client.post("/api/v1/sales/", json={"watch_id": item_id, "agreed_price": "100.40"}, headers=operator)
    assert resp.status_code == 200, resp.text
    assert amount(resp.json()["data"]["agreed_price"]) == Decimal("100.40")
