import pytest


SEED_ROUTES = [
    {"route_id": "R001", "vessel_type": "Container", "fuel_type": "HFO", "year": 2024,
     "ghg_intensity": 91.0, "fuel_consumption": 5000, "distance": 12000, "is_baseline": True},
    {"route_id": "R002", "vessel_type": "BulkCarrier", "fuel_type": "LNG", "year": 2024,
     "ghg_intensity": 88.0, "fuel_consumption": 4800, "distance": 11500},
    {"route_id": "R003", "vessel_type": "Tanker", "fuel_type": "HFO", "year": 2024,
     "ghg_intensity": 93.5, "fuel_consumption": 5200, "distance": 13000},
]


async def seed_routes(client):
    for payload in SEED_ROUTES:
        resp = await client.post("/api/v1/routes", json=payload)
        assert resp.status_code == 201, resp.text


@pytest.mark.asyncio
@pytest.mark.integration
async def test_routes_and_comparison(client):
    await seed_routes(client)

    resp = await client.get("/api/v1/routes")
    assert resp.status_code == 200
    routes = resp.json()
    assert [r["route_id"] for r in routes] == ["R001", "R002", "R003"]
    assert [r["is_baseline"] for r in routes] == [True, False, False]

    resp = await client.get("/api/v1/routes/comparison", params={"year": 2025})
    assert resp.status_code == 200
    body = resp.json()
    assert body["baseline"]["route_id"] == "R001"
    assert body["target"] == pytest.approx(89.3368)
    comparisons = {c["route_id"]: c for c in body["comparisons"]}
    assert comparisons["R002"]["percent_diff_from_baseline"] == pytest.approx(-3.30)
    assert comparisons["R002"]["compliant"] is True
    assert comparisons["R003"]["compliant"] is False

    resp = await client.get("/api/v1/routes/comparison", params={"year": 2040})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_set_baseline_endpoint(client):
    await seed_routes(client)

    resp = await client.post("/api/v1/routes/R002/baseline")
    assert resp.status_code == 200
    assert resp.json()["is_baseline"] is True

    routes = (await client.get("/api/v1/routes")).json()
    assert [r["route_id"] for r in routes if r["is_baseline"]] == ["R002"]

    resp = await client.post("/api/v1/routes/R999/baseline")
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_route_rejected(client):
    await seed_routes(client)
    resp = await client.post("/api/v1/routes", json=SEED_ROUTES[1])
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_compliance_balance_endpoint(client):
    resp = await client.get("/api/v1/compliance/cb", params={"ship_id": "SHIP001", "year": 2025})
    assert resp.status_code == 409

    await seed_routes(client)

    resp = await client.get("/api/v1/compliance/cb", params={"ship_id": "SHIP001", "year": 2025})
    assert resp.status_code == 200
    body = resp.json()
    assert body["route_id"] == "R001"
    assert body["energy_in_scope"] == pytest.approx(205_000_000)
    assert body["compliance_balance"] == pytest.approx(-340_956_000)
    assert body["is_compliant"] is False
    assert body["penalty"] == pytest.approx(818_294.40)

    resp = await client.get(
        "/api/v1/compliance/cb",
        params={"ship_id": "SHIP001", "year": 2025, "route_id": "R999"},
    )
    assert resp.status_code == 404

    resp = await client.get("/api/v1/compliance/cb", params={"ship_id": "SHIP001", "year": 2024})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_bank_and_borrow_flow(client):
    resp = await client.post(
        "/api/v1/banking/bank",
        json={"ship_id": "SHIP001", "year": 2025, "amount_tonnes": 100},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["previous_balance"] == 0
    assert body["transaction"]["resulting_balance"] == pytest.approx(100_000_000)

    resp = await client.post(
        "/api/v1/banking/borrow",
        json={"ship_id": "SHIP001", "year": 2026, "amount": 50_000_000, "source_year": 2025},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["previous_balance_tonnes"] == pytest.approx(100.0)
    assert body["transaction"]["resulting_balance"] == pytest.approx(50_000_000)
    assert body["transaction"]["transaction_type"] == "BORROW"

    # overdraw is rejected and nothing is written
    resp = await client.post(
        "/api/v1/banking/borrow",
        json={"ship_id": "SHIP001", "year": 2026, "amount_tonnes": 51, "source_year": 2025},
    )
    assert resp.status_code == 409
    assert "Insufficient banked balance" in resp.json()["detail"]

    resp = await client.get("/api/v1/banking/history", params={"ship_id": "SHIP001"})
    assert resp.status_code == 200
    history = resp.json()
    assert history["total_transactions"] == 2
    assert history["current_balance_tonnes"] == pytest.approx(50.0)

    resp = await client.get("/api/v1/banking/reconcile/SHIP001")
    assert resp.status_code == 200
    assert resp.json()["is_consistent"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_banking_validation(client):
    resp = await client.post("/api/v1/banking/bank", json={"ship_id": "SHIP001", "year": 2025})
    assert resp.status_code == 422

    resp = await client.post(
        "/api/v1/banking/bank",
        json={"ship_id": "SHIP001", "year": 2025, "amount": -5},
    )
    assert resp.status_code == 400

    resp = await client.post(
        "/api/v1/banking/borrow",
        json={"ship_id": "SHIP001", "year": 2025, "amount": 5, "source_year": 2025},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pool_lifecycle(client):
    await seed_routes(client)

    resp = await client.post("/api/v1/pools", json={
        "pool_name": "Fleet A",
        "year": 2025,
        "ships": [
            {"ship_id": "SHIP001"},
            {"ship_id": "SHIP002", "route_id": "R002"},
            {"ship_id": "SHIP003", "route_id": "R002"},
        ],
        "created_by": "ops",
    })
    assert resp.status_code == 201, resp.text
    pool = resp.json()["pool"]
    pool_id = pool["id"]
    assert pool["member_count"] == 3
    assert pool["is_compliant"] is True
    assert pool["penalty"] == 0

    # name collision
    resp = await client.post("/api/v1/pools", json={
        "pool_name": "Fleet A",
        "year": 2025,
        "ships": [{"ship_id": "X1"}, {"ship_id": "X2"}],
    })
    assert resp.status_code == 400

    resp = await client.delete(f"/api/v1/pools/{pool_id}/members/SHIP003")
    assert resp.status_code == 200
    body = resp.json()
    assert body["member_count"] == 2
    assert body["total_cb"] == pytest.approx(-77_873_760)
    assert body["is_compliant"] is False
    assert body["penalty_per_member"] == pytest.approx(body["penalty"] / 2, abs=0.01)

    resp = await client.delete(f"/api/v1/pools/{pool_id}/members/SHIP002")
    assert resp.status_code == 409

    resp = await client.post(f"/api/v1/pools/{pool_id}/members", json={"ship_id": "SHIP004", "route_id": "R002"})
    assert resp.status_code == 200
    assert resp.json()["member_count"] == 3

    resp = await client.get("/api/v1/pools/by-name/Fleet A")
    assert resp.status_code == 200
    assert resp.json()["id"] == pool_id

    resp = await client.get("/api/v1/pools", params={"ship_id": "SHIP004"})
    assert resp.json()["total_pools"] == 1
    resp = await client.get("/api/v1/pools", params={"year": 2026})
    assert resp.json()["total_pools"] == 0

    resp = await client.delete(f"/api/v1/pools/{pool_id}")
    assert resp.status_code == 204
    resp = await client.get(f"/api/v1/pools/{pool_id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pool_membership_validation(client):
    await seed_routes(client)

    resp = await client.post("/api/v1/pools", json={
        "pool_name": "Solo",
        "year": 2025,
        "ships": [{"ship_id": "SHIP001"}],
    })
    assert resp.status_code == 400

    resp = await client.post("/api/v1/pools", json={
        "pool_name": "Dup",
        "year": 2025,
        "ships": [{"ship_id": "SHIP001"}, {"ship_id": "SHIP001"}],
    })
    assert resp.status_code == 400

    resp = await client.get("/api/v1/pools")
    assert resp.json()["total_pools"] == 0


def raw_json(body: str) -> dict:
    # body may carry NaN / Infinity literals
    return {"content": body, "headers": {"content-type": "application/json"}}


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("field", ["ghg_intensity", "fuel_consumption", "distance"])
async def test_non_finite_route_values_rejected(client, field):
    values = {"ghg_intensity": "91.0", "fuel_consumption": "5000", "distance": "12000"}
    values[field] = "Infinity"
    body = (
        '{"route_id": "R009", "vessel_type": "Container", "fuel_type": "HFO", "year": 2024, '
        f'"ghg_intensity": {values["ghg_intensity"]}, '
        f'"fuel_consumption": {values["fuel_consumption"]}, '
        f'"distance": {values["distance"]}, "is_baseline": true}}'
    )

    resp = await client.post("/api/v1/routes", **raw_json(body))
    assert resp.status_code == 422

    assert (await client.get("/api/v1/routes")).json() == []


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "amount_field",
    [
        '"amount": NaN',
        '"amount": Infinity',
        '"amount": -Infinity',
        '"amount": "Infinity"',
        '"amount": "ten"',
        '"amount_tonnes": Infinity',
    ],
)
async def test_non_finite_banking_amount_rejected(client, amount_field):
    bank = f'{{"ship_id": "SHIP001", "year": 2025, {amount_field}}}'
    borrow = f'{{"ship_id": "SHIP001", "year": 2026, "source_year": 2025, {amount_field}}}'

    resp = await client.post("/api/v1/banking/bank", **raw_json(bank))
    assert resp.status_code == 422
    resp = await client.post("/api/v1/banking/borrow", **raw_json(borrow))
    assert resp.status_code == 422

    resp = await client.get("/api/v1/banking/history", params={"ship_id": "SHIP001"})
    assert resp.status_code == 200
    assert resp.json()["total_transactions"] == 0
    assert resp.json()["current_balance"] == 0
