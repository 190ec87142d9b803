"""Fees API through the ASGI app (no database involved)."""
from httpx import AsyncClient


class TestFeeEndpoints:
    async def test_quote(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/quote", params={"price": "100"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        data = body["data"]
        assert data["creator_fee"] == "2.50000000"
        assert data["buyer_fee"] == "1.50000000"
        assert data["user_payable"] == "101.50000000"
        assert data["quantity"] == 1

    async def test_bulk_quote(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/quote", params={"price": "0.1", "quantity": 3})
        data = resp.json()["data"]
        assert data["purchase_price"] == "0.30000000"
        assert data["quantity"] == 3

    async def test_invalid_price_returns_zero_quote(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/quote", params={"price": "abc"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total_fees"] == "0.00000000"
        assert data["user_payable"] == "0.00000000"
        assert data["purchase_price"] == "0.00000000"

    async def test_tiny_amounts_stay_fixed_point(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/quote", params={"price": "0.0000004"})
        data = resp.json()["data"]
        assert data["creator_fee"] == "0.00000001"
        assert data["purchase_price"] == "0.00000040"

    async def test_quantity_validated(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/quote", params={"price": "1", "quantity": 0})
        assert resp.status_code == 422

    async def test_breakdown(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/breakdown", params={"price": "100"})
        data = resp.json()["data"]
        assert data["creator_fee"]["label"] == "Creator Fee"
        assert data["creator_fee"]["percentage"] == 2.5
        assert data["total"]["percentage"] == 4.0
        assert data["summary"]["creator_receives"] == "97.50000000"

    async def test_refund_bases(self, client: AsyncClient) -> None:
        legacy = (await client.get("/api/v1/fees/refund", params={"amount": "104"})).json()["data"]
        forward = (
            await client.get("/api/v1/fees/refund", params={"amount": "101.5", "basis": "FORWARD"})
        ).json()["data"]
        assert legacy["basis"] == "LEGACY"
        assert legacy["creator_fee_refund"] == "2.50000000"
        assert forward["basis"] == "FORWARD"
        assert forward["creator_fee_refund"] == "2.50000000"
        assert forward["platform_fee_refund"] == "1.50000000"

    async def test_refund_unknown_basis(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/refund", params={"amount": "1", "basis": "OTHER"})
        assert resp.status_code == 422

    async def test_config(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/config")
        data = resp.json()["data"]
        assert data["creator_fee_bps"] == 250
        assert data["buyer_fee_bps"] == 150
        assert data["total_fee_percent"] == 4.0
        assert "ETH" in data["currencies"]

    async def test_request_id_header_matches_envelope(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/fees/config")
        assert resp.headers["X-Request-ID"] == resp.json()["request_id"]


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.json() == {"status": "ok", "version": "0.1.0"}
