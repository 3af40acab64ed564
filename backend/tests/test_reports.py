"""
Tests for stock reports, the dashboard, the audit log and initial data.
"""
import pytest

from models.branch import Branch
from models.category import InboundCategory
from models.profile import Profile
from populate_db import seed


@pytest.fixture
def product(user, make_product):
    return make_product(user, "Kayu", "Merah")


@pytest.fixture
def record(client, branch, outbound_category):
    """Post stock movements through the API; returns a function per direction."""
    def _in(headers, product, quantity, date=None, variant=None):
        payload = {"product_id": product.id, "quantity": quantity, "source_id": branch.id}
        if date:
            payload["date"] = date
        if variant:
            payload["variant"] = variant
        res = client.post("/stock-in", headers=headers, json=payload)
        assert res.status_code == 201
        return res.json()

    def _out(headers, product, quantity, date=None, variant=None):
        payload = {
            "product_id": product.id, "quantity": quantity,
            "destination_id": branch.id, "outbound_category_id": outbound_category.id,
        }
        if date:
            payload["date"] = date
        if variant:
            payload["variant"] = variant
        res = client.post("/stock-out", headers=headers, json=payload)
        assert res.status_code == 201
        return res.json()

    return _in, _out


class TestStockSummary:

    def test_balance_is_in_minus_out(self, client, user_headers, product, record):
        stock_in, stock_out = record
        stock_in(user_headers, product, 10)
        stock_in(user_headers, product, 5)
        stock_out(user_headers, product, 3)

        items = client.get("/reports/stock-summary", headers=user_headers).json()["items"]
        assert items == [{
            "product_id": product.id, "product_name": "Kayu", "variant": "Merah",
            "total_in": 15, "total_out": 3, "current_stock": 12,
        }]

    def test_negative_balance_is_reported(self, client, user_headers, product, record):
        _, stock_out = record
        stock_out(user_headers, product, 4)

        item = client.get("/reports/stock-summary", headers=user_headers).json()["items"][0]
        assert item["total_in"] == 0
        assert item["current_stock"] == -4

    def test_variants_are_separate_lines(self, client, user_headers, product, record):
        stock_in, stock_out = record
        stock_in(user_headers, product, 7)
        stock_in(user_headers, product, 2, variant="Biru")
        stock_out(user_headers, product, 1, variant="Biru")

        items = client.get("/reports/stock-summary", headers=user_headers).json()["items"]
        balances = {i["variant"]: i["current_stock"] for i in items}
        assert balances == {"Merah": 7, "Biru": 1}

    def test_date_range(self, client, user_headers, product, record):
        stock_in, stock_out = record
        stock_in(user_headers, product, 10, date="2026-01-01T10:00:00")
        stock_in(user_headers, product, 5, date="2026-01-05T23:30:00")
        stock_out(user_headers, product, 2, date="2026-01-06T08:00:00")

        res = client.get("/reports/stock-summary", headers=user_headers,
                         params={"date_from": "2026-01-02", "date_to": "2026-01-05"})
        assert res.status_code == 200
        item = res.json()["items"][0]
        assert (item["total_in"], item["total_out"], item["current_stock"]) == (5, 0, 5)

    def test_product_filter(self, client, user, user_headers, product, make_product, record):
        stock_in, _ = record
        paku = make_product(user, "Paku")
        stock_in(user_headers, product, 1)
        stock_in(user_headers, paku, 2)

        items = client.get("/reports/stock-summary", headers=user_headers,
                           params={"product_id": paku.id}).json()["items"]
        assert [i["product_name"] for i in items] == ["Paku"]

    def test_invalid_date(self, client, user_headers):
        res = client.get("/reports/stock-summary", headers=user_headers, params={"date_from": "kemarin"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Format tanggal tidak valid: kemarin"

    def test_scoped_to_owner(self, client, user_headers, other_headers, admin_headers, product, record):
        stock_in, _ = record
        stock_in(user_headers, product, 3)

        assert client.get("/reports/stock-summary", headers=other_headers).json()["items"] == []
        assert len(client.get("/reports/stock-summary", headers=admin_headers).json()["items"]) == 1


class TestMovementReports:

    def test_stock_in_report(self, client, user_headers, admin_headers, product, record):
        stock_in, _ = record
        stock_in(user_headers, product, 4, date="2026-02-01T09:00:00")
        stock_in(user_headers, product, 6, date="2026-02-03T09:00:00")

        rows = client.get("/reports/stock-in", headers=user_headers).json()
        assert [r["quantity"] for r in rows] == [6, 4]
        assert rows[0]["source"] == "Cabang Bandung"
        assert rows[0]["category"] == "-"
        assert rows[0]["owner_email"] is None

        rows = client.get("/reports/stock-in", headers=admin_headers).json()
        assert rows[0]["owner_email"] == "budi@gudang.co.id"

    def test_stock_out_report(self, client, user_headers, product, record):
        _, stock_out = record
        stock_out(user_headers, product, 2)
        rows = client.get("/reports/stock-out", headers=user_headers).json()
        assert rows[0]["destination"] == "Cabang Bandung"
        assert rows[0]["jenis"] == "Transfer"


class TestHistory:

    def test_product_is_required(self, client, user_headers):
        res = client.get("/reports/history", headers=user_headers)
        assert res.status_code == 400
        assert res.json()["detail"] == "Pilih produk terlebih dahulu"

    def test_newest_first(self, client, user_headers, product, record):
        stock_in, stock_out = record
        stock_in(user_headers, product, 1, date="2026-03-01T08:00:00")
        stock_out(user_headers, product, 2, date="2026-03-02T08:00:00")
        stock_in(user_headers, product, 3, date="2026-03-03T08:00:00")

        history = client.get("/reports/history", headers=user_headers, params={"product_id": product.id}).json()
        assert [(h["type"], h["quantity"]) for h in history] == [("in", 3), ("out", 2), ("in", 1)]

    def test_by_name_covers_every_variant(self, client, user, user_headers, product, make_product, record):
        stock_in, _ = record
        biru = make_product(user, "Kayu", "Biru")
        paku = make_product(user, "Paku")
        stock_in(user_headers, product, 1, date="2026-03-01T08:00:00")
        stock_in(user_headers, biru, 2, date="2026-03-02T08:00:00")
        stock_in(user_headers, paku, 9, date="2026-03-03T08:00:00")

        history = client.get("/reports/history", headers=user_headers, params={"product_name": "Kayu"}).json()
        assert [(h["variant"], h["quantity"]) for h in history] == [("Biru", 2), ("Merah", 1)]

    def test_product_names(self, client, user, other_user, user_headers, make_product):
        make_product(user, "Paku")
        make_product(user, "Kayu", "Merah")
        make_product(user, "Kayu", "Biru")
        make_product(other_user, "Semen")

        assert client.get("/reports/products", headers=user_headers).json() == ["Kayu", "Paku"]


class TestDashboard:

    def test_totals(self, client, user, user_headers, product, make_product, record):
        stock_in, stock_out = record
        make_product(user, "Paku")
        stock_in(user_headers, product, 10)
        stock_in(user_headers, product, 5)
        stock_out(user_headers, product, 3)

        stats = client.get("/dashboard", headers=user_headers).json()
        assert stats["total_products"] == 2
        assert stats["total_stock_in"] == 15
        assert stats["total_stock_out"] == 3
        assert stats["available_stock"] == 12
        assert len(stats["recent_stock_ins"]) == 2
        assert stats["recent_stock_outs"][0]["counterparty"] == "Cabang Bandung"

    def test_recent_movements_are_capped(self, client, user_headers, product, record):
        stock_in, _ = record
        for day in range(1, 8):
            stock_in(user_headers, product, day, date=f"2026-04-0{day}T08:00:00")

        stats = client.get("/dashboard", headers=user_headers).json()
        assert [m["quantity"] for m in stats["recent_stock_ins"]] == [7, 6, 5, 4, 3]

    def test_empty(self, client, other_headers):
        stats = client.get("/dashboard", headers=other_headers).json()
        assert stats["total_products"] == 0
        assert stats["available_stock"] == 0
        assert stats["recent_stock_ins"] == []


class TestLogs:

    def test_superadmin_reads_audit_log(self, client, user_headers, admin_headers, product, record):
        stock_in, _ = record
        stock_in(user_headers, product, 1)

        res = client.get("/logs", headers=admin_headers, params={"action": "STOCK_IN"})
        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 1
        assert body["items"][0]["resource"] == "stock"
        assert body["items"][0]["actor_email"] == "budi@gudang.co.id"

    def test_failed_logins_and_date_filter(self, client, user, admin_headers):
        client.post("/login", json={"email": user.email, "password": "salah"})

        body = client.get("/logs", headers=admin_headers, params={"status": "fail"}).json()
        assert [(i["action"], i["user_id"]) for i in body["items"]] == [("LOGIN", user.id)]

        body = client.get("/logs", headers=admin_headers, params={"date_to": "2000-01-01"}).json()
        assert body["total"] == 0

        res = client.get("/logs", headers=admin_headers, params={"date_from": "01/02/2026"})
        assert res.status_code == 400

    def test_standard_user_is_forbidden(self, client, user_headers):
        assert client.get("/logs", headers=user_headers).status_code == 403


def test_seed_is_idempotent(db):
    first = seed(db)
    assert first == {"superadmin": 1, "branches": 1, "inbound_categories": 3}
    assert seed(db) == {"superadmin": 0, "branches": 0, "inbound_categories": 0}

    assert db.query(Profile).filter(Profile.role == "superadmin").count() == 1
    assert db.query(Branch).filter(Branch.name == "SUPPLIER").count() == 1
    assert {c.code for c in db.query(InboundCategory)} == {"SUPPLIER", "RETUR_CABANG", "RETUR_KONSUMEN"}
