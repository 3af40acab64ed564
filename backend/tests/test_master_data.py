"""
Tests for branches and stock categories: shared reads, superadmin-only writes.
"""
from utils.errors import MSG_PERMISSION


class TestBranches:

    def test_everyone_can_list(self, client, branch, user_headers):
        res = client.get("/branches", headers=user_headers)
        assert res.status_code == 200
        assert [b["name"] for b in res.json()] == ["Cabang Bandung"]

    def test_standard_user_cannot_write(self, client, branch, user_headers):
        assert client.post("/branches", headers=user_headers, json={"name": "Cabang Bogor"}).status_code == 403
        res = client.put(f"/branches/{branch.id}", headers=user_headers, json={"name": "X"})
        assert res.status_code == 403
        assert res.json()["detail"] == MSG_PERMISSION
        assert client.delete(f"/branches/{branch.id}", headers=user_headers).status_code == 403

    def test_superadmin_crud(self, client, admin_headers):
        res = client.post("/branches", headers=admin_headers, json={"name": " Cabang Bogor "})
        assert res.status_code == 201
        branch_id = res.json()["id"]
        assert res.json()["name"] == "Cabang Bogor"

        res = client.put(f"/branches/{branch_id}", headers=admin_headers, json={"name": "Cabang Depok"})
        assert res.json()["name"] == "Cabang Depok"

        assert client.delete(f"/branches/{branch_id}", headers=admin_headers).status_code == 200
        assert client.get("/branches", headers=admin_headers).json() == []

    def test_blank_name(self, client, admin_headers):
        res = client.post("/branches", headers=admin_headers, json={"name": "  "})
        assert res.status_code == 400
        assert res.json()["detail"] == "Nama cabang harus diisi"

    def test_unknown_branch(self, client, admin_headers):
        res = client.put("/branches/999", headers=admin_headers, json={"name": "X"})
        assert res.status_code == 404
        assert res.json()["detail"] == "Cabang tidak ditemukan"


class TestOutboundCategories:

    def test_list(self, client, outbound_category, user_headers):
        res = client.get("/outbound-categories", headers=user_headers)
        assert res.status_code == 200
        assert res.json()[0]["name"] == "Transfer"
        assert res.json()[0]["description"] == "Kirim ke cabang"

    def test_superadmin_crud(self, client, admin_headers):
        res = client.post("/outbound-categories", headers=admin_headers,
                          json={"name": "Penjualan", "description": ""})
        assert res.status_code == 201
        category_id = res.json()["id"]
        assert res.json()["description"] is None

        res = client.put(f"/outbound-categories/{category_id}", headers=admin_headers,
                         json={"name": "Rusak", "description": "Barang rusak"})
        assert res.json()["name"] == "Rusak"

        assert client.delete(f"/outbound-categories/{category_id}", headers=admin_headers).status_code == 200
        assert client.delete(f"/outbound-categories/{category_id}", headers=admin_headers).status_code == 404

    def test_blank_name(self, client, admin_headers):
        res = client.post("/outbound-categories", headers=admin_headers, json={"name": ""})
        assert res.status_code == 400
        assert res.json()["detail"] == "Nama jenis harus diisi"

    def test_standard_user_cannot_write(self, client, user_headers):
        assert client.post("/outbound-categories", headers=user_headers, json={"name": "X"}).status_code == 403


class TestInboundCategories:

    def test_list(self, client, inbound_categories, user_headers):
        res = client.get("/inbound-categories", headers=user_headers)
        assert {c["code"] for c in res.json()} == {"SUPPLIER", "RETUR_CABANG", "RETUR_KONSUMEN"}

    def test_code_is_normalized(self, client, admin_headers):
        res = client.post("/inbound-categories", headers=admin_headers,
                          json={"code": "retur gudang", "name": "Retur Gudang"})
        assert res.status_code == 201
        assert res.json()["code"] == "RETUR_GUDANG"

    def test_duplicate_code(self, client, inbound_categories, admin_headers):
        res = client.post("/inbound-categories", headers=admin_headers, json={"code": "Supplier", "name": "Pemasok"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Kode jenis sudah digunakan"

    def test_standard_user_cannot_create(self, client, user_headers):
        res = client.post("/inbound-categories", headers=user_headers, json={"code": "X", "name": "X"})
        assert res.status_code == 403
