"""
Tests for sign-in, sign-up, session endpoints and superadmin user management.
"""
from conftest import PASSWORD
from models.log import Log
from utils.errors import MSG_AUTHENTICATION, MSG_PERMISSION


class TestLogin:

    def test_login_returns_token(self, client, user):
        res = client.post("/login", json={"email": user.email, "password": PASSWORD})
        assert res.status_code == 200
        body = res.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]

        me = client.get("/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == user.email

    def test_email_is_case_insensitive(self, client, user):
        res = client.post("/login", json={"email": "Budi@Gudang.co.id", "password": PASSWORD})
        assert res.status_code == 200

    def test_wrong_password(self, client, user, db):
        res = client.post("/login", json={"email": user.email, "password": "salah"})
        assert res.status_code == 401
        assert res.json()["detail"] == MSG_AUTHENTICATION

        failed = db.query(Log).filter(Log.action == "LOGIN", Log.status == "FAIL").count()
        assert failed == 1

    def test_unknown_email(self, client):
        res = client.post("/login", json={"email": "tidakada@gudang.co.id", "password": PASSWORD})
        assert res.status_code == 401
        assert res.json()["detail"] == MSG_AUTHENTICATION


class TestRegister:

    def test_register_creates_standard_user(self, client):
        res = client.post("/register", json={
            "email": "Rina@Gudang.co.id", "password": "rahasia", "name": " Rina ",
        })
        assert res.status_code == 200
        body = res.json()
        assert body["email"] == "rina@gudang.co.id"
        assert body["name"] == "Rina"
        assert body["role"] == "user"

    def test_duplicate_email(self, client, user):
        res = client.post("/register", json={"email": user.email, "password": "x", "name": "Lain"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Email sudah terdaftar"

    def test_invalid_email_is_rejected(self, client):
        res = client.post("/register", json={"email": "bukan-email", "password": "x", "name": "X"})
        assert res.status_code == 422


class TestSession:

    def test_me(self, client, user, user_headers):
        res = client.get("/me", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["role"] == "user"

    def test_invalid_token(self, client):
        res = client.get("/me", headers={"Authorization": "Bearer bukan.token.valid"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Sesi tidak valid, silakan login kembali"

    def test_logout_is_audited(self, client, user, user_headers, db):
        res = client.post("/logout", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Berhasil keluar"
        assert db.query(Log).filter(Log.action == "LOGOUT", Log.user_id == user.id).count() == 1


class TestUsers:

    def test_superadmin_lists_users(self, client, user, admin_headers):
        res = client.get("/users", headers=admin_headers)
        assert res.status_code == 200
        emails = {u["email"] for u in res.json()}
        assert emails == {"budi@gudang.co.id", "admin@gudang.co.id"}

    def test_standard_user_is_forbidden(self, client, user_headers):
        res = client.get("/users", headers=user_headers)
        assert res.status_code == 403
        assert res.json()["detail"] == MSG_PERMISSION

    def test_superadmin_creates_user_with_role(self, client, admin_headers):
        res = client.post("/users", headers=admin_headers, json={
            "email": "Gudang2@Gudang.co.id", "password": "rahasia", "name": "Admin Dua", "role": "superadmin",
        })
        assert res.status_code == 201
        assert res.json()["email"] == "gudang2@gudang.co.id"
        assert res.json()["role"] == "superadmin"

    def test_create_user_validation(self, client, user, admin_headers):
        res = client.post("/users", headers=admin_headers, json={"email": "", "password": "x", "name": "A"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Nama, email dan password harus diisi"

        res = client.post("/users", headers=admin_headers, json={"email": "salah", "password": "x", "name": "A"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Format email tidak valid"

        res = client.post("/users", headers=admin_headers, json={"email": user.email, "password": "x", "name": "A"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Email sudah terdaftar"

    def test_standard_user_cannot_create_users(self, client, user_headers):
        res = client.post("/users", headers=user_headers, json={
            "email": "x@gudang.co.id", "password": "x", "name": "X",
        })
        assert res.status_code == 403
