"""
Client accounts: registration, login, lookup and password change.
"""
from tests.conftest import PASSWORD


def register(api, email="grace@example.com", password="s3cret-pass", confirm=None):
    return api.post("/client/register", json={
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": email,
        "password": password,
        "confirmPassword": confirm if confirm is not None else password,
    })


class TestRegister:

    def test_register_returns_token(self, api):
        response = register(api)

        assert response.status_code == 201
        body = response.json()
        assert body["clientId"]
        assert body["token"]
        assert body["tokenType"] == "bearer"

    def test_duplicate_email(self, api):
        register(api)

        response = register(api, email="GRACE@example.com")

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Email already in use"}

    def test_password_mismatch(self, api):
        response = register(api, confirm="something-else")

        assert response.status_code == 400

    def test_short_password(self, api):
        response = register(api, password="short")

        assert response.status_code == 400

    def test_invalid_email(self, api):
        response = register(api, email="not-an-email")

        assert response.status_code == 400


class TestLogin:

    def test_login(self, api, make_client):
        client = make_client(email="ada@example.com")

        response = api.post("/client/login", json={"email": "ada@example.com", "password": PASSWORD})

        assert response.status_code == 200
        assert response.json()["clientId"] == client.id

    def test_wrong_password_and_unknown_email_look_the_same(self, api, make_client):
        make_client(email="ada@example.com")

        wrong_password = api.post("/client/login", json={"email": "ada@example.com", "password": "nope-nope"})
        unknown_email = api.post("/client/login", json={"email": "who@example.com", "password": PASSWORD})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {
            "success": False,
            "message": "Invalid credentials",
        }


class TestClientLookup:

    def test_get_by_id_hides_password(self, api, make_client):
        client = make_client(email="ada@example.com")

        response = api.post("/client/getById", json={"clientId": client.id})

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "ada@example.com"
        assert body["firstName"] == "Ada"
        assert "hashedPassword" not in body
        assert "password" not in body

    def test_get_missing(self, api):
        response = api.post("/client/getById", json={"clientId": "missing"})

        assert response.status_code == 404

    def test_get_all(self, api, make_client):
        make_client()
        make_client()

        body = api.get("/client/getAll").json()

        assert body["count"] == 2
        assert len(body["clients"]) == 2


class TestUpdatePassword:

    def test_requires_token(self, api):
        response = api.post("/client/updatePassword", json={
            "oldPassword": PASSWORD, "newPassword": "brand-new-pass",
        })

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_change_password(self, api, make_client, client_headers):
        client = make_client(email="ada@example.com")

        response = api.post(
            "/client/updatePassword",
            json={"oldPassword": PASSWORD, "newPassword": "brand-new-pass"},
            headers=client_headers(client),
        )

        assert response.status_code == 200
        old_login = api.post("/client/login", json={"email": "ada@example.com", "password": PASSWORD})
        new_login = api.post("/client/login", json={"email": "ada@example.com", "password": "brand-new-pass"})
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    def test_wrong_old_password(self, api, make_client, client_headers):
        client = make_client()

        response = api.post(
            "/client/updatePassword",
            json={"oldPassword": "not-my-password", "newPassword": "brand-new-pass"},
            headers=client_headers(client),
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Old password is incorrect"

    def test_garbage_token(self, api):
        response = api.post(
            "/client/updatePassword",
            json={"oldPassword": PASSWORD, "newPassword": "brand-new-pass"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
