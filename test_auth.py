from app.models.user import User, UserRole

API = "/api/v1/auth"


def test_register_returns_user_and_token(client, db):
    response = client.post(f"{API}/register", json={
        "name": "  Lucia Rossi ",
        "email": "Lucia@Example.com",
        "password": "secret1",
        "role": "organizer",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["name"] == "Lucia Rossi"
    assert body["data"]["user"]["email"] == "lucia@example.com"
    assert body["data"]["user"]["role"] == "organizer"
    assert body["data"]["token"]["token_type"] == "bearer"

    token = body["data"]["token"]["access_token"]
    me = client.get(f"{API}/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["email"] == "lucia@example.com"


def test_register_duplicate_email_conflicts(client, make_user):
    make_user(email="taken@example.com")
    response = client.post(f"{API}/register", json={
        "name": "Someone", "email": "TAKEN@example.com", "password": "secret1",
    })
    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "A user with this email already exists",
        "errorsList": [],
    }


def test_register_cannot_choose_admin_role(client, db):
    response = client.post(f"{API}/register", json={
        "name": "Mallory", "email": "mallory@example.com", "password": "secret1", "role": "admin",
    })
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert any(error.startswith("role:") for error in body["errorsList"])
    assert db.query(User).count() == 0


def test_register_validation_lists_each_field(client):
    response = client.post(f"{API}/register", json={"name": "A", "email": "nope", "password": "123"})
    assert response.status_code == 400
    fields = {error.split(":")[0] for error in response.json()["errorsList"]}
    assert fields == {"name", "email", "password"}


def test_login_with_wrong_password(client, make_user):
    make_user(email="carla@example.com")
    response = client.post(f"{API}/login", json={"email": "carla@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_is_case_insensitive_on_email(client, make_user):
    make_user(email="marco@example.com")
    response = client.post(f"{API}/login", json={"email": "MARCO@example.com", "password": "Secret123"})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == "marco@example.com"


def test_missing_and_invalid_tokens(client, db):
    assert client.get(f"{API}/me").json()["message"] == "Access token required"

    response = client.get(f"{API}/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_token_of_deleted_user(client, db, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)
    db.delete(user)
    db.commit()

    response = client.get(f"{API}/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_update_profile_preferences(client, make_user, auth_headers):
    user = make_user()
    response = client.put(f"{API}/profile", headers=auth_headers(user), json={
        "bio": "Salsa on2 addict",
        "city": "Napoli",
        "dance_styles": ["salsa", "kizomba"],
        "skill_level": "avanzato",
        "notifications": {"email": False, "push": True, "new_events": True, "event_reminders": False},
    })
    assert response.status_code == 200
    profile = response.json()["data"]["user"]
    assert profile["bio"] == "Salsa on2 addict"
    assert profile["city"] == "Napoli"
    assert profile["preferences"]["dance_styles"] == ["salsa", "kizomba"]
    assert profile["preferences"]["skill_level"] == "avanzato"
    assert profile["preferences"]["notifications"]["email"] is False


def test_profile_rejects_audience_skill_level(client, make_user, auth_headers):
    user = make_user()
    response = client.put(f"{API}/profile", headers=auth_headers(user), json={"skill_level": "tutti"})
    assert response.status_code == 400


def test_change_password(client, make_user, auth_headers):
    user = make_user(email="pwd@example.com")
    headers = auth_headers(user)

    wrong = client.put(f"{API}/change-password", headers=headers, json={
        "current_password": "nope", "new_password": "NewPass1", "confirm_password": "NewPass1",
    })
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    weak = client.put(f"{API}/change-password", headers=headers, json={
        "current_password": "Secret123", "new_password": "alllower1", "confirm_password": "alllower1",
    })
    assert weak.status_code == 400

    mismatch = client.put(f"{API}/change-password", headers=headers, json={
        "current_password": "Secret123", "new_password": "NewPass1", "confirm_password": "NewPass2",
    })
    assert mismatch.status_code == 400

    ok = client.put(f"{API}/change-password", headers=headers, json={
        "current_password": "Secret123", "new_password": "NewPass1", "confirm_password": "NewPass1",
    })
    assert ok.status_code == 200

    login = client.post(f"{API}/login", json={"email": "pwd@example.com", "password": "NewPass1"})
    assert login.status_code == 200


def test_role_gate_blocks_plain_users(client, make_user, auth_headers, event_payload):
    user = make_user(role=UserRole.USER)
    response = client.post("/api/v1/events", headers=auth_headers(user), json=event_payload())
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_avatar_upload_replaces_previous_blob(client, db, make_user, auth_headers, storage):
    user = make_user()
    headers = auth_headers(user)

    first = client.post(f"{API}/avatar", headers=headers, files={"file": ("me.jpg", b"one", "image/jpeg")})
    assert first.status_code == 200
    second = client.post(f"{API}/avatar", headers=headers, files={"file": ("me.png", b"two", "image/png")})
    assert second.status_code == 200

    db.expire_all()
    stored = db.get(User, user.id)
    assert stored.avatar == second.json()["data"]["avatar"]
    assert stored.avatar_handle.startswith("avatars/")
    assert list(storage.blobs) == [stored.avatar_handle]
    assert storage.deleted == ["avatars/1-me.jpg"]

    me = client.get(f"{API}/me", headers=headers).json()["data"]["user"]
    assert me["avatar"] == stored.avatar


def test_avatar_upload_validates_file(client, make_user, auth_headers, storage):
    headers = auth_headers(make_user())
    response = client.post(f"{API}/avatar", headers=headers, files={"file": ("cv.pdf", b"%PDF", "application/pdf")})
    assert response.status_code == 400
    assert storage.blobs == {}

    assert client.post(f"{API}/avatar", files={"file": ("me.jpg", b"one", "image/jpeg")}).status_code == 401


def test_pasted_avatar_url_drops_uploaded_handle(client, db, make_user, auth_headers):
    user = make_user(avatar="https://images.example.com/avatars/old.jpg", avatar_handle="avatars/old.jpg")
    response = client.put(
        f"{API}/profile", headers=auth_headers(user), json={"avatar": "https://cdn.example.org/me.png"}
    )
    assert response.status_code == 200

    db.expire_all()
    stored = db.get(User, user.id)
    assert stored.avatar == "https://cdn.example.org/me.png"
    assert stored.avatar_handle is None
