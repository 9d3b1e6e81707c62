from passlib.hash import bcrypt

from tutorlink.cores.token import verify_token
from tutorlink.models import User


async def test_login_user(client, make_user):
    user, _ = await make_user("student", "Luis", "Gonzalez", email="luis@example.com")

    response = await client.post("/api/auth/login/", json={
        "email": "luis@example.com",
        "password": "Password123!!"
    })
    print(response.text)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["first_name"] == "Luis"
    assert data["data"]["last_name"] == "Gonzalez"
    assert data["data"]["role"] == "student"

    payload = verify_token(data["data"]["access_token"])
    assert payload["user_id"] == user.id
    assert payload["role"] == "student"


async def test_login_user_detail_password(client, make_user):
    await make_user("student", email="luis@example.com")

    response = await client.post("/api/auth/login/", json={
        "email": "luis@example.com",
        "password": "Password12!!"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Correo o contraseña incorrectos"


async def test_login_user_detail_email(client):
    response = await client.post("/api/auth/login/", json={
        "email": "luis@gmail.com",
        "password": "Password123!!"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Correo o contraseña incorrectos"


async def test_login_user_fields(client):
    no_email = await client.post("/api/auth/login/", json={"password": "Password123!!"})
    no_password = await client.post("/api/auth/login/", json={"email": "luis@gmail.com"})

    assert no_email.status_code == 422
    assert any(error["loc"] == ["body", "email"] for error in no_email.json()["detail"])
    assert no_password.status_code == 422
    assert any(error["loc"] == ["body", "password"] for error in no_password.json()["detail"])


async def test_invalid_bearer_token(client):
    bad_format = await client.get("/api/profile/student/", headers={"Authorization": "Token abc"})
    bad_token = await client.get("/api/profile/student/", headers={"Authorization": "Bearer abc"})

    assert bad_format.status_code == 401
    assert bad_token.status_code == 401
    assert bad_token.json()["detail"] == "Token inválido o expirado"


async def test_security_headers(client):
    response = await client.post("/api/auth/login/", json={"email": "luis@gmail.com", "password": "x"})

    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "default-src 'none'" in response.headers["Content-Security-Policy"]


async def test_login_upgrades_weak_password_hash(client, session_factory, make_user):
    user, _ = await make_user("student", email="weak@example.com")
    weak_hash = bcrypt.using(rounds=4).hash("Password123!!")
    async with session_factory() as session:
        stored = await session.get(User, user.id)
        stored.password = weak_hash
        await session.commit()

    response = await client.post("/api/auth/login/", json={
        "email": "weak@example.com",
        "password": "Password123!!"
    })

    assert response.status_code == 200
    async with session_factory() as session:
        stored = await session.get(User, user.id)
    assert stored.password != weak_hash
    assert bcrypt.verify("Password123!!", stored.password)
