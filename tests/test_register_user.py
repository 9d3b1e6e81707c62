import pytest


def register_payload(**extra):
    data = {
        "first_name": "Luis",
        "last_name": "Cruz",
        "email": "luis@example.com",
        "password": "Password123!!",
        "privacy_policy_accepted": True,
    }
    data.update(extra)
    return data


async def test_register_student(client):
    response = await client.post("/api/auth/register/student/", json=register_payload())
    print(response.text)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["first_name"] == "Luis"
    assert data["data"]["role"] == "student"


async def test_register_teacher(client):
    response = await client.post("/api/auth/register/teacher/", json=register_payload(email="profe@example.com"))

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "teacher"


# 1. Campos faltantes (sin email)
async def test_missing_fields(client):
    payload = register_payload()
    payload.pop("email")
    response = await client.post("/api/auth/register/student/", json=payload)
    print("FALTAN CAMPOS:", response.text)

    assert response.status_code == 422
    data = response.json()
    assert any(error["loc"] == ["body", "email"] for error in data["detail"])


async def test_duplicate_email(client):
    await client.post("/api/auth/register/student/", json=register_payload())
    response = await client.post("/api/auth/register/student/", json=register_payload())
    print("CORREO DUPLICADO:", response.text)

    assert response.status_code == 400
    assert response.json()["detail"] == "Error registering email, please try another email."


@pytest.mark.parametrize("password,detail", [
    ("Ab1!", "Password must be at least 8 characters long"),
    ("Password123", "Password must contain at least one special character"),
    ("password123!!", "Password must contain at least one uppercase letter"),
])
async def test_password_rules(client, password, detail):
    response = await client.post("/api/auth/register/student/", json=register_payload(password=password))
    print("PASSWORD:", response.text)

    assert response.status_code == 400
    assert response.json()["detail"] == detail


async def test_name_length_and_privacy(client):
    short = await client.post("/api/auth/register/student/", json=register_payload(first_name="Lu"))
    privacy = await client.post("/api/auth/register/student/", json=register_payload(privacy_policy_accepted=False))

    assert short.status_code == 400
    assert short.json()["detail"] == "Your first name must have at least 3 characters"
    assert privacy.status_code == 400


async def test_names_are_stripped_of_html(client):
    response = await client.post("/api/auth/register/student/",
                                 json=register_payload(first_name="<b>Luis</b>"))

    assert response.status_code == 200
    assert response.json()["data"]["first_name"] == "Luis"
