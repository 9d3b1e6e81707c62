async def test_student_profile_created_on_first_access(client, make_user):
    _, headers = await make_user("student", "Luis", "Gonzalez")

    response = await client.get("/api/profile/student/", headers=headers)
    print(response.text)

    assert response.status_code == 200
    assert response.json()["data"]["first_name"] == "Luis"
    assert response.json()["data"]["level"] is None

    update = await client.put("/api/profile/student/", headers=headers,
                              json={"level": "Secundaria", "learning_goals": "Aprobar <b>álgebra</b>"})
    assert update.status_code == 200
    assert update.json()["data"]["level"] == "Secundaria"
    assert update.json()["data"]["learning_goals"] == "Aprobar álgebra"


async def test_teacher_profile_lifecycle(client, make_user):
    _, headers = await make_user("teacher", "Carlos", "Perez")

    missing = await client.get("/api/profile/teacher/", headers=headers)
    assert missing.status_code == 404

    created = await client.post("/api/profile/teacher/", headers=headers, json={
        "bio": "<p>Ingeniero</p><script>alert(1)</script>",
        "subjects": ["Matemáticas", "Física"],
        "hourly_rate": "300",
        "experience_years": 4,
        "timezone": "America/Mexico_City",
    })
    print(created.text)
    assert created.status_code == 201
    data = created.json()["data"]
    assert data["subjects"] == ["Matemáticas", "Física"]
    assert data["hourly_rate"] == 300.0
    assert "<script>" not in data["bio"]

    twice = await client.post("/api/profile/teacher/", headers=headers, json={})
    assert twice.status_code == 400

    updated = await client.put("/api/profile/teacher/", headers=headers, json={"subjects": ["Química"], "is_active": False})
    assert updated.json()["data"]["subjects"] == ["Química"]
    assert updated.json()["data"]["is_active"] is False

    catalog = await client.get("/api/teachers/")
    assert catalog.json()["data"] == []


async def test_profile_role_checks(client, make_user):
    _, student_headers = await make_user("student")

    response = await client.post("/api/profile/teacher/", headers=student_headers, json={})

    assert response.status_code == 403
