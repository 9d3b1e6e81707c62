from tutorlink.models import BookingStatus


async def test_stats(client, make_user, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    student_id, _, _ = await make_student()
    await make_student("Beto", "Ruiz")
    await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"), at_time(next_monday, "10:00"),
                       BookingStatus.COMPLETED)
    await make_booking(teacher_id, student_id, at_time(next_monday, "10:00"), at_time(next_monday, "11:00"),
                       BookingStatus.PENDING)
    _, admin_headers = await make_user("admin", "Admin", "Root")

    response = await client.get("/api/admin/stats/", headers=admin_headers)
    print(response.text)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_bookings"] == 2
    assert stats["completed_bookings"] == 1
    assert stats["pending_payments"] == 0
    assert stats["total_revenue"] == 0.0
    assert stats["active_teachers"] == 1
    assert stats["active_students"] == 1


async def test_admin_overrides_booking_status(client, make_user, make_teacher, make_student, make_booking,
                                              next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    student_id, _, _ = await make_student()
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"),
                                    at_time(next_monday, "10:00"), BookingStatus.CANCELLED)
    _, admin_headers = await make_user("admin", "Admin", "Root")

    response = await client.patch(f"/api/admin/bookings/{booking_id}", headers=admin_headers,
                                  json={"status": "COMPLETED", "payment_status": "REFUNDED"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "COMPLETED"
    assert response.json()["data"]["payment_status"] == "REFUNDED"

    empty = await client.patch(f"/api/admin/bookings/{booking_id}", headers=admin_headers, json={})
    assert empty.status_code == 400

    completed = await client.get("/api/admin/bookings/", headers=admin_headers, params={"status": "COMPLETED"})
    assert [b["id"] for b in completed.json()["data"]] == [booking_id]


async def test_admin_deactivates_user(client, make_user, make_student):
    _, student, student_headers = await make_student()
    admin, admin_headers = await make_user("admin", "Admin", "Root")

    students = await client.get("/api/admin/users/", headers=admin_headers, params={"role": "student"})
    assert [u["id"] for u in students.json()["data"]] == [student.id]

    response = await client.patch(f"/api/admin/users/{student.id}", headers=admin_headers, json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    login = await client.post("/api/auth/login/", json={"email": student.email, "password": "Password123!!"})
    assert login.status_code == 403

    itself = await client.patch(f"/api/admin/users/{admin.id}", headers=admin_headers, json={"is_active": False})
    assert itself.status_code == 400


async def test_admin_routes_require_admin(client, make_teacher):
    _, _, teacher_headers = await make_teacher()

    response = await client.get("/api/admin/stats/", headers=teacher_headers)
    anonymous = await client.get("/api/admin/stats/")

    assert response.status_code == 403
    assert anonymous.status_code == 401
