from sqlalchemy.future import select

from tutorlink.external.email_config import fast_mail
from tutorlink.models import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus, Payment, ReceiptStatus


def receipt(booking_id, **extra):
    data = {
        "booking_id": booking_id,
        "transaction_id": "TRX-0001",
        "amount": "250.00",
        "payment_date": "2030-01-02T12:00:00",
        "bank_name": "Banco Central",
        "account_number": "1234",
    }
    data.update(extra)
    return data


async def test_submit_and_list_payment(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    student_id, _, headers = await make_student()
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"),
                                    at_time(next_monday, "10:00"), BookingStatus.PENDING)

    response = await client.post("/api/payments/", headers=headers, json=receipt(booking_id))
    print(response.text)

    assert response.status_code == 201
    assert response.json()["data"]["status"] == "PENDING"
    assert response.json()["data"]["amount"] == 250.0

    duplicated = await client.post("/api/payments/", headers=headers, json=receipt(booking_id))
    assert duplicated.status_code == 400

    listing = await client.get("/api/payments/student/", headers=headers)
    assert [p["booking_id"] for p in listing.json()["data"]] == [booking_id]


async def test_payment_validation(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    student_id, _, headers = await make_student()
    _, _, other_headers = await make_student("Beto", "Ruiz")
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"),
                                    at_time(next_monday, "10:00"), BookingStatus.PENDING)
    confirmed_id = await make_booking(teacher_id, student_id, at_time(next_monday, "11:00"),
                                      at_time(next_monday, "12:00"), BookingStatus.CONFIRMED)

    zero = await client.post("/api/payments/", headers=headers, json=receipt(booking_id, amount="0"))
    foreign = await client.post("/api/payments/", headers=other_headers, json=receipt(booking_id))
    not_pending = await client.post("/api/payments/", headers=headers, json=receipt(confirmed_id))
    missing = await client.post("/api/payments/", headers=headers, json=receipt(9999))

    assert zero.status_code == 422
    assert foreign.status_code == 403
    assert not_pending.status_code == 400
    assert missing.status_code == 404


async def _submitted_payment(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    student_id, _, headers = await make_student()
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"),
                                    at_time(next_monday, "10:00"), BookingStatus.PENDING)
    response = await client.post("/api/payments/", headers=headers, json=receipt(booking_id))
    return response.json()["data"]["id"], booking_id, headers


async def test_admin_approves_payment(client, make_user, make_teacher, make_student, make_booking, next_monday, at_time):
    payment_id, booking_id, student_headers = await _submitted_payment(
        client, make_teacher, make_student, make_booking, next_monday, at_time
    )
    admin, admin_headers = await make_user("admin", "Admin", "Root")

    pending = await client.get("/api/admin/payments/", headers=admin_headers, params={"status": "PENDING"})
    assert [p["id"] for p in pending.json()["data"]] == [payment_id]

    with fast_mail.record_messages() as outbox:
        response = await client.post(f"/api/admin/payments/{payment_id}/approve", headers=admin_headers,
                                     json={"notes": "Verificado"})
    print(response.text)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "APPROVED"
    assert data["approved_by"] == admin.id
    assert data["approved_at"] is not None
    assert len(outbox) == 1

    bookings = await client.get("/api/bookings/student/", headers=student_headers)
    booking = bookings.json()["data"][0]
    assert booking["id"] == booking_id
    assert booking["status"] == "CONFIRMED"
    assert booking["payment_status"] == "PAID"

    again = await client.post(f"/api/admin/payments/{payment_id}/reject", headers=admin_headers,
                              json={"reason": "Tarde"})
    assert again.status_code == 400


async def test_admin_rejects_payment(client, make_user, make_teacher, make_student, make_booking, next_monday, at_time):
    payment_id, booking_id, student_headers = await _submitted_payment(
        client, make_teacher, make_student, make_booking, next_monday, at_time
    )
    _, admin_headers = await make_user("admin", "Admin", "Root")

    without_reason = await client.post(f"/api/admin/payments/{payment_id}/reject", headers=admin_headers, json={})
    assert without_reason.status_code == 422

    response = await client.post(f"/api/admin/payments/{payment_id}/reject", headers=admin_headers,
                                 json={"reason": "Monto incorrecto"})

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "REJECTED"
    assert response.json()["data"]["rejection_reason"] == "Monto incorrecto"

    bookings = await client.get("/api/bookings/student/", headers=student_headers)
    booking = bookings.json()["data"][0]
    assert booking["status"] == "CANCELLED"
    assert booking["payment_status"] == "FAILED"


async def test_students_cannot_decide_payments(client, make_teacher, make_student, make_booking, next_monday, at_time):
    payment_id, _, student_headers = await _submitted_payment(
        client, make_teacher, make_student, make_booking, next_monday, at_time
    )

    response = await client.post(f"/api/admin/payments/{payment_id}/approve", headers=student_headers)

    assert response.status_code == 403


async def test_cannot_approve_payment_of_cancelled_booking(client, session_factory, make_user, make_teacher,
                                                          make_student, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    _, _, first_headers = await make_student("Ana", "Lopez")
    _, _, second_headers = await make_student("Beto", "Ruiz")
    _, admin_headers = await make_user("admin", "Admin", "Root")
    slot = {
        "teacher_id": teacher_id,
        "start_time": at_time(next_monday, "10:00").isoformat(),
        "end_time": at_time(next_monday, "11:00").isoformat(),
    }

    first = await client.post("/api/bookings/", headers=first_headers, json=slot)
    first_id = first.json()["data"]["id"]
    payment = await client.post("/api/payments/", headers=first_headers, json=receipt(first_id))
    payment_id = payment.json()["data"]["id"]
    cancel = await client.patch(f"/api/bookings/student/{first_id}", headers=first_headers,
                                json={"status": "CANCELLED"})
    second = await client.post("/api/bookings/", headers=second_headers, json=slot)
    assert cancel.status_code == 200
    assert second.status_code == 201

    response = await client.post(f"/api/admin/payments/{payment_id}/approve", headers=admin_headers, json={})
    print(response.text)

    assert response.status_code == 400
    async with session_factory() as session:
        rows = (await session.execute(
            select(Booking).where(Booking.teacher_id == teacher_id, Booking.status.in_(ACTIVE_BOOKING_STATUSES))
        )).scalars().all()
        payment_row = await session.get(Payment, payment_id)
    assert [row.id for row in rows] == [second.json()["data"]["id"]]
    assert payment_row.status == ReceiptStatus.PENDING
