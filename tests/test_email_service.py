from tutorlink.external.email_config import fast_mail
from tutorlink.models import BookingStatus


async def test_teacher_is_notified_of_new_booking(client, make_teacher, make_student, next_monday, at_time):
    teacher_id, teacher, _ = await make_teacher()
    _, _, headers = await make_student()

    with fast_mail.record_messages() as outbox:
        response = await client.post("/api/bookings/", headers=headers, json={
            "teacher_id": teacher_id,
            "start_time": at_time(next_monday, "10:00").isoformat(),
            "end_time": at_time(next_monday, "11:00").isoformat(),
        })

    assert response.status_code == 201
    assert len(outbox) == 1
    assert str(outbox[0]["To"]) == teacher.email
    assert str(outbox[0]["Subject"]) == "Nueva reserva - Tutorlink"


async def test_student_is_notified_of_status_change(client, make_teacher, make_student, make_booking,
                                                    next_monday, at_time):
    teacher_id, _, teacher_headers = await make_teacher()
    student_id, student, _ = await make_student()
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "10:00"),
                                    at_time(next_monday, "11:00"), BookingStatus.PENDING)

    with fast_mail.record_messages() as outbox:
        response = await client.patch(f"/api/bookings/teacher/{booking_id}", headers=teacher_headers,
                                      json={"status": "CONFIRMED"})

    assert response.status_code == 200
    assert len(outbox) == 1
    assert str(outbox[0]["To"]) == student.email
    assert "confirmada" in str(outbox[0]["Subject"])


async def test_rejected_transition_sends_nothing(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, teacher_headers = await make_teacher()
    student_id, _, _ = await make_student()
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "10:00"),
                                    at_time(next_monday, "11:00"), BookingStatus.COMPLETED)

    with fast_mail.record_messages() as outbox:
        response = await client.patch(f"/api/bookings/teacher/{booking_id}", headers=teacher_headers,
                                      json={"status": "CANCELLED"})

    assert response.status_code == 400
    assert outbox == []
