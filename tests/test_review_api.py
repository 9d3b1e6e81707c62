from tutorlink.models import BookingStatus


async def test_review_completed_booking(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, teacher_headers = await make_teacher()
    student_id, _, headers = await make_student()
    booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"),
                                    at_time(next_monday, "10:00"), BookingStatus.COMPLETED)

    response = await client.post(f"/api/reviews/booking/{booking_id}", headers=headers,
                                 json={"rating": 4, "comment": "<script>x</script>Muy clara"})
    print(response.text)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["rating"] == 4
    assert "<script>" not in data["comment"]
    assert data["student_name"] == "Ana Lopez"

    duplicated = await client.post(f"/api/reviews/booking/{booking_id}", headers=headers, json={"rating": 5})
    assert duplicated.status_code == 400

    mine = await client.get("/api/reviews/teacher/", headers=teacher_headers)
    assert mine.json()["data"]["total_reviews"] == 1
    assert mine.json()["data"]["average_rating"] == 4.0

    listing = await client.get("/api/bookings/student/", headers=headers)
    assert listing.json()["data"][0]["has_review"] is True


async def test_review_rules(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    student_id, _, headers = await make_student()
    _, _, other_headers = await make_student("Beto", "Ruiz")
    pending_id = await make_booking(teacher_id, student_id, at_time(next_monday, "09:00"),
                                    at_time(next_monday, "10:00"), BookingStatus.PENDING)
    completed_id = await make_booking(teacher_id, student_id, at_time(next_monday, "11:00"),
                                      at_time(next_monday, "12:00"), BookingStatus.COMPLETED)

    not_completed = await client.post(f"/api/reviews/booking/{pending_id}", headers=headers, json={"rating": 5})
    foreign = await client.post(f"/api/reviews/booking/{completed_id}", headers=other_headers, json={"rating": 5})
    out_of_range = await client.post(f"/api/reviews/booking/{completed_id}", headers=headers, json={"rating": 6})

    assert not_completed.status_code == 400
    assert foreign.status_code == 403
    assert out_of_range.status_code == 422


async def test_public_reviews_and_teacher_catalog(client, make_teacher, make_student, make_booking, next_monday, at_time):
    teacher_id, _, _ = await make_teacher()
    other_teacher_id, _, _ = await make_teacher(first_name="Marta", last_name="Diaz", subjects="Historia")
    student_id, _, headers = await make_student()
    for start, end, rating in (("09:00", "10:00", 5), ("10:00", "11:00", 3)):
        booking_id = await make_booking(teacher_id, student_id, at_time(next_monday, start),
                                        at_time(next_monday, end), BookingStatus.COMPLETED)
        await client.post(f"/api/reviews/booking/{booking_id}", headers=headers, json={"rating": rating})

    public = await client.get(f"/api/reviews/public/{teacher_id}")
    assert public.status_code == 200
    assert public.json()["data"]["average_rating"] == 4.0
    assert public.json()["data"]["total_reviews"] == 2

    unknown = await client.get("/api/reviews/public/999")
    assert unknown.status_code == 404

    catalog = await client.get("/api/teachers/")
    by_id = {t["id"]: t for t in catalog.json()["data"]}
    assert by_id[teacher_id]["average_rating"] == 4.0
    assert by_id[other_teacher_id]["total_reviews"] == 0

    history = await client.get("/api/teachers/", params={"subject": "Historia"})
    assert [t["id"] for t in history.json()["data"]] == [other_teacher_id]

    detail = await client.get(f"/api/teachers/{teacher_id}")
    assert detail.status_code == 200
    assert detail.json()["data"]["availability"][0]["day_name"] == "Monday"
    assert "email" not in detail.json()["data"]
