import itertools
import os
from datetime import date, datetime, timedelta

# Antes de importar la app: sin límite de peticiones ni envío real de correos
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MAIL_ENABLED"] = "false"
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite:///:memory:"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.future import select

from tutorlink.main import app
from tutorlink.apis.deps import get_db
from tutorlink.cores.db import build_engine, build_session_factory, create_tables
from tutorlink.cores.security import get_password_hash
from tutorlink.cores.token import create_access_token
from tutorlink.models import Availability, Booking, BookingStatus, Role, Student, Teacher, User
from tutorlink.scripts.databases.create_role import create_role

_emails = itertools.count(1)


@pytest.fixture
async def session_factory():
    # Base de datos en memoria por prueba
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)

    factory = build_session_factory(engine)
    await create_role(factory)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def auth_headers(user: User, role: str) -> dict:
    token = create_access_token({"user_id": user.id, "email": user.email, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(session_factory):
    async def _make_user(role="student", first_name="Luis", last_name="Gonzalez", password="Password123!!", email=None):
        async with session_factory() as session:
            role_obj = (await session.execute(select(Role).where(Role.name == role))).scalar_one()
            user = User(
                first_name=first_name,
                last_name=last_name,
                email=email or f"user{next(_emails)}@example.com",
                password=get_password_hash(password),
                role_id=role_obj.id,
                privacy_policy_accepted=True,
                email_verified=True,
            )
            session.add(user)
            await session.commit()
            return user, auth_headers(user, role)
    return _make_user


@pytest.fixture
def make_student(session_factory, make_user):
    async def _make_student(first_name="Ana", last_name="Lopez"):
        user, headers = await make_user("student", first_name, last_name)
        async with session_factory() as session:
            student = Student(user_id=user.id)
            session.add(student)
            await session.commit()
            return student.id, user, headers
    return _make_student


@pytest.fixture
def make_teacher(session_factory, make_user):
    """Crea usuario docente, su perfil y las ventanas [(día, "HH:MM", "HH:MM", disponible)]."""
    async def _make_teacher(windows=((1, "09:00", "17:00", True),), first_name="Carlos", last_name="Perez", subjects="Matemáticas"):
        user, headers = await make_user("teacher", first_name, last_name)
        async with session_factory() as session:
            teacher = Teacher(user_id=user.id, bio="Docente", subjects=subjects, hourly_rate=250, experience_years=5)
            session.add(teacher)
            await session.flush()
            session.add_all([
                Availability(teacher_id=teacher.id, day_of_week=day, start_time=start, end_time=end, is_available=available)
                for day, start, end, available in windows
            ])
            await session.commit()
            return teacher.id, user, headers
    return _make_teacher


@pytest.fixture
def make_booking(session_factory):
    async def _make_booking(teacher_id, student_id, start, end, status=BookingStatus.CONFIRMED):
        async with session_factory() as session:
            booking = Booking(teacher_id=teacher_id, student_id=student_id, start_time=start, end_time=end, status=status)
            session.add(booking)
            await session.commit()
            return booking.id
    return _make_booking


@pytest.fixture
def next_monday() -> date:
    today = date.today()
    return today + timedelta(days=(7 - today.weekday()) or 7)


def at(day: date, hhmm: str) -> datetime:
    hour, minute = hhmm.split(":")
    return datetime(day.year, day.month, day.day, int(hour), int(minute))


@pytest.fixture
def at_time():
    return at
