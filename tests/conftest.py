import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import datetime, timedelta

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from coursehub.create_admin import create_admin
from coursehub.database import get_db
from coursehub.main import app

# ==================== FIXTURES ====================

@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def mongo(mongo_client):
    """Synchronous view of the test database, for arranging and inspecting data"""
    return mongo_client["coursehub_test"]


@pytest.fixture
def client(mongo_client):
    database = AsyncMongoMockClient(mock_mongo_client=mongo_client)["coursehub_test"]

    async def override_get_db():
        return database

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, name="Asha", email="asha@example.com", password="secret123"):
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client):
    return bearer(register(client)["token"])


@pytest.fixture
def admin_headers(client, mongo):
    create_admin(mongo, "admin@example.com", "adminpass", "Admin")
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert response.status_code == 200, response.text
    return bearer(response.json()["token"])


@pytest.fixture
def make_category(mongo):
    def factory(name):
        return mongo.categories.insert_one({"name": name}).inserted_id
    return factory


@pytest.fixture
def make_course(mongo):
    """Insert a course directly; each call is one minute newer than the last"""
    created = {"count": 0}

    def factory(title="Course", lessons=3, **fields):
        created["count"] += 1
        course = {
            "title": title,
            "description": f"{title} description",
            "price": 0,
            "category": None,
            "level": "Beginner",
            "rating": 4.5,
            "enrolled_count": 0,
            "instructor": {"name": "CourseHub Instructor"},
            "lessons": [
                {"_id": ObjectId(), "title": f"Lesson {i}", "video_url": None, "duration": "5:00", "order": i}
                for i in range(1, lessons + 1)
            ],
            "reviews": [],
            "created_at": datetime(2024, 1, 1) + timedelta(minutes=created["count"]),
        }
        course.update(fields)
        course["_id"] = mongo.courses.insert_one(course).inserted_id
        return course

    return factory
