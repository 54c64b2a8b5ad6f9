from bson import ObjectId

from coursehub.create_admin import create_admin
from coursehub.seed import seed


def test_admin_routes_reject_regular_users(client, user_headers):
    response = client.get("/admin/courses", headers=user_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied. Admin privileges required."
    assert client.get("/admin/courses").status_code == 401


def test_create_and_list_categories(client, admin_headers):
    created = client.post("/admin/categories", json={"name": "  Design  "}, headers=admin_headers)
    assert created.status_code == 200
    assert created.json()["name"] == "Design"

    listed = client.get("/admin/categories", headers=admin_headers).json()
    assert [c["name"] for c in listed] == ["Design"]


def test_blank_category_name_rejected(client, admin_headers):
    assert client.post("/admin/categories", json={"name": "   "}, headers=admin_headers).status_code == 422


def test_delete_category_detaches_courses(client, mongo, admin_headers, make_category, make_course):
    web = make_category("Web")
    course = make_course("React", category=web)

    response = client.delete(f"/admin/categories/{web}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Deleted", "courses_detached": 1}
    assert mongo.courses.find_one({"_id": course["_id"]})["category"] is None

    again = client.delete(f"/admin/categories/{web}", headers=admin_headers)
    assert again.status_code == 404


def test_create_course(client, mongo, admin_headers, make_category):
    web = make_category("Web")
    payload = {
        "title": "React",
        "price": 499,
        "category": str(web),
        "level": "Intermediate",
        "lessons": [{"title": "Intro", "duration": "5:00"}, {"title": "Hooks"}],
    }
    response = client.post("/admin/courses", json=payload, headers=admin_headers)
    body = response.json()

    assert response.status_code == 200
    assert body["title"] == "React"
    assert body["category"] == str(web)
    assert body["rating"] == 4.5
    assert body["enrolled_count"] == 0
    assert body["instructor"]["name"] == "CourseHub Instructor"
    assert [lesson["order"] for lesson in body["lessons"]] == [1, 2]
    assert all(ObjectId.is_valid(lesson["_id"]) for lesson in body["lessons"])
    assert mongo.courses.count_documents({}) == 1


def test_create_course_validation(client, admin_headers):
    negative = client.post("/admin/courses", json={"title": "X", "price": -1}, headers=admin_headers)
    unknown_category = client.post(
        "/admin/courses", json={"title": "X", "category": str(ObjectId())}, headers=admin_headers
    )
    assert negative.status_code == 422
    assert unknown_category.status_code == 404


def test_update_course_merges_fields(client, admin_headers, make_course):
    course = make_course("React", price=100, description="Old")
    response = client.put(
        f"/admin/courses/{course['_id']}", json={"price": 250}, headers=admin_headers
    )
    body = response.json()
    assert response.status_code == 200
    assert body["price"] == 250
    assert body["title"] == "React"
    assert body["description"] == "Old"


def test_update_course_keeps_sent_lesson_ids(client, admin_headers, make_course):
    course = make_course("React", lessons=1)
    lesson_id = str(course["lessons"][0]["_id"])
    response = client.put(
        f"/admin/courses/{course['_id']}",
        json={"lessons": [{"_id": lesson_id, "title": "Renamed"}, {"title": "New"}]},
        headers=admin_headers,
    )
    lessons = response.json()["lessons"]
    assert lessons[0]["_id"] == lesson_id
    assert lessons[0]["title"] == "Renamed"
    assert lessons[1]["_id"] != lesson_id


def test_update_course_rejects_nulled_required_fields(client, mongo, admin_headers, make_course):
    course = make_course("React", lessons=2)
    response = client.put(
        f"/admin/courses/{course['_id']}",
        json={"title": None, "lessons": None, "level": None},
        headers=admin_headers,
    )
    assert response.status_code == 422

    for field in ("price", "rating", "instructor"):
        nulled = client.put(f"/admin/courses/{course['_id']}", json={field: None}, headers=admin_headers)
        assert nulled.status_code == 422, field

    stored = mongo.courses.find_one({"_id": course["_id"]})
    assert stored["title"] == "React"
    assert stored["level"] == "Beginner"
    assert len(stored["lessons"]) == 2

    detached = client.put(f"/admin/courses/{course['_id']}", json={"category": None}, headers=admin_headers)
    assert detached.status_code == 200
    assert detached.json()["category"] is None


def test_update_and_delete_unknown_course(client, admin_headers):
    missing = str(ObjectId())
    assert client.put(f"/admin/courses/{missing}", json={"price": 1}, headers=admin_headers).status_code == 404
    assert client.delete(f"/admin/courses/{missing}", headers=admin_headers).status_code == 404


def test_delete_course(client, mongo, admin_headers, make_course):
    course = make_course()
    response = client.delete(f"/admin/courses/{course['_id']}", headers=admin_headers)
    assert response.json() == {"message": "Deleted"}
    assert mongo.courses.count_documents({}) == 0


def test_admin_course_list_includes_everything(client, admin_headers, make_course):
    for i in range(15):
        make_course(f"Course {i}")
    courses = client.get("/admin/courses", headers=admin_headers).json()
    assert len(courses) == 15
    assert courses[0]["title"] == "Course 14"


def test_mutations_are_audited(client, admin_headers, make_course):
    course = make_course()
    client.put(f"/admin/courses/{course['_id']}", json={"price": 5}, headers=admin_headers)
    client.post("/admin/categories", json={"name": "Web"}, headers=admin_headers)

    trail = client.get("/admin/audit", headers=admin_headers).json()
    assert trail["count"] == 2
    actions = {log["action"] for log in trail["logs"]}
    assert actions == {"update_course", "create_category"}
    assert all(log["actor_email"] == "admin@example.com" for log in trail["logs"])

    scoped = client.get(
        "/admin/audit", params={"target_type": "course", "target_id": str(course["_id"])}, headers=admin_headers
    ).json()
    assert [log["action"] for log in scoped["logs"]] == ["update_course"]
    assert scoped["logs"][0]["metadata"] == {"fields": ["price"]}


def test_create_admin_promotes_existing_user(client, mongo):
    client.post("/auth/register", json={"name": "Asha", "email": "asha@example.com", "password": "secret123"})

    assert create_admin(mongo, "asha@example.com", "newpass1") is False
    assert create_admin(mongo, "root@example.com", "rootpass") is True

    promoted = mongo.users.find_one({"email": "asha@example.com"})
    assert promoted["is_admin"] is True
    assert promoted["name"] == "Asha"

    login = client.post("/auth/login", json={"email": "asha@example.com", "password": "newpass1"})
    assert login.json()["user"]["is_admin"] is True


def test_seed_resets_catalog(client, mongo, make_course):
    make_course("Leftover")
    counts = seed(mongo)

    assert counts == {"categories": 10, "courses": 10}
    assert mongo.courses.count_documents({"title": "Leftover"}) == 0
    course = mongo.courses.find_one({"title": "React for Beginners"})
    assert len(course["lessons"]) == 8
    assert mongo.categories.find_one({"_id": course["category"]}) is not None

    listing = client.get("/courses", params={"sort": "popular", "limit": 1}).json()
    assert listing["courses"][0]["title"] == "Python Zero to Hero"
