import httpx
import pytest

from coursehub.client.app import ClientApp
from coursehub.client.gateway import ApiError, error_message
from coursehub.client.navigation import login_redirect
from coursehub.client.state import CartState
from coursehub.client.storage import CART_KEY, TOKEN_KEY, LocalStorage
from coursehub.client.toaster import Toaster
from coursehub.client.views.account import LoginPage, ProfilePage, RegisterPage
from coursehub.client.views.admin import AdminCategoriesPage, AdminCoursesPage
from coursehub.client.views.catalog import CatalogPage, HomePage
from coursehub.client.views.certificates import CertificatesPage, CertificateViewPage
from coursehub.client.views.checkout import CartPage, CheckoutPage
from coursehub.client.views.course import CourseDetailPage, LessonPage
from coursehub.client.views.dashboard import DashboardPage, progress_percent
from coursehub.config import DEFAULT_PAGE_SIZE
from coursehub.create_admin import create_admin


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def web(client, storage):
    """Client application talking to the API through the test client"""
    return ClientApp(storage=storage, http_client=client).start()


@pytest.fixture
def signed_in(web):
    assert web.auth.register("Asha", "asha@example.com", "secret123")
    return web

# ==================== STATE ====================

def test_cart_keeps_unique_courses():
    cart = CartState()
    seen = []
    cart.subscribe(lambda state: seen.append(state.count))

    assert cart.add({"_id": "a", "price": 100})
    assert not cart.add({"_id": "a", "price": 100})
    assert cart.add({"_id": "b", "price": 50})

    assert cart.count == 2
    assert cart.total == 150
    assert cart.ids() == ["a", "b"]

    cart.remove("a")
    assert cart.ids() == ["b"]
    cart.clear()
    assert cart.is_empty
    assert seen == [1, 2, 1, 0]


def test_cart_restores_from_saved_json():
    cart = CartState([{"_id": "a", "price": 10}])
    restored = CartState.from_json(cart.to_json())
    assert restored.ids() == ["a"]
    assert CartState.from_json("{broken").is_empty
    assert CartState.from_json('{"not": "a list"}').is_empty
    assert CartState.from_json(None).is_empty


def test_unsubscribe_stops_notifications():
    cart = CartState()
    seen = []
    unsubscribe = cart.subscribe(lambda state: seen.append(state.count))
    cart.add({"_id": "a"})
    unsubscribe()
    cart.add({"_id": "b"})
    assert seen == [1]


def test_local_storage_persists_to_file(tmp_path):
    path = str(tmp_path / "state" / "storage.json")
    first = LocalStorage(path)
    first.set_item(TOKEN_KEY, "abc")
    first.set_item("other", "1")
    first.remove_item("other")

    second = LocalStorage(path)
    assert second.get_item(TOKEN_KEY) == "abc"
    assert second.keys() == [TOKEN_KEY]

    second.clear()
    assert LocalStorage(path).get_item(TOKEN_KEY) is None


def test_login_redirect_encodes_location():
    assert login_redirect("/checkout") == "/login?from=%2Fcheckout"

# ==================== GATEWAY ====================

def test_error_message_prefers_server_text():
    detail = httpx.Response(400, json={"detail": "Email already exists"})
    message = httpx.Response(400, json={"message": "Nope"})
    validation = httpx.Response(422, json={"detail": [{"loc": ["body"], "msg": "field required"}]})
    html = httpx.Response(500, text="<html>")

    assert error_message(detail) == "Email already exists"
    assert error_message(message) == "Nope"
    assert error_message(validation) == "field required"
    assert error_message(html) == "Something went wrong"


def test_stale_token_is_dropped_on_startup(client, storage):
    storage.set_item(TOKEN_KEY, "stale-token")
    app = ClientApp(storage=storage, http_client=client).start()

    assert app.auth.token is None
    assert app.auth.user is None
    assert storage.get_item(TOKEN_KEY) is None
    assert app.navigator.location == "/login?from=%2F"


def test_failed_login_does_not_redirect(web):
    assert not web.auth.login("ghost@example.com", "secret123")
    assert web.toaster.last.message == "Invalid credentials"
    assert web.navigator.location == "/"


def test_network_errors_become_api_errors(storage):
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    transport_client = httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(refuse))
    app = ClientApp(storage=storage, http_client=transport_client)
    with pytest.raises(ApiError) as exc:
        app.gateway.get("/courses")
    assert exc.value.status_code == 0

# ==================== AUTH ====================

def test_register_persists_token_and_logout_clears_it(signed_in, storage):
    assert signed_in.auth.is_authenticated
    assert storage.get_item(TOKEN_KEY) == signed_in.auth.token
    assert signed_in.toaster.last.message == "Registered"

    signed_in.auth.logout()
    assert storage.get_item(TOKEN_KEY) is None
    assert not signed_in.auth.is_authenticated


def test_session_survives_restart(signed_in, client, storage):
    restarted = ClientApp(storage=storage, http_client=client).start()
    assert restarted.auth.user["email"] == "asha@example.com"


def test_register_page_checks_password_length(web):
    page = RegisterPage(web)
    assert not page.submit("Asha", "asha@example.com", "123")
    assert web.toaster.last.message == "Password must be at least 6 characters"


def test_login_page_returns_to_origin(signed_in, client, storage):
    signed_in.auth.logout()
    signed_in.navigator.go(login_redirect("/checkout"))

    page = LoginPage(signed_in)
    assert page.load()["from"] == "/checkout"
    assert page.submit("asha@example.com", "secret123")
    assert signed_in.navigator.location == "/checkout"


def test_protected_page_redirects_when_logged_out(web):
    web.navigator.go("/dashboard")
    assert DashboardPage(web).open() is None
    assert web.navigator.location == "/login?from=%2Fdashboard"


def test_admin_page_sends_non_admins_home(signed_in):
    signed_in.navigator.go("/admin/categories")
    assert AdminCategoriesPage(signed_in).open() is None
    assert signed_in.navigator.location == "/"

# ==================== CATALOG & COURSES ====================

def test_home_and_catalog(web, make_course, make_category):
    web_dev = make_category("Web")
    make_course("React", category=web_dev, price=499)
    make_course("Pandas", price=299)

    home = HomePage(web).open()
    assert {c["title"] for c in home["popular"]} == {"React", "Pandas"}
    assert [c["name"] for c in home["categories"]] == ["Web"]

    catalog = CatalogPage(web)
    view = catalog.open()
    assert view["total"] == 2
    assert not view["has_filters"]

    filtered = catalog.set_filters(category="Web")
    assert [c["title"] for c in filtered["courses"]] == ["React"]
    assert filtered["has_filters"]
    assert catalog.reset_filters()["total"] == 2


def test_catalog_paging_bounds(web, make_course):
    for i in range(3):
        make_course(f"Course {i}")
    catalog = CatalogPage(web, limit=2)
    catalog.open()

    assert catalog.go_to_page(2)["courses"][0]["title"] == "Course 0"
    assert catalog.go_to_page(3) is None
    assert catalog.go_to_page(0) is None


def test_add_to_cart_twice(web, make_course, storage):
    course = make_course("React", price=499)
    page = CourseDetailPage(web, str(course["_id"]))
    page.open()

    assert page.add_to_cart()
    assert web.toaster.last.message == "Added to cart!"
    assert not page.add_to_cart()
    assert web.toaster.last.message == "Already in cart"
    assert web.cart.count == 1
    assert CartState.from_json(storage.get_item(CART_KEY)).ids() == [str(course["_id"])]


def test_enroll_from_detail_page(signed_in, make_course):
    course = make_course()
    page = CourseDetailPage(signed_in, str(course["_id"]))
    assert page.open()["is_enrolled"] is False

    assert page.enroll()
    assert CourseDetailPage(signed_in, str(course["_id"])).open()["is_enrolled"] is True


def test_enroll_logged_out_goes_to_login(web, make_course):
    course = make_course()
    page = CourseDetailPage(web, str(course["_id"]))
    page.open()
    assert not page.enroll()
    assert web.navigator.location == login_redirect(f"/courses/{course['_id']}")

# ==================== CHECKOUT ====================

def test_checkout_requires_login(web, make_course):
    web.cart.add({"_id": str(make_course()["_id"]), "price": 10})
    assert not CheckoutPage(web).checkout()
    assert web.navigator.location == "/login?from=%2Fcheckout"
    assert web.cart.count == 1


def test_checkout_enrolls_and_clears_cart(signed_in, make_course, mongo):
    a, b = make_course("A", price=100), make_course("B", price=50)
    for course in (a, b):
        signed_in.cart.add({"_id": str(course["_id"]), "title": course["title"], "price": course["price"]})

    assert CartPage(signed_in).open()["total"] == 150
    assert CheckoutPage(signed_in).checkout()
    assert signed_in.cart.is_empty
    assert signed_in.navigator.location == "/dashboard"

    user = mongo.users.find_one({"email": "asha@example.com"})
    assert set(user["my_courses"]) == {a["_id"], b["_id"]}


def test_failed_checkout_keeps_cart(signed_in):
    signed_in.cart.add({"_id": "not-a-course", "price": 10})
    assert not CheckoutPage(signed_in).checkout()
    assert signed_in.cart.count == 1
    assert signed_in.toaster.last.kind == "error"

# ==================== LEARNING ====================

def test_lesson_page_without_enrollment(signed_in, make_course):
    course = make_course()
    page = LessonPage(signed_in, str(course["_id"]), str(course["lessons"][0]["_id"]))

    assert page.open() is None
    assert signed_in.toaster.last.message == "You need to enroll in this course first"
    assert signed_in.navigator.location == f"/courses/{course['_id']}"


def test_lesson_navigation_progress_and_notes(signed_in, make_course):
    course = make_course(lessons=3)
    course_id = str(course["_id"])
    lesson_ids = [str(lesson["_id"]) for lesson in course["lessons"]]
    CourseDetailPage(signed_in, course_id).enroll()

    page = LessonPage(signed_in, course_id, lesson_ids[1])
    view = page.open()
    assert view["prev_lesson"]["_id"] == lesson_ids[0]
    assert view["next_lesson"]["_id"] == lesson_ids[2]
    assert view["progress_percent"] == 0

    assert page.mark_complete()
    page.save_notes("hooks run after render")
    view = page.open()
    assert view["is_completed"]
    assert view["progress_percent"] == 33
    assert view["notes"] == "hooks run after render"

    assert page.go_to(view["next_lesson"])
    assert signed_in.navigator.location == f"/learn/{course_id}/{lesson_ids[2]}"


def test_dashboard_progress(signed_in, make_course):
    course = make_course(lessons=2)
    course_id = str(course["_id"])
    CourseDetailPage(signed_in, course_id).enroll()
    LessonPage(signed_in, course_id, str(course["lessons"][0]["_id"])).mark_complete()

    view = DashboardPage(signed_in).open()
    assert view["stats"] == {"enrolled": 1, "completed": 0, "progress": 50}
    assert [c["title"] for c in view["continue"]] == ["Course"]


def test_progress_percent():
    course = {"lessons": [{"_id": "a"}, {"_id": "b"}, {"_id": "c"}]}
    assert progress_percent(course, []) == 0
    assert progress_percent(course, ["a", "b", "c"]) == 100
    assert progress_percent({"lessons": []}, ["a"]) == 0

# ==================== ACCOUNT & CERTIFICATES ====================

def test_profile_updates(signed_in):
    page = ProfilePage(signed_in)
    assert page.save_profile("Asha K")
    assert signed_in.auth.user["name"] == "Asha K"

    assert not page.change_password("secret123", "123")
    assert page.change_password("secret123", "fresh-pass")
    assert not page.change_password("secret123", "another1")
    assert signed_in.toaster.last.message == "Current password is incorrect"


def test_claim_and_download_certificate(signed_in):
    cert = CertificatesPage(signed_in).claim("React Basics")
    assert cert["student_name"] == "Asha"
    assert [c["_id"] for c in CertificatesPage(signed_in).open()["certificates"]] == [cert["_id"]]

    view_page = CertificateViewPage(signed_in, cert["_id"])
    view_page.open()
    assert view_page.download().startswith(b"%PDF")
    assert view_page.filename == "React_Basics_certificate.pdf"

# ==================== ADMIN & NAVIGATION ====================

@pytest.fixture
def admin_web(client, mongo, storage):
    create_admin(mongo, "admin@example.com", "adminpass")
    app = ClientApp(storage=storage, http_client=client).start()
    assert app.auth.login("admin@example.com", "adminpass")
    return app


def test_admin_pages(admin_web, mongo):
    categories = AdminCategoriesPage(admin_web)
    assert not categories.create("   ")
    assert categories.create("Web")
    created = categories.open()["categories"]
    assert [c["name"] for c in created] == ["Web"]

    courses = admin_web.page(AdminCoursesPage)
    assert courses.create("React", price=499, category=created[0]["_id"])
    course = courses.open()["courses"][0]
    assert course["category"]["name"] == "Web"

    assert courses.update(course["_id"], price=299)
    assert mongo.courses.find_one({})["price"] == 299
    assert categories.delete(created[0]["_id"])
    assert courses.delete(course["_id"])
    assert courses.open()["courses"] == []
    assert not courses.delete(course["_id"])
    assert admin_web.toaster.last.message == "Course not found"


def test_cart_page_and_start_learning(web, make_course):
    course = make_course("React", lessons=2)
    detail = CourseDetailPage(web, str(course["_id"]))
    detail.open()
    detail.add_to_cart()

    cart_page = CartPage(web)
    cart_page.proceed()
    assert web.navigator.location == "/checkout"
    assert cart_page.remove(str(course["_id"]))["is_empty"]

    assert detail.start_learning()
    assert web.navigator.location == f"/learn/{course['_id']}/{course['lessons'][0]['_id']}"
    web.navigator.back()
    assert web.navigator.location == "/checkout"


def test_toasts_drain(web):
    web.toaster.success("one")
    web.toaster.info("two")
    assert [t.message for t in web.toaster.drain()] == ["one", "two"]
    assert web.toaster.last is None


def test_toast_queue_is_bounded():
    toaster = Toaster(limit=3)
    for i in range(10):
        toaster.info(f"toast {i}")
    assert [t.message for t in toaster.toasts] == ["toast 7", "toast 8", "toast 9"]
    assert toaster.last.message == "toast 9"


def test_empty_catalog_has_a_single_page(web):
    catalog = CatalogPage(web)
    assert catalog.limit == DEFAULT_PAGE_SIZE
    assert catalog.open()["total"] == 0
    assert catalog.go_to_page(2) is None
    assert catalog.go_to_page(1)["courses"] == []
