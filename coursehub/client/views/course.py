from typing import Optional

from coursehub.client.gateway import ApiError
from coursehub.client.navigation import login_redirect
from coursehub.client.state import item_id
from coursehub.client.storage import notes_key
from coursehub.client.views.base import Page


class CourseDetailPage(Page):
    def __init__(self, app, course_id: str):
        super().__init__(app)
        self.course_id = course_id
        self.course: Optional[dict] = None
        self.is_enrolled = False

    def load(self) -> dict:
        try:
            self.course = self.gateway.get(f"/courses/{self.course_id}")
            if self.auth.user:
                check = self.gateway.get(f"/enroll/check/{self.course_id}")
                self.is_enrolled = bool(check.get("enrolled"))
        except ApiError as e:
            self.fail(e, "Failed to load course")

        return {
            "course": self.course,
            "is_enrolled": self.is_enrolled,
            "in_cart": self.cart.contains(self.course_id),
            "reviews": (self.course or {}).get("reviews", []),
        }

    def enroll(self) -> bool:
        if not self.auth.user:
            self.navigator.go(login_redirect(f"/courses/{self.course_id}"))
            return False
        try:
            self.gateway.post("/enroll", json={"course_id": self.course_id})
        except ApiError as e:
            self.fail(e, "Enroll failed")
            return False
        self.is_enrolled = True
        self.toaster.success("Enrolled successfully!", icon="🎉")
        return True

    def add_to_cart(self) -> bool:
        if not self.course:
            return False
        if not self.cart.add(self.course):
            self.toaster.info("Already in cart", icon="🛒")
            return False
        self.toaster.success("Added to cart!")
        return True

    def start_learning(self) -> bool:
        lessons = (self.course or {}).get("lessons") or []
        if not lessons:
            return False
        self.navigator.go(f"/learn/{self.course_id}/{item_id(lessons[0])}")
        return True

    def add_review(self, rating: int, comment: str) -> bool:
        if not self.auth.user:
            self.navigator.go(login_redirect(f"/courses/{self.course_id}"))
            return False
        try:
            self.gateway.post(f"/courses/{self.course_id}/reviews", json={"rating": rating, "comment": comment})
        except ApiError as e:
            self.fail(e, "Failed to add review")
            return False
        self.toaster.success("Review added")
        return True


class LessonPage(Page):
    """Video player page: lesson, sidebar, progress, notes"""
    requires_auth = True

    def __init__(self, app, course_id: str, lesson_id: str):
        super().__init__(app)
        self.course_id = course_id
        self.lesson_id = lesson_id
        self.lessons = []
        self.completed = []

    def load(self) -> Optional[dict]:
        try:
            data = self.gateway.get(f"/courses/{self.course_id}/lessons/{self.lesson_id}")
            progress = self.gateway.get(f"/progress/{self.course_id}")
        except ApiError as e:
            if e.status_code == 403:
                self.toaster.error("You need to enroll in this course first")
                self.navigator.go(f"/courses/{self.course_id}")
            else:
                self.fail(e, "Failed to load lesson")
            return None

        self.lessons = data.get("lessons", [])
        self.completed = progress.get("completed_lessons", [])
        return self._view(data)

    def _view(self, data: dict) -> dict:
        ids = [item_id(lesson) for lesson in self.lessons]
        index = ids.index(self.lesson_id) if self.lesson_id in ids else -1
        done = [lid for lid in ids if lid in self.completed]
        return {
            "course": data.get("course"),
            "lesson": data.get("lesson"),
            "sidebar": [
                {**lesson, "active": item_id(lesson) == self.lesson_id, "done": item_id(lesson) in self.completed}
                for lesson in self.lessons
            ],
            "prev_lesson": self.lessons[index - 1] if index > 0 else None,
            "next_lesson": self.lessons[index + 1] if 0 <= index < len(self.lessons) - 1 else None,
            "is_completed": self.lesson_id in self.completed,
            "progress_percent": round(len(done) / len(ids) * 100) if ids else 0,
            "notes": self.storage.get_item(notes_key(self.course_id, self.lesson_id)) or "",
        }

    def mark_complete(self) -> bool:
        if not self.auth.user:
            self.navigator.go(login_redirect(f"/learn/{self.course_id}/{self.lesson_id}"))
            return False
        try:
            self.gateway.post("/progress/complete", json={"course_id": self.course_id, "lesson_id": self.lesson_id})
        except ApiError as e:
            self.fail(e, "Error marking lesson")
            return False
        if self.lesson_id not in self.completed:
            self.completed.append(self.lesson_id)
        self.toaster.success("Marked as completed ✓")
        return True

    def save_notes(self, notes: str):
        self.storage.set_item(notes_key(self.course_id, self.lesson_id), notes)
        self.toaster.success("Notes saved")

    def go_to(self, lesson: Optional[dict]) -> bool:
        if not lesson:
            return False
        self.navigator.go(f"/learn/{self.course_id}/{item_id(lesson)}")
        return True
