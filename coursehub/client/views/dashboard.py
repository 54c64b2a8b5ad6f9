from coursehub.client.gateway import ApiError
from coursehub.client.state import item_id
from coursehub.client.views.base import Page


def progress_percent(course: dict, completed: list) -> int:
    lesson_ids = [item_id(lesson) for lesson in course.get("lessons") or []]
    if not lesson_ids:
        return 0
    done = sum(1 for lid in lesson_ids if lid in completed)
    return round(done / len(lesson_ids) * 100)


class DashboardPage(Page):
    """Enrolled courses with per-course progress"""
    requires_auth = True

    def load(self) -> dict:
        view = {"courses": [], "continue": [], "stats": {"enrolled": 0, "completed": 0, "progress": 0}}
        try:
            courses = self.gateway.get("/user/courses") or []
            for course in courses:
                progress = self.gateway.get(f"/progress/{item_id(course)}")
                course["progress"] = progress_percent(course, progress.get("completed_lessons", []))
        except ApiError as e:
            self.fail(e, "Failed to load dashboard")
            return view

        view["courses"] = courses
        view["continue"] = [c for c in courses if 0 < c["progress"] < 100]
        view["stats"] = {
            "enrolled": len(courses),
            "completed": sum(1 for c in courses if c["progress"] == 100),
            "progress": round(sum(c["progress"] for c in courses) / len(courses)) if courses else 0,
        }
        return view
