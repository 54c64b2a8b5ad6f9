from coursehub.client.gateway import ApiError
from coursehub.client.views.base import Page


class AdminCategoriesPage(Page):
    admin_only = True

    def load(self) -> dict:
        try:
            return {"categories": self.gateway.get("/admin/categories") or []}
        except ApiError as e:
            self.fail(e, "Failed to load categories")
            return {"categories": []}

    def create(self, name: str) -> bool:
        if not name.strip():
            self.toaster.error("Enter a valid name")
            return False
        try:
            self.gateway.post("/admin/categories", json={"name": name.strip()})
        except ApiError as e:
            self.fail(e, "Failed to create")
            return False
        self.toaster.success("Category created")
        return True

    def delete(self, category_id: str) -> bool:
        try:
            self.gateway.delete(f"/admin/categories/{category_id}")
        except ApiError as e:
            self.fail(e, "Delete failed")
            return False
        self.toaster.info("Deleted")
        return True


class AdminCoursesPage(Page):
    admin_only = True

    def load(self) -> dict:
        try:
            return {"courses": self.gateway.get("/admin/courses") or []}
        except ApiError as e:
            self.fail(e, "Failed to load courses")
            return {"courses": []}

    def create(self, title: str, price=0, **fields) -> bool:
        if not title.strip():
            self.toaster.error("Title is required")
            return False
        try:
            self.gateway.post("/admin/courses", json={"title": title.strip(), "price": price or 0, **fields})
        except ApiError as e:
            self.fail(e, "Failed to create")
            return False
        self.toaster.success("Course created")
        return True

    def update(self, course_id: str, **fields) -> bool:
        try:
            self.gateway.put(f"/admin/courses/{course_id}", json=fields)
        except ApiError as e:
            self.fail(e, "Failed to update")
            return False
        self.toaster.success("Course updated")
        return True

    def delete(self, course_id: str) -> bool:
        try:
            self.gateway.delete(f"/admin/courses/{course_id}")
        except ApiError as e:
            self.fail(e, "Failed to delete")
            return False
        self.toaster.info("Deleted")
        return True
