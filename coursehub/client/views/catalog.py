import math
from typing import Optional

from coursehub.client.gateway import ApiError
from coursehub.config import DEFAULT_PAGE_SIZE
from coursehub.client.views.base import Page


class HomePage(Page):
    def load(self) -> dict:
        view = {"popular": [], "categories": []}
        try:
            view["popular"] = self.gateway.get("/courses/popular")
            view["categories"] = self.gateway.get("/categories")
        except ApiError as e:
            self.fail(e, "Failed to load courses")
        return view


class CatalogPage(Page):
    """Course list with search, filters, sort and pagination"""

    FILTERS = ("search", "category", "level", "sort")

    def __init__(self, app, limit: int = DEFAULT_PAGE_SIZE, **filters):
        super().__init__(app)
        self.limit = limit
        self.page = 1
        self.filters = {key: filters.get(key) or "" for key in self.FILTERS}
        self.total = 0

    @property
    def has_filters(self) -> bool:
        return any(self.filters.values())

    def params(self) -> dict:
        params = {"page": self.page, "limit": self.limit}
        params.update({k: v for k, v in self.filters.items() if v})
        return params

    def load(self) -> dict:
        view = {
            "courses": [],
            "total": 0,
            "page": self.page,
            "pages": 0,
            "filters": dict(self.filters),
            "has_filters": self.has_filters,
            "error": None,
        }
        try:
            payload = self.gateway.get("/courses", params=self.params())
        except ApiError as e:
            self.fail(e, "Failed to load courses")
            view["error"] = e.message
            return view

        self.total = payload.get("total", 0)
        view.update({
            "courses": payload.get("courses", []),
            "total": self.total,
            "pages": math.ceil(self.total / self.limit),
        })
        return view

    def set_filters(self, **filters) -> dict:
        for key in self.FILTERS:
            if key in filters:
                self.filters[key] = filters[key] or ""
        self.page = 1
        return self.load()

    def reset_filters(self) -> dict:
        return self.set_filters(**{key: "" for key in self.FILTERS})

    def go_to_page(self, page: int) -> Optional[dict]:
        pages = max(math.ceil(self.total / self.limit), 1)
        if page < 1 or page > pages:
            return None
        self.page = page
        return self.load()


class CategoriesPage(Page):
    def load(self) -> dict:
        try:
            return {"categories": self.gateway.get("/categories")}
        except ApiError as e:
            self.fail(e, "Failed to load categories")
            return {"categories": []}
