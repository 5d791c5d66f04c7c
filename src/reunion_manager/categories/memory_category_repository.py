from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import CategoryType
from ..database.memory_store import InMemoryStore
from .model import EDITABLE_FIELDS, Category
from .repository import CategoryRepository

TABLE = "categories"


class InMemoryCategoryRepository(CategoryRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Category]:
        return self._store.table(TABLE)

    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self._rows.get(int(category_id))

    def get_by_name(self, name: str) -> Optional[Category]:
        with self._store.lock:
            return next((c for c in self._rows.values() if c.name == name), None)

    def list_categories(self) -> Sequence[Category]:
        with self._store.lock:
            return sorted(self._rows.values(), key=lambda c: (c.name, c.category_id))

    def create(self, *, name: str, type: CategoryType, description: Optional[str] = None) -> Category:
        with self._store.lock:
            category = Category(
                category_id=self._store.next_id(TABLE),
                name=name,
                type=type,
                description=description,
                created_at=now_local(),
            )
            self._rows[category.category_id] = category
            return category

    def update(self, category_id: int, changes: Mapping[str, Any]) -> Optional[Category]:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        with self._store.lock:
            current = self._rows.get(int(category_id))
            if not current:
                return None
            updated = replace(current, **allowed)
            self._rows[current.category_id] = updated
            return updated

    def delete_by_id(self, category_id: int) -> bool:
        with self._store.lock:
            return self._rows.pop(int(category_id), None) is not None
