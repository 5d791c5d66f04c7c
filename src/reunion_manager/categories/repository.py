from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import CategoryType
from .model import Category


class CategoryRepository(Protocol):
    """Category vocabulary; names are unique. Listing is ordered by name."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Category]:
        raise NotImplementedError

    def list_categories(self) -> Sequence[Category]:
        raise NotImplementedError

    def create(self, *, name: str, type: CategoryType, description: Optional[str] = None) -> Category:
        raise NotImplementedError

    def update(self, category_id: int, changes: Mapping[str, Any]) -> Optional[Category]:
        raise NotImplementedError

    def delete_by_id(self, category_id: int) -> bool:
        raise NotImplementedError
