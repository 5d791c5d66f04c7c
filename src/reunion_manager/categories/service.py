from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import CategoryType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Category
from .repository import CategoryRepository


class CategoryService:
    def __init__(self, categories: CategoryRepository):
        self._categories = categories

    def list_categories(self) -> Sequence[Category]:
        return self._categories.list_categories()

    def create_category(self, payload: Mapping[str, Any]) -> Category:
        name = require_non_empty(payload.get("name"), "Name")
        category_type = require_enum(payload.get("type"), CategoryType, "Type")

        if self._categories.get_by_name(name):
            raise ValidationError("Category with this name already exists")

        return self._categories.create(
            name=name,
            type=category_type,
            description=optional_text(payload.get("description")),
        )

    def update_category(self, category_id: int, payload: Mapping[str, Any]) -> Category:
        if not self._categories.get_by_id(int(category_id)):
            raise NotFoundError("Category not found")

        changes: dict[str, Any] = {}
        if "name" in payload:
            changes["name"] = require_non_empty(payload["name"], "Name")
        if "type" in payload:
            changes["type"] = require_enum(payload["type"], CategoryType, "Type")
        # an explicit null or blank description clears it
        if "description" in payload:
            changes["description"] = optional_text(payload["description"])

        if "name" in changes:
            other = self._categories.get_by_name(changes["name"])
            if other and other.category_id != int(category_id):
                raise ValidationError("Category with this name already exists")

        updated = self._categories.update(int(category_id), changes)
        if not updated:
            raise NotFoundError("Category not found")
        return updated

    def delete_category(self, category_id: int) -> None:
        if not self._categories.delete_by_id(int(category_id)):
            raise NotFoundError("Category not found")
