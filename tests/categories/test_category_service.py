from __future__ import annotations

import pytest

from reunion_manager.categories.memory_category_repository import InMemoryCategoryRepository
from reunion_manager.categories.service import CategoryService
from reunion_manager.core.enums import CategoryType
from reunion_manager.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def service(store):
    return CategoryService(InMemoryCategoryRepository(store))


def test_update_clears_description_when_sent_empty(service):
    created = service.create_category({"name": "venue", "type": "expense", "description": "Hall hire"})

    updated = service.update_category(created.category_id, {"description": ""})

    assert updated.description is None
    assert updated.name == "venue"


def test_update_keeps_description_when_key_absent(service):
    created = service.create_category({"name": "food", "type": "both", "description": "Catering"})

    updated = service.update_category(created.category_id, {"type": "budget"})

    assert updated.description == "Catering"
    assert updated.type == CategoryType.BUDGET


def test_update_rejects_duplicate_name(service):
    service.create_category({"name": "gifts", "type": "expense"})
    other = service.create_category({"name": "marketing", "type": "expense"})

    with pytest.raises(ValidationError):
        service.update_category(other.category_id, {"name": "gifts"})


def test_update_unknown_category(service):
    with pytest.raises(NotFoundError):
        service.update_category(99, {"name": "x"})
