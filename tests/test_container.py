from __future__ import annotations

import pytest

from reunion_manager.container import build_container


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError, match="Unknown storage backend"):
        build_container(backend="sqlite")


def test_sections_outside_the_enum_are_rejected():
    with pytest.raises(ValueError, match="Unknown sections: E"):
        build_container(backend="memory", sections=["A", "E"])


def test_sections_may_reorder_or_subset_the_enum():
    container = build_container(backend="memory", sections=["C", "A"])

    summary = container.report_service.get_dashboard_summary()

    assert [s.section for s in summary.section_stats] == ["C", "A"]
