"""Tests for the processing task catalog."""

import pytest

from src.upload.tasks import (
    DEFAULT_TASKS,
    PROCESSING_TASKS,
    catalog_order,
    parse_tasks,
    serialize_tasks,
    toggle_task,
)


def test_catalog_order_and_defaults():
    """Catalog lists tasks in display order with RESIZE and THUMBNAIL preselected."""
    assert [task.id for task in PROCESSING_TASKS] == ["RESIZE", "THUMBNAIL", "WATERMARK"]
    assert DEFAULT_TASKS == {"RESIZE", "THUMBNAIL"}
    assert PROCESSING_TASKS[2].description == "Apply watermark overlay"


def test_serialize_uses_catalog_order():
    assert serialize_tasks(["WATERMARK", "RESIZE"]) == "RESIZE,WATERMARK"
    assert serialize_tasks({"THUMBNAIL", "WATERMARK", "RESIZE"}) == "RESIZE,THUMBNAIL,WATERMARK"
    assert serialize_tasks([]) == ""


def test_toggle_order_does_not_change_serialization():
    """Reaching the same set through different toggle orders serializes identically."""
    first = DEFAULT_TASKS
    for task_id in ["WATERMARK", "RESIZE"]:
        first = toggle_task(first, task_id)

    second = DEFAULT_TASKS
    for task_id in ["RESIZE", "WATERMARK"]:
        second = toggle_task(second, task_id)

    assert first == second == {"THUMBNAIL", "WATERMARK"}
    assert serialize_tasks(first) == serialize_tasks(second) == "THUMBNAIL,WATERMARK"


def test_toggle_twice_restores_set():
    assert toggle_task(toggle_task(DEFAULT_TASKS, "THUMBNAIL"), "THUMBNAIL") == DEFAULT_TASKS


def test_toggle_unknown_task_raises():
    with pytest.raises(ValueError):
        toggle_task(DEFAULT_TASKS, "SHARPEN")


def test_parse_tasks():
    assert parse_tasks("watermark, resize") == {"RESIZE", "WATERMARK"}
    assert parse_tasks("") == frozenset()
    with pytest.raises(ValueError, match="Unknown processing task"):
        parse_tasks("RESIZE,BLUR")


def test_catalog_order_drops_duplicates():
    assert catalog_order(["THUMBNAIL", "RESIZE", "THUMBNAIL"]) == ["RESIZE", "THUMBNAIL"]
