"""Tests for the JSON file task store."""

import json
from datetime import datetime

import pytest

from cadence.adapters.json_store import JsonTaskStore
from cadence.core.recurrence import weekly
from cadence.core.tasks import Priority
from cadence.ports.task_store import TaskNotFoundError, TaskStoreError


@pytest.fixture
def store(tmp_path):
    return JsonTaskStore(tmp_path / "data" / "tasks.json")


class TestJsonTaskStore:
    def test_missing_file_is_empty(self, store):
        assert store.all_tasks() == []
        assert store.get_task("nope") is None

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json")
        with pytest.raises(TaskStoreError, match="Corrupt task store"):
            JsonTaskStore(path).all_tasks()

    @pytest.mark.parametrize("content", ["[]", '"tasks"', "42"])
    def test_non_object_file_raises(self, tmp_path, content):
        path = tmp_path / "tasks.json"
        path.write_text(content)
        with pytest.raises(TaskStoreError, match="expected a JSON object"):
            JsonTaskStore(path).get_task("1")

    def test_insert_and_get(self, store):
        task_id = store.insert_task(
            {
                "name": "Plan sprint",
                "date": datetime(2025, 1, 20, 10),
                "estimate": 60,
                "priority": Priority.HIGH,
                "recurrence": weekly(2),
            }
        )

        task = store.get_task(task_id)
        assert task.name == "Plan sprint"
        assert task.date == datetime(2025, 1, 20, 10)
        assert task.priority == Priority.HIGH
        assert task.recurrence == weekly(2)

    def test_file_uses_planner_shape(self, store):
        store.insert_task({"name": "Plan sprint", "list_id": "work"})
        data = json.loads(store.path.read_text())
        assert data["tasks"][0]["listId"] == "work"
        assert "list_id" not in data["tasks"][0]

    def test_incomplete_tasks_with_date_and_estimate(self, store):
        start, end = datetime(2025, 1, 15), datetime(2025, 1, 23)
        store.insert_task({"name": "In window", "date": datetime(2025, 1, 16, 9), "estimate": 30})
        store.insert_task({"name": "No estimate", "date": datetime(2025, 1, 16, 9)})
        store.insert_task({"name": "No date", "estimate": 30})
        store.insert_task(
            {"name": "Done", "date": datetime(2025, 1, 16, 9), "estimate": 30, "completed": True}
        )
        store.insert_task({"name": "At end", "date": end, "estimate": 30})

        names = [t.name for t in store.incomplete_tasks_with_date_and_estimate(start, end)]
        assert names == ["In window"]

    def test_copy_labels(self, store):
        source = store.insert_task({"name": "Source", "label_ids": ["a", "b"]})
        target = store.insert_task({"name": "Target"})

        store.copy_labels(source, target)

        assert store.get_task(target).label_ids == ["a", "b"]
        assert store.get_task(source).label_ids == ["a", "b"]

    def test_copy_labels_unknown_source(self, store):
        target = store.insert_task({"name": "Target"})
        with pytest.raises(TaskNotFoundError):
            store.copy_labels("missing", target)

    def test_set_completed(self, store):
        task_id = store.insert_task({"name": "Task"})
        at = datetime(2025, 1, 15, 18)

        task = store.set_completed(task_id, True, at)

        assert task.completed is True
        assert store.get_task(task_id).completed_at == at

    def test_set_completed_unknown(self, store):
        with pytest.raises(TaskNotFoundError, match="Task not found: missing"):
            store.set_completed("missing", True, None)
