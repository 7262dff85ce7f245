"""Tests for the worker registry and roster.json persistence."""

import json
import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from payrun.sdk.registry import WorkerRegistry, load_registry, save_registry
from payrun.sdk.schemas import (
    Category,
    HourlyPay,
    Mail,
    SalariedPay,
    TimeEntry,
    UnionMembership,
    Worker,
)


def make_worker(name: str, hourly: bool = True) -> Worker:
    comp = HourlyPay(hourly_rate=Decimal("10")) if hourly else SalariedPay(monthly_salary=Decimal("1500"))
    return Worker(name=name, address="Rua 1", compensation=comp, schedule="weekly 5")


class TestIds:
    def test_sequential_ids(self):
        registry = WorkerRegistry()
        assert registry.add(make_worker("Ana")) == "1"
        assert registry.add(make_worker("Bia")) == "2"

    def test_next_id_is_max_plus_one(self):
        registry = WorkerRegistry()
        for name in ["Ana", "Bia", "Caio"]:
            registry.add(make_worker(name))
        registry.remove("2")
        assert registry.add(make_worker("Duda")) == "4"

    def test_ids_compared_numerically(self):
        registry = WorkerRegistry()
        for i in range(10):
            registry.add(make_worker(f"W{i}"))
        assert registry.next_id() == "11"


class TestLookups:
    def test_remove_missing(self):
        assert WorkerRegistry().remove("9") is False

    def test_insertion_order(self):
        registry = WorkerRegistry([make_worker("Bia"), make_worker("Ana")])
        assert [w.name for w in registry] == ["Bia", "Ana"]
        assert "1" in registry
        assert "3" not in registry

    def test_find_by_name_ordered_by_id(self):
        registry = WorkerRegistry([make_worker("Ana"), make_worker("Bia"), make_worker("Ana")])
        assert [w.id for w in registry.find_by_name("Ana")] == ["1", "3"]
        assert registry.find_by_name("Zé") == []

    def test_find_by_union_id(self):
        registry = WorkerRegistry([make_worker("Ana"), make_worker("Bia")])
        registry.get_by_id("2").union = UnionMembership(member_id="u7", dues_rate=Decimal("1"))
        assert registry.find_by_union_id("u7").name == "Bia"
        assert registry.find_by_union_id("u8") is None


class TestPersistence:
    def test_missing_file_is_empty(self, tmp_path):
        assert len(load_registry(tmp_path / "roster.json")) == 0

    def test_save_and_load(self, tmp_path):
        registry = WorkerRegistry([make_worker("Ana"), make_worker("Bia", hourly=False)])
        ana = registry.get_by_id("1")
        ana.time_entries.append(TimeEntry(day=date(2005, 1, 3), hours=Decimal("7.50")))
        ana.payment_method = Mail()
        ana.last_paid = date(2005, 1, 7)

        path = save_registry(registry, tmp_path / "data" / "roster.json")
        loaded = load_registry(path)

        assert [w.model_dump() for w in loaded] == [w.model_dump() for w in registry]
        assert loaded.get_by_id("2").category is Category.SALARIED
        assert loaded.next_id() == "3"

    def test_file_layout(self, tmp_path):
        path = save_registry(WorkerRegistry([make_worker("Ana")]), tmp_path / "roster.json")
        data = json.loads(path.read_text())
        assert data["workers"][0]["compensation"]["kind"] == "hourly"
        assert data["workers"][0]["payment_method"] == {"kind": "cash"}

    def test_unknown_field_rejected(self, tmp_path):
        path = tmp_path / "roster.json"
        worker = make_worker("Ana").model_dump(mode="json")
        worker["nickname"] = "A"
        path.write_text(json.dumps({"workers": [worker]}))

        with pytest.raises(ValidationError):
            load_registry(path)
