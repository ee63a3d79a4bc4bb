"""Tests for the in-memory repository and the default seed."""

from decimal import Decimal

import pytest

from scheduler.config import AppConfig, SchedulingConfig
from scheduler.schemas.service_schema import Service
from scheduler.storage.repository import DuplicateRecordError, InMemoryRepository, Store
from scheduler.storage.seed import DEFAULT_SERVICES, default_day_rules, seed_store


@pytest.fixture
def services():
    return InMemoryRepository()


def make_service(service_id: str = "line-up", **overrides) -> Service:
    data = dict(id=service_id, name="Line Up", price=Decimal("10"), duration_minutes=15)
    data.update(overrides)
    return Service(**data)


class TestInMemoryRepository:
    def test_insert_and_get(self, services):
        services.insert(make_service())
        assert services.get("line-up").name == "Line Up"

    def test_get_unknown_returns_none(self, services):
        assert services.get("nope") is None

    def test_duplicate_insert_rejected(self, services):
        services.insert(make_service())
        with pytest.raises(DuplicateRecordError):
            services.insert(make_service())

    def test_returned_records_are_copies(self, services):
        services.insert(make_service())
        record = services.get("line-up")
        record.name = "Changed"
        assert services.get("line-up").name == "Line Up"

    def test_list_with_predicate(self, services):
        services.insert(make_service("a", is_active=True))
        services.insert(make_service("b", is_active=False))
        assert [s.id for s in services.list(lambda s: s.is_active)] == ["a"]

    def test_update_revalidates(self, services):
        services.insert(make_service())
        updated = services.update("line-up", price=Decimal("12"))
        assert updated.price == Decimal("12")
        with pytest.raises(ValueError):
            services.update("line-up", duration_minutes=0)

    def test_update_unknown_returns_none(self, services):
        assert services.update("nope", name="x") is None

    def test_delete(self, services):
        services.insert(make_service())
        assert services.delete("line-up") is True
        assert services.delete("line-up") is False
        assert services.count() == 0

    def test_custom_key_field(self):
        rules = InMemoryRepository(key_field="weekday")
        for rule in default_day_rules():
            rules.insert(rule)
        assert rules.get(6).open_time == 8 * 60


class TestSeed:
    def test_seeds_services_and_hours(self):
        store = Store()
        seed_store(store)
        assert store.services.count() == len(DEFAULT_SERVICES)
        assert store.day_rules.count() == 7

    def test_seed_skips_populated_collections(self):
        store = Store()
        store.services.insert(make_service("custom"))
        seed_store(store)
        assert store.services.count() == 1
        assert store.day_rules.count() == 7

    def test_default_hours(self):
        rules = {r.weekday: r for r in default_day_rules()}
        assert not rules[0].is_open
        assert not rules[1].is_open
        assert (rules[2].open_time, rules[2].close_time) == (540, 1080)
        assert (rules[6].open_time, rules[6].close_time) == (480, 840)

    def test_lunch_on_every_open_day(self):
        rules = {r.weekday: r for r in default_day_rules()}
        for weekday in (2, 3, 4, 5, 6):
            assert str(rules[weekday].lunch_break) == "13:00-14:00"
        assert rules[0].lunch_break is None
        assert rules[1].lunch_break is None

    def test_no_lunch_when_closed_by_lunchtime(self):
        config = AppConfig(
            scheduling=SchedulingConfig(lunch_break_start="14:00", lunch_break_end="15:00")
        )
        rules = {r.weekday: r for r in default_day_rules(config)}
        assert str(rules[2].lunch_break) == "14:00-15:00"
        assert rules[6].lunch_break is None

    def test_service_ids_and_order(self):
        store = Store()
        seed_store(store)
        ordered = sorted(store.services.list(), key=lambda s: s.sort_order)
        assert ordered[0].id == "regular-cut"
        assert ordered[3].id == "haircut-beard"
        assert ordered[3].duration_minutes == 50
        assert ordered[-1].id == "eyebrows"
