"""Tests for PolicyRegistry."""

import logging

import pytest

from library_reservations.exceptions import UnknownClassificationError
from library_reservations.policy import (
    DEFAULT_POLICIES,
    PolicyRegistry,
    create_default_registry,
)
from library_reservations.types import NORMAL, STUDENT, ReservationPolicy


class TestDefaultRegistry:
    def test_student_policy(self):
        registry = create_default_registry()
        assert registry.resolve(STUDENT) == ReservationPolicy(5, 14)

    def test_normal_policy(self):
        registry = create_default_registry()
        assert registry.resolve(NORMAL) == ReservationPolicy(3, 7)

    def test_registries_are_independent(self):
        first = create_default_registry()
        second = create_default_registry()
        first.register(STUDENT, ReservationPolicy(1, 1))
        assert second.resolve(STUDENT) == DEFAULT_POLICIES[STUDENT]


class TestRegister:
    def test_register_new_classification(self):
        registry = create_default_registry()
        registry.register("faculty", ReservationPolicy(10, 30))
        assert registry.resolve("faculty") == ReservationPolicy(10, 30)
        assert "faculty" in registry
        assert len(registry) == 3

    def test_last_registration_wins(self):
        registry = PolicyRegistry()
        registry.register("faculty", ReservationPolicy(10, 30))
        registry.register("faculty", ReservationPolicy(8, 21))
        assert registry.resolve("faculty") == ReservationPolicy(8, 21)

    def test_replacement_is_logged(self, caplog):
        registry = create_default_registry()
        with caplog.at_level(logging.INFO, logger="library_reservations.policy.registry"):
            registry.register(NORMAL, ReservationPolicy(4, 7))
        assert "Replaced reservation policy" in caplog.text

    def test_register_rejects_non_policy(self):
        registry = PolicyRegistry()
        with pytest.raises(TypeError):
            registry.register("faculty", {"max_reservations": 3})

    def test_unregister(self):
        registry = create_default_registry()
        registry.unregister(NORMAL)
        assert NORMAL not in registry
        registry.unregister("never-registered")


class TestResolve:
    def test_unknown_classification_raises(self):
        registry = create_default_registry()
        with pytest.raises(UnknownClassificationError) as exc_info:
            registry.resolve("visitor")
        assert exc_info.value.classification == "visitor"

    def test_match_is_exact(self):
        registry = create_default_registry()
        with pytest.raises(UnknownClassificationError):
            registry.resolve("Student")

    def test_empty_registry(self):
        with pytest.raises(UnknownClassificationError):
            PolicyRegistry().resolve(STUDENT)


class TestLoad:
    def test_load_skips_inactive(self):
        registry = PolicyRegistry()
        loaded = registry.load(
            {
                STUDENT: ReservationPolicy(6, 21),
                "guest": ReservationPolicy(1, 3, active=False),
            }
        )
        assert loaded == 1
        assert registry.classifications == frozenset({STUDENT})

    def test_load_keeps_unmentioned(self):
        registry = create_default_registry()
        registry.load({STUDENT: ReservationPolicy(6, 21)})
        assert registry.resolve(STUDENT) == ReservationPolicy(6, 21)
        assert registry.resolve(NORMAL) == ReservationPolicy(3, 7)

    def test_iteration_order(self):
        registry = PolicyRegistry({"b": ReservationPolicy(1, 1), "a": ReservationPolicy(2, 2)})
        assert list(registry) == ["b", "a"]
