#!/usr/bin/env python3
"""Tests for the Truck variant."""

import pytest

from fleet import InvalidInput, Truck
from fleet.truck import DEFAULT_CAPACITY


@pytest.fixture
def truck():
    return Truck("Hauler 5000", "White", 5000)


class TestCapacity:
    """Tests for capacity normalization and changes."""

    def test_capacity(self, truck):
        assert truck.cargo_capacity == 5000
        assert truck.current_cargo == 0
        assert truck.max_speed == 120

    @pytest.mark.parametrize("capacity", [None, 0, -10, "heavy"])
    def test_invalid_capacity_falls_back(self, capacity):
        assert Truck("T", "W", capacity).cargo_capacity == DEFAULT_CAPACITY

    def test_capacity_from_text(self):
        assert Truck("T", "W", "2500").cargo_capacity == 2500

    def test_capacity_change_empties_truck(self, truck):
        truck.load(1000)
        assert truck.set_capacity(8000) is True
        assert truck.cargo_capacity == 8000
        assert truck.current_cargo == 0

    def test_same_capacity_keeps_cargo(self, truck):
        truck.load(1000)
        assert truck.set_capacity(5000) is False
        assert truck.current_cargo == 1000


class TestLoadUnload:
    """Tests for load() and unload()."""

    def test_load_scenario(self, truck):
        """load 3000, load 3000 (too much), unload 3000, unload 1 (nothing left)."""
        assert truck.load(3000) == 3000

        with pytest.raises(InvalidInput) as excinfo:
            truck.load(3000)
        assert str(excinfo.value) == (
            "Load exceeds the maximum capacity of 5000kg! Current cargo: 3000kg."
        )
        assert truck.current_cargo == 3000

        assert truck.unload(3000) == 0

        with pytest.raises(InvalidInput) as excinfo:
            truck.unload(1)
        assert str(excinfo.value) == "Cannot unload 1kg. Current cargo: 0kg."
        assert truck.current_cargo == 0

    def test_load_to_exact_capacity(self, truck):
        truck.load(5000)
        assert truck.remaining_capacity == 0

    @pytest.mark.parametrize("weight", [0, -5, "abc", None])
    def test_invalid_weight(self, truck, weight):
        with pytest.raises(InvalidInput, match="valid positive weight to load"):
            truck.load(weight)
        with pytest.raises(InvalidInput, match="valid positive weight to unload"):
            truck.unload(weight)

    def test_weight_from_text(self, truck):
        truck.load("1200")
        assert truck.current_cargo == 1200


class TestKinematics:
    """Tests for the cargo-dependent acceleration and braking."""

    def test_empty_truck_step(self, truck):
        truck.turn_on()
        truck.accelerate()
        assert truck.speed == 10
        assert truck.fuel == 92

    def test_full_truck_step(self, truck):
        truck.load(5000)
        truck.turn_on()
        truck.accelerate()
        assert truck.speed == 5
        assert truck.fuel == 88

    def test_full_truck_brakes_less(self, truck):
        truck.load(5000)
        truck.speed = 50
        truck.brake()
        assert truck.speed == 45

    def test_empty_truck_brakes_full_step(self, truck):
        truck.speed = 50
        truck.brake()
        assert truck.speed == 40


class TestDisplay:
    def test_details(self, truck):
        truck.load(1500)
        assert truck.details_text() == "Hauler 5000 (White) - 1500kg / 5000kg"

    def test_info(self, truck):
        assert truck.info_text() == "Current cargo: 0kg (Capacity: 5000kg)"

    def test_describe_includes_cargo(self, truck):
        truck.load(250)
        assert truck.describe().splitlines()[-1] == "Cargo: 250kg / 5000kg"
