#!/usr/bin/env python3
"""
Tests for the Vehicle base behaviour, exercised through Car.

Covers:
1. Identity defaults and repainting
2. Maintenance history - validation on add, completed-history ordering
3. Engine state machine - OFF -> RUNNING -> STOPPING -> OFF
4. Kinematics - acceleration, braking, fuel exhaustion
5. Display reads
"""

import pytest

from fleet import (
    Car,
    EngineState,
    IllegalOperation,
    InvalidInput,
    MaintenanceRecord,
    ValidationFailed,
)
from fleet.maintenance_record import COST_ERROR
from fleet.vehicle import UNDEFINED


@pytest.fixture
def car():
    return Car("Sedan", "Blue")


@pytest.fixture
def running_car(car):
    car.turn_on()
    return car


# =============================================================================
# Identity
# =============================================================================


class TestIdentity:
    """Tests for construction defaults."""

    def test_defaults(self, car):
        assert car.fuel == 100
        assert car.speed == 0
        assert car.max_speed == 200
        assert car.engine is EngineState.OFF
        assert car.history == []

    def test_blank_identity_becomes_not_defined(self):
        car = Car("  ", None)
        assert car.model == UNDEFINED
        assert car.color == UNDEFINED

    def test_identity_is_trimmed(self):
        assert Car("  Sedan ", " Blue").details_text() == "Sedan (Blue)"


class TestPaint:
    def test_paint(self, car):
        assert car.paint("  Green ") == "Green"
        assert car.color == "Green"

    @pytest.mark.parametrize("color", ["", "   ", None, 7])
    def test_invalid_color_rejected(self, car, color):
        with pytest.raises(InvalidInput, match="valid color"):
            car.paint(color)
        assert car.color == "Blue"


class TestRefuel:
    def test_refuel_caps_at_full_tank(self, car):
        car.fuel = 90
        assert car.refuel(30) == 10
        assert car.fuel == 100

    def test_refuel_accepts_numeric_text(self, car):
        car.fuel = 40
        car.refuel("25")
        assert car.fuel == 65

    @pytest.mark.parametrize("amount", [-5, "abc", None])
    def test_invalid_amount_rejected(self, car, amount):
        car.fuel = 40
        with pytest.raises(InvalidInput):
            car.refuel(amount)
        assert car.fuel == 40


# =============================================================================
# Maintenance
# =============================================================================


class TestAddMaintenance:
    """Tests for add_maintenance()."""

    def test_valid_record_appended(self, car):
        record = MaintenanceRecord("2024-05-10", "Oil change", 150)
        assert car.add_maintenance(record) is record
        assert car.history == [record]

    def test_mapping_promoted(self, car):
        record = car.add_maintenance(
            {"date": "2024-05-10", "serviceType": "Oil change", "cost": 150}
        )
        assert isinstance(record, MaintenanceRecord)
        assert record.is_completed

    def test_invalid_record_rejected_with_errors(self, car):
        with pytest.raises(ValidationFailed) as excinfo:
            car.add_maintenance(MaintenanceRecord("2024-05-10", "Oil change", -1))
        assert str(excinfo.value) == "Could not add maintenance"
        assert excinfo.value.errors == [COST_ERROR]
        assert car.history == []

    def test_invalid_scheduled_record_message(self, car):
        record = MaintenanceRecord("2030-02-30", "Inspection", status="scheduled")
        with pytest.raises(ValidationFailed, match="Could not schedule maintenance"):
            car.add_maintenance(record)

    def test_non_record_rejected(self, car):
        with pytest.raises(InvalidInput):
            car.add_maintenance("oil change")
        assert car.history == []


class TestDescribe:
    """Tests for describe()."""

    def test_empty_history(self, car):
        assert car.describe().splitlines() == [
            "Model: Sedan",
            "Color: Blue",
            "Fuel: 100%",
            "",
            "--- Completed Maintenance History ---",
            "No completed maintenance recorded.",
            "Ignition: No",
            "Speed: 0 km/h",
        ]

    def test_completed_records_newest_first(self, car):
        car.add_maintenance(MaintenanceRecord("2024-01-10", "Oil change", 100))
        car.add_maintenance(MaintenanceRecord("2024-06-01", "Tires", 400))
        lines = car.describe().splitlines()
        start = lines.index("--- Completed Maintenance History ---") + 1
        assert lines[start] == "- Tires on 01/06/2024 - $400.00"
        assert lines[start + 1] == "- Oil change on 10/01/2024 - $100.00"

    def test_scheduled_records_not_listed(self, car):
        car.add_maintenance(
            MaintenanceRecord("2030-01-15", "Inspection", status="scheduled")
        )
        assert "No completed maintenance recorded." in car.describe()
        assert "Inspection" not in car.describe()

    def test_invalid_records_counted(self, car):
        car.add_maintenance(MaintenanceRecord("2024-01-10", "Oil change", 100))
        # Stored data can hold records that never passed validation
        car.history.append(MaintenanceRecord("2024-02-30", "Brakes", 80))
        text = car.describe()
        assert "- Oil change on 10/01/2024 - $100.00" in text
        assert "(1 completed record(s) could not be displayed due to invalid data)" in text
        assert "Brakes" not in text

    def test_only_invalid_records(self, car):
        car.history.append(MaintenanceRecord("2024-01-10", "", 100))
        lines = car.describe().splitlines()
        assert "No completed maintenance recorded." in lines
        assert "(There are completed records with invalid data)" in lines

    def test_state_lines(self, running_car):
        running_car.accelerate()
        lines = running_car.describe().splitlines()
        assert lines[2] == "Fuel: 95%"
        assert lines[-2:] == ["Ignition: Yes", "Speed: 10 km/h"]


# =============================================================================
# Engine state machine
# =============================================================================


class TestEngine:
    """Tests for turn_on(), turn_off() and the shutdown sequence."""

    def test_turn_on(self, car):
        assert car.turn_on() is True
        assert car.ignition is True
        assert car.engine is EngineState.RUNNING

    def test_turn_on_twice_is_noop(self, running_car):
        assert running_car.turn_on() is False

    def test_turn_on_without_fuel(self, car):
        car.fuel = 0
        with pytest.raises(IllegalOperation, match="out of fuel"):
            car.turn_on()
        assert car.ignition is False

    def test_turn_off_when_stationary(self, running_car):
        assert running_car.turn_off() is True
        assert running_car.engine is EngineState.OFF

    def test_turn_off_when_already_off(self, car):
        assert car.turn_off() is False

    def test_turn_off_while_moving_enters_stopping(self, running_car):
        running_car.accelerate()
        running_car.accelerate()
        assert running_car.turn_off() is True
        assert running_car.stopping is True
        assert running_car.ignition is True

    def test_shutdown_steps_brake_to_off(self, running_car):
        running_car.accelerate()
        running_car.accelerate()
        running_car.turn_off()
        assert running_car.shutdown_step() is False
        assert running_car.speed == 10
        assert running_car.shutdown_step() is True
        assert running_car.speed == 0
        assert running_car.ignition is False

    def test_no_restart_while_stopping(self, running_car):
        running_car.accelerate()
        running_car.turn_off()
        with pytest.raises(IllegalOperation, match="still stopping"):
            running_car.turn_on()
        with pytest.raises(IllegalOperation):
            running_car.accelerate()

    def test_shutdown_step_when_off(self, car):
        assert car.shutdown_step() is True


# =============================================================================
# Kinematics
# =============================================================================


class TestAccelerate:
    """Tests for accelerate()."""

    def test_requires_ignition(self, car):
        with pytest.raises(IllegalOperation, match="Turn on the Sedan first!"):
            car.accelerate()
        assert car.speed == 0
        assert car.fuel == 100

    def test_step(self, running_car):
        assert running_car.accelerate() is True
        assert running_car.speed == 10
        assert running_car.fuel == 95

    def test_at_max_speed_burns_nothing(self, running_car):
        running_car.speed = 200
        assert running_car.accelerate() is False
        assert running_car.fuel == 100

    def test_speed_capped(self, running_car):
        running_car.speed = 195
        running_car.accelerate()
        assert running_car.speed == 200

    def test_fuel_exhaustion_starts_shutdown(self, running_car):
        running_car.fuel = 5
        running_car.accelerate()
        assert running_car.fuel == 0
        assert running_car.speed == 10
        assert running_car.stopping is True

    def test_fuel_exhaustion_at_standstill_never_negative(self, running_car):
        running_car.fuel = 3
        running_car.accelerate()
        assert running_car.fuel == 0


class TestBrake:
    def test_brake(self, running_car):
        running_car.speed = 25
        assert running_car.brake() is True
        assert running_car.speed == 15

    def test_brake_floors_at_zero(self, running_car):
        running_car.speed = 5
        running_car.brake()
        assert running_car.speed == 0
        assert running_car.ignition is True

    def test_brake_when_stopped(self, car):
        assert car.brake() is False

    def test_brake_works_with_ignition_off(self, car):
        """Braking only needs speed; a loaded vehicle may be moving and off."""
        car.speed = 30
        assert car.brake() is True
        assert car.speed == 20


# =============================================================================
# Display
# =============================================================================


class TestDisplay:
    """Tests for the pure display reads."""

    def test_stationary(self, car):
        car.garage_key = "myCar"
        display = car.display()
        assert display.key == "myCar"
        assert display.kind == "Car"
        assert display.details == "Sedan (Blue)"
        assert display.status == "Off"
        assert display.speed == "0 km/h"
        assert display.gauge_percent == 0
        assert display.info == ""
        assert display.can_brake is False

    def test_moving(self, running_car):
        running_car.speed = 50
        display = running_car.display()
        assert display.status == "On"
        assert display.gauge_percent == 25
        assert display.can_brake is True

    def test_reads_do_not_mutate(self, running_car):
        running_car.speed = 50
        running_car.display()
        running_car.describe()
        assert running_car.speed == 50
        assert running_car.fuel == 100
