"""
Calorie estimation for the two data-entry paths.

Sensor uploads (SensorDerived) use the chord swept by the forearm for a single
rep. Manual entries (ManualBulk) assume a fixed lift distance for a whole
reps x sets batch and are clamped to a plausible range. The two estimates are
independent and are not expected to agree.
"""
import math
from dataclasses import dataclass
from numbers import Real
from typing import Union

from dumbbell_tracker.core.exceptions import ValidationError
from dumbbell_tracker.metrics.motion import RepMotionSummary

GRAVITY = 9.8  # m/s^2
EFFICIENCY = 0.20
JOULES_PER_KCAL = 4184.0
FOREARM_LENGTH = 0.33  # metres
MANUAL_LIFT_DISTANCE = 0.5  # metres
MANUAL_CALORIES_MIN = 1.0
MANUAL_CALORIES_MAX = 2000.0


@dataclass(frozen=True)
class SensorDerived:
    angle_range: float
    peak_acceleration: float = 0.0

    @classmethod
    def from_summary(cls, summary: RepMotionSummary) -> "SensorDerived":
        return cls(angle_range=summary.angle_range, peak_acceleration=summary.peak_acceleration)


@dataclass(frozen=True)
class ManualBulk:
    reps: int
    sets: int


MotionEstimate = Union[SensorDerived, ManualBulk]


@dataclass(frozen=True)
class RepEnergy:
    """Physical work for one sensor-captured rep."""

    displacement: float
    work: float
    calories: float


def _require_number(field: str, value) -> float:
    # bool is an int subclass; a flag is never a quantity
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(field, "must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValidationError(field, "must be finite")
    return number


def sensor_rep_energy(weight: float, estimate: SensorDerived) -> RepEnergy:
    """Mode A: work and calories for one rep from its angle range."""
    weight = _require_number("weight", weight)
    angle_range = _require_number("angle_range", estimate.angle_range)

    displacement = 2 * FOREARM_LENGTH * math.sin(angle_range * math.pi / 360.0)
    work = weight * GRAVITY * displacement
    calories = work / (EFFICIENCY * JOULES_PER_KCAL)
    # Negative weight or range would give negative energy
    return RepEnergy(
        displacement=displacement,
        work=work,
        calories=max(calories, 0.0),
    )


def sensor_calories(weight: float, estimate: SensorDerived) -> float:
    return sensor_rep_energy(weight, estimate).calories


def manual_calories(weight: float, estimate: ManualBulk) -> float:
    """Mode B: calories for a reps x sets batch over a fixed lift distance, clamped to [1, 2000]."""
    weight = _require_number("weight", weight)
    reps = _require_number("reps", estimate.reps)
    sets = _require_number("sets", estimate.sets)

    work_total = weight * GRAVITY * MANUAL_LIFT_DISTANCE * reps * sets
    calories = work_total / (EFFICIENCY * JOULES_PER_KCAL)
    return min(max(calories, MANUAL_CALORIES_MIN), MANUAL_CALORIES_MAX)


def estimate_calories(weight: float, estimate: MotionEstimate) -> float:
    """
    Route a motion estimate to the calculation for its data-entry path.

    Ingestion and entry edits price their bulk entries through here. Rep
    capture needs the work breakdown as well and calls sensor_rep_energy.
    """
    if isinstance(estimate, SensorDerived):
        return sensor_calories(weight, estimate)
    if isinstance(estimate, ManualBulk):
        return manual_calories(weight, estimate)
    raise TypeError(f"Unsupported motion estimate: {type(estimate).__name__}")
