"""
Reduction of one rep's raw accelerometer samples into a motion summary.
"""
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

# One standard gravity, in the sensor's units
GRAVITY_UNITS = 1.0


@dataclass(frozen=True)
class RepSample:
    """One accelerometer reading inside a rep capture window."""

    ax: float
    ay: float
    az: float
    angle: float  # degrees
    t: float = 0.0

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.ax**2 + self.ay**2 + self.az**2)


@dataclass(frozen=True)
class RepMotionSummary:
    angle_range: float
    peak_acceleration: float


@dataclass
class RepCaptureWindow:
    """The samples and time bounds of a single physical repetition."""

    rep_number: int
    samples: list[RepSample] = field(default_factory=list)
    rep_start: Optional[float] = None
    rep_end: Optional[float] = None
    rep_duration: Optional[float] = None

    @property
    def duration(self) -> Optional[float]:
        if self.rep_duration is not None:
            return self.rep_duration
        if self.rep_start is not None and self.rep_end is not None:
            return max(self.rep_end - self.rep_start, 0.0)
        return None

    def summarize(self) -> RepMotionSummary:
        return summarize_rep(self.samples)


def summarize_rep(samples: Iterable[RepSample]) -> RepMotionSummary:
    """
    Compute angle extrema and peak dynamic acceleration for one rep.

    The peak is a raw maximum of (|a| - 1g), floored at zero, with no
    smoothing, so a single noisy sample decides it. An empty sequence
    summarizes to zeros.
    """
    min_angle: Optional[float] = None
    max_angle: Optional[float] = None
    peak = 0.0

    for sample in samples:
        if min_angle is None or sample.angle < min_angle:
            min_angle = sample.angle
        if max_angle is None or sample.angle > max_angle:
            max_angle = sample.angle
        peak = max(peak, sample.magnitude - GRAVITY_UNITS)

    if min_angle is None:
        return RepMotionSummary(angle_range=0.0, peak_acceleration=0.0)

    return RepMotionSummary(angle_range=max_angle - min_angle, peak_acceleration=peak)
