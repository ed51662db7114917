"""Session-level fold over workout entries."""
import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any, Protocol


class EntryLike(Protocol):
    reps: int
    sets: int
    calories: float
    form_score: float


@dataclass(frozen=True)
class SessionAggregates:
    total_reps: int = 0
    total_sets: int = 0
    total_calories: float = 0.0
    avg_form_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def recompute(entries: Iterable[EntryLike]) -> SessionAggregates:
    """
    Fold a session's entries into its cached totals.

    total_reps counts every rep of every set (reps x sets). An empty session
    folds to all zeros. The result depends only on the multiset of entries,
    never on their order or on previously cached values.
    """
    entries = list(entries)
    if not entries:
        return SessionAggregates()

    # fsum is exact, so float totals do not depend on row order
    total_calories = math.fsum(entry.calories or 0.0 for entry in entries)
    form_sum = math.fsum(entry.form_score or 0.0 for entry in entries)

    return SessionAggregates(
        total_reps=sum(entry.reps * entry.sets for entry in entries),
        total_sets=sum(entry.sets for entry in entries),
        total_calories=total_calories,
        avg_form_score=form_sum / len(entries),
    )
