"""Observable application state for the lab session."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional, Tuple

from .models import CurrentTrial, TrialMeasurement, TrialRecord


@dataclass(frozen=True)
class LabState:
    """Immutable snapshot; every update produces a new instance."""

    scenario: str = "cart_only"
    preset_id: str = "low"
    hanging_mass_kg: float = 0.1
    noise_enabled: bool = False
    show_fbd: bool = True
    current_trial: Optional[CurrentTrial] = None
    measurement: TrialMeasurement = field(default_factory=TrialMeasurement)
    trial_records: Tuple[TrialRecord, ...] = ()
    next_trial_id: int = 1


Subscriber = Callable[[LabState], None]


class LabStore:
    """
    Owner of the single :class:`LabState` with a subscribe/notify contract.

    Subscribers are called synchronously, in registration order, after every
    change.
    """

    def __init__(self, initial: LabState | None = None) -> None:
        self._state = initial or LabState()
        self._subscribers: List[Subscriber] = []

    @property
    def state(self) -> LabState:
        return self._state

    def get_state(self) -> LabState:
        return self._state

    def set_state(self, **changes: Any) -> LabState:
        """Apply field changes (see :class:`LabState`) and notify."""
        self._state = replace(self._state, **changes)
        self._notify()
        return self._state

    def update(self, updater: Callable[[LabState], LabState]) -> LabState:
        self._state = updater(self._state)
        self._notify()
        return self._state

    def reset_measurement(self) -> None:
        self.set_state(measurement=TrialMeasurement())

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register ``subscriber``; the returned callable unregisters it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(subscriber)
            except ValueError:
                pass

        return unsubscribe

    def _notify(self) -> None:
        for subscriber in list(self._subscribers):
            subscriber(self._state)
