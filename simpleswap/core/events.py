"""Domain events emitted by committed pool operations.

Each successful mutating operation emits exactly one event. Events raised
inside an operation are buffered by ``PoolContext.atomic`` and only reach the
``EventLog`` once the operation has committed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Union


@dataclass(frozen=True)
class LiquidityAdded:
    asset_a: str
    asset_b: str
    amount_a: int
    amount_b: int
    shares_issued: int
    to: str

    name = "LiquidityAdded"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class LiquidityRemoved:
    asset_a: str
    asset_b: str
    amount_a: int
    amount_b: int
    shares_burned: int
    to: str

    name = "LiquidityRemoved"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class TokensSwapped:
    caller: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int

    name = "TokensSwapped"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, **asdict(self)}


PoolEvent = Union[LiquidityAdded, LiquidityRemoved, TokensSwapped]
Subscriber = Callable[[PoolEvent], None]


class EventLog:
    """Ordered record of committed events with synchronous fan-out."""

    def __init__(self) -> None:
        self._events: List[PoolEvent] = []
        self._subscribers: List[Subscriber] = []

    @property
    def events(self) -> List[PoolEvent]:
        return list(self._events)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for every future event; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: PoolEvent) -> None:
        self._events.append(event)
        for callback in list(self._subscribers):
            callback(event)

    def of_type(self, event_type: type) -> List[PoolEvent]:
        return [e for e in self._events if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self._events)
