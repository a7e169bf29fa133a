"""
Notifications for the presentation layer.

The rules never depend on who (if anyone) listens. Sessions push events into an injected `EventSink`;
the UI can subscribe to an `EventBus`, tests can use an `EventRecorder`.
"""

from dataclasses import dataclass, field
from typing import Callable, Protocol, TypeVar

from chesstutor.chess.square import Square
from chesstutor.core.shared_types import Side


@dataclass(frozen=True)
class TurnChanged:
    side: Side


@dataclass(frozen=True)
class BoardUpdated:
    """No payload: listeners re-read the board snapshot."""


@dataclass(frozen=True)
class CaptureOccurred:
    """Position in rendering coordinates: x grows to the right from the a-file, y grows upwards from the 1st rank."""

    x: float
    y: float
    particles: int


@dataclass(frozen=True)
class GameWon:
    """A king was taken."""


@dataclass(frozen=True)
class PuzzleSolved:
    pass


@dataclass(frozen=True)
class HintSingle:
    square: Square


@dataclass(frozen=True)
class HintPair:
    from_square: Square
    to_square: Square


@dataclass(frozen=True)
class SolutionFinished:
    """Playing out the solution has come to an end."""


Event = (
    TurnChanged
    | BoardUpdated
    | CaptureOccurred
    | GameWon
    | PuzzleSolved
    | HintSingle
    | HintPair
    | SolutionFinished
)
E = TypeVar("E")


class EventSink(Protocol):
    def notify(self, event: Event) -> None: ...


class NullSink:
    """Nobody is listening."""

    def notify(self, event: Event) -> None:
        pass


@dataclass
class EventRecorder:
    """Keeps every event in order of arrival."""

    events: list[Event] = field(default_factory=list)

    def notify(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [event for event in self.events if isinstance(event, event_type)]

    def clear(self) -> None:
        self.events.clear()


class DetachableSink:
    """Forwards to `target` until detached. Afterwards every event is dropped."""

    def __init__(self, target: EventSink) -> None:
        self.target = target
        self.attached = True

    def detach(self) -> None:
        self.attached = False

    def notify(self, event: Event) -> None:
        if self.attached:
            self.target.notify(event)


Listener = Callable[[Event], None]


class EventBus:
    """Fans every event out to the subscribed listeners, in order of subscription."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def notify(self, event: Event) -> None:
        for listener in list(self._listeners):
            listener(event)
