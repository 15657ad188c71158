"""
Small publish/subscribe primitives used by icon delegates.

An Emitter has one named channel per event kind. Subscribing returns a
Disposable; disposing it removes exactly that subscription.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Literal, Optional

if TYPE_CHECKING:
    from iconlink.core.delegate import IconDelegate
    from iconlink.core.icons import Icon

Channel = Literal["did-destroy", "did-change-icon", "did-change-master"]


@dataclass(frozen=True)
class IconChange:
    from_icon: Optional["Icon"]
    to_icon: Optional["Icon"]


@dataclass(frozen=True)
class MasterChange:
    from_master: Optional["IconDelegate"]
    to_master: Optional["IconDelegate"]


class Disposable:
    def __init__(self, on_dispose: Optional[Callable[[], None]] = None):
        self._on_dispose = on_dispose
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        if self._on_dispose is not None:
            self._on_dispose()
            self._on_dispose = None


class CompositeDisposable(Disposable):
    """Dispose a group of subscriptions together."""

    def __init__(self, *disposables: Disposable):
        super().__init__()
        self._children: List[Disposable] = list(disposables)

    def add(self, *disposables: Disposable) -> None:
        if self.disposed:
            for d in disposables:
                d.dispose()
            return
        self._children.extend(disposables)

    def __len__(self) -> int:
        return len(self._children)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        children, self._children = self._children, []
        for d in children:
            d.dispose()


class Emitter:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[[Any], None]]] = {}
        self.disposed = False

    def on(self, channel: Channel, handler: Callable[[Any], None]) -> Disposable:
        if self.disposed:
            return Disposable()
        self._handlers.setdefault(channel, []).append(handler)

        def _off() -> None:
            handlers = self._handlers.get(channel)
            if handlers and handler in handlers:
                handlers.remove(handler)

        return Disposable(_off)

    def emit(self, channel: Channel, payload: Any = None) -> None:
        if self.disposed:
            return
        # Copy: handlers may unsubscribe (or subscribe others) while we iterate.
        for handler in list(self._handlers.get(channel, ())):
            handler(payload)

    def handler_count(self, channel: Optional[Channel] = None) -> int:
        if channel is not None:
            return len(self._handlers.get(channel, ()))
        return sum(len(h) for h in self._handlers.values())

    def dispose(self) -> None:
        self._handlers.clear()
        self.disposed = True
