"""
Per-resource icon resolution.

An IconDelegate keeps every icon that providers have claimed for one
resource, ranked by priority, and decides which one is currently shown.
Providers call `add`/`remove`; observers subscribe to change events.

A delegate starts in "owned" mode, resolving from its own priority slots.
Assigning a `master` switches it to "delegated" mode for good: the delegate
then mirrors the master's resolved icon (symlinks mirror their target).
The master can be swapped or cleared later, but the delegate never goes
back to owned mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Literal, Optional

from iconlink.core.config import DisplayOptions
from iconlink.core.events import CompositeDisposable, Disposable, Emitter, IconChange, MasterChange
from iconlink.core.icons import Icon, IconTables
from iconlink.core.scheduler import DeferredCall, DeferredQueue
from iconlink.core.storage import CacheStore, build_cache_entry, parse_cache_entry, validate_entry
from iconlink.model import Resource


logger = logging.getLogger(__name__)

DelegateMode = Literal["owned", "delegated"]
StrategyQuery = Callable[[Resource], None]


@dataclass
class _OwnedState:
    icons: Dict[int, Icon] = field(default_factory=dict)
    current_icon: Optional[Icon] = None
    current_priority: int = -1


@dataclass
class _DelegatedState:
    master: Optional["IconDelegate"] = None
    relay: Optional[CompositeDisposable] = None
    # Icon last seen through the master; a destroyed master resolves to None.
    last_icon: Optional[Icon] = None


class IconDelegate:
    def __init__(
        self,
        resource: Resource,
        *,
        tables: IconTables,
        options: Optional[DisplayOptions] = None,
        cache: Optional[CacheStore] = None,
        query: Optional[StrategyQuery] = None,
        scheduler: Optional[DeferredQueue] = None,
    ):
        self.resource: Optional[Resource] = resource
        self.tables = tables
        self.options = options or DisplayOptions()
        # Explicit None checks: both collaborators define __len__.
        self.cache = cache if cache is not None else CacheStore()
        self.scheduler = scheduler if scheduler is not None else DeferredQueue()
        self.query = query

        self.emitter = Emitter()
        self.destroyed = False
        self.applied_classes: Optional[List[str]] = None

        self._owned = _OwnedState()
        self._delegated: Optional[_DelegatedState] = None
        self._deferred: List[DeferredCall] = []
        self._querying = False

        self.deserialise()

    def __repr__(self) -> str:
        path = self.resource.path if self.resource is not None else "<destroyed>"
        return f"IconDelegate({path!r}, mode={self.mode})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        self.emitter.emit("did-destroy", self)
        self.emitter.dispose()

        if self._delegated is not None:
            if self._delegated.relay is not None:
                self._delegated.relay.dispose()
            self._delegated.relay = None
            self._delegated.master = None

        for call in self._deferred:
            call.cancel()
        self._deferred.clear()

        self._owned = _OwnedState()
        self.resource = None
        self.applied_classes = None

    def on_did_destroy(self, fn: Callable[["IconDelegate"], None]) -> Disposable:
        return self.emitter.on("did-destroy", fn)

    def on_did_change_icon(self, fn: Callable[[IconChange], None]) -> Disposable:
        return self.emitter.on("did-change-icon", fn)

    def on_did_change_master(self, fn: Callable[[MasterChange], None]) -> Disposable:
        return self.emitter.on("did-change-master", fn)

    def emit_icon_change(self, from_icon: Optional[Icon], to_icon: Optional[Icon]) -> None:
        self.emitter.emit("did-change-icon", IconChange(from_icon, to_icon))

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def mode(self) -> DelegateMode:
        return "owned" if self._delegated is None else "delegated"

    @property
    def icons(self) -> Dict[int, Icon]:
        return self._owned.icons

    @property
    def num_icons(self) -> int:
        return len(self._owned.icons)

    @property
    def current_priority(self) -> int:
        return self._owned.current_priority

    @property
    def current_icon(self) -> Optional[Icon]:
        """Resolved icon without triggering a lookup."""
        master = self._bound_master()
        if master is not None:
            return master.get_current_icon()
        return self._owned.current_icon

    def _bound_master(self) -> Optional["IconDelegate"]:
        if self._delegated is None:
            return None
        return self._delegated.master

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def get_classes(self) -> Optional[List[str]]:
        """
        Return the CSS classes for displaying the delegate's icon.

        The result is also kept in `applied_classes`, since whoever renders
        the icon needs to know which classes to remove when it changes.
        """
        resource = self.resource
        if resource is None:
            return None
        is_dir = resource.is_directory

        colour_mode = self.options.colour_mode
        if self.options.colour_changed_only and not resource.vcs_status:
            colour_mode = None

        icon = self.get_current_icon()
        classes: Optional[List[str]]
        if icon is not None:
            classes = icon.get_class(colour_mode, as_list=True)
        elif is_dir:
            classes = None
        else:
            classes = [self.options.default_icon_class]

        if resource.symlink:
            link_class = "icon-file-symlink-" + ("directory" if is_dir else "file")
            if classes:
                classes[0] = link_class
            else:
                classes = [link_class]

        self.applied_classes = classes
        return classes

    def get_current_icon(self) -> Optional[Icon]:
        """
        Retrieve the delegate's active icon.

        With nothing cached, the highest-priority slot is promoted; with no
        slots at all, providers are queried and whatever they registered is
        returned.
        """
        if self.destroyed:
            return None

        master = self._bound_master()
        if master is not None:
            return master.get_current_icon()

        owned = self._owned
        if owned.current_icon is not None:
            return owned.current_icon

        for priority in sorted(owned.icons, reverse=True):
            icon = owned.icons[priority]
            self.set_current_icon(icon, priority)
            return icon

        self._run_query()
        return self._owned.current_icon

    def set_current_icon(self, to: Optional[Icon], priority: Optional[int] = None) -> None:
        """
        Change the currently-active icon.

        Emits did-change-icon with the transition actually observed, which
        for files includes the icon picked up by re-resolution after a clear.
        """
        if self.destroyed:
            logger.debug("Ignoring set_current_icon on destroyed delegate")
            return

        owned = self._owned
        from_icon = owned.current_icon
        if from_icon is to:
            return

        owned.current_icon = to
        if priority is not None:
            owned.current_priority = priority

        # Own slots are dormant while a master is bound, but stay cached.
        if self._bound_master() is not None:
            self.serialise()
            return

        if to is None and not self.resource.is_directory:
            to = self.get_current_icon()

        self.serialise()
        self.emit_icon_change(from_icon, to)

    def _run_query(self) -> None:
        # A provider may call back into get_current_icon(); don't query again.
        if self.query is None or self._querying or self.destroyed:
            return
        self._querying = True
        try:
            self.query(self.resource)
        finally:
            self._querying = False

    # ------------------------------------------------------------------
    # Priority slots
    # ------------------------------------------------------------------
    def add(self, icon: Icon, priority: int) -> None:
        if self.destroyed:
            logger.debug("Ignoring add(%r, %s) on destroyed delegate", icon, priority)
            return
        if priority < 0:
            logger.debug("Ignoring add(%r, %s): priorities start at 0", icon, priority)
            return

        self._owned.icons[priority] = icon

        if priority >= self._owned.current_priority:
            self.set_current_icon(icon, priority)

    def remove(self, icon: Icon, priority: int) -> None:
        if self.destroyed:
            logger.debug("Ignoring remove(%r, %s) on destroyed delegate", icon, priority)
            return

        # Priority 0 is an ordinary slot.
        if self._owned.icons.get(priority) is not icon:
            return
        del self._owned.icons[priority]

        if self._owned.current_priority == priority:
            self.set_current_icon(None, -1)

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    def deserialise(self) -> None:
        """Seed the priority slots from the icon cache, if it has an entry for us."""
        if self.destroyed:
            return
        path = self.resource.path
        raw = self.cache.get(path)
        if raw is None:
            return

        table = self.tables.table_for(self.resource.is_directory)
        if table is None:
            # Deserialising too early; tables haven't loaded yet.
            logger.debug("Icon table not loaded, retrying cache restore for %s", path)
            self._defer(self.deserialise)
            return

        entry = parse_cache_entry(raw)
        icon = validate_entry(entry, table) if entry is not None else None
        if entry is not None and icon is not None:
            self.add(icon, entry.priority)
        else:
            logger.debug("Discarding stale icon cache entry for %s: %r", path, raw)
            self.cache.delete(path)

        # Providers whose rules changed get a chance to supersede the cache.
        self._defer(self._run_query)

    def serialise(self) -> None:
        if self.cache.frozen or self.resource is None:
            return
        path = self.resource.path
        icon = self._owned.current_icon
        if icon is None:
            self.cache.delete(path)
            return
        index = self.tables.index_of(icon, self.resource.is_directory)
        self.cache.set(path, build_cache_entry(self._owned.current_priority, index, icon))

    def _defer(self, fn: Callable[[], None]) -> None:
        self._deferred = [c for c in self._deferred if not (c.done or c.cancelled)]
        self._deferred.append(self.scheduler.call_soon(self._run_if_alive, fn))

    def _run_if_alive(self, fn: Callable[[], None]) -> None:
        if not self.destroyed:
            fn()

    # ------------------------------------------------------------------
    # Delegation
    # ------------------------------------------------------------------
    @property
    def master(self) -> Optional["IconDelegate"]:
        """
        Parent delegate from which to inherit icons and change events.

        NOTE: Assignment is irrevocable. A delegate that has had a master can
        be pointed at another master or cleared, but never returns to owned
        mode. This exists for symlink use only.

        Master changes further up the chain are re-broadcast as-is, so a
        relayed MasterChange describes the upstream link, not this one.
        """
        return self._bound_master()

    @master.setter
    def master(self, target: Optional["IconDelegate"]) -> None:
        if self.destroyed:
            logger.debug("Ignoring master assignment on destroyed delegate")
            return
        if self._delegated is None and target is None:
            return
        if target is not None and self._leads_back(target):
            logger.debug("Refusing master %r for %r: delegation cycle", target, self)
            return

        if self._delegated is None:
            self._delegated = _DelegatedState()
        state = self._delegated

        from_master = state.master
        if target is from_master:
            return

        previous_icon = state.last_icon if from_master is not None else self.current_icon
        state.master = target

        if state.relay is not None:
            state.relay.dispose()
            state.relay = None

        if target is not None:
            state.relay = CompositeDisposable(
                target.on_did_destroy(self._on_master_destroyed),
                target.on_did_change_master(self._relay_master_change),
                target.on_did_change_icon(self._relay_icon_change),
            )

        self.emitter.emit("did-change-master", MasterChange(from_master, target))
        to_icon = self.get_current_icon()
        state.last_icon = to_icon if target is not None else None
        self.serialise()
        self.emit_icon_change(previous_icon, to_icon)

    def _leads_back(self, target: "IconDelegate") -> bool:
        seen = set()
        node: Optional[IconDelegate] = target
        while node is not None and id(node) not in seen:
            if node is self:
                return True
            seen.add(id(node))
            node = node.master
        return False

    def _on_master_destroyed(self, _master: "IconDelegate") -> None:
        self.master = None

    def _relay_master_change(self, change: MasterChange) -> None:
        self.emitter.emit("did-change-master", change)

    def _relay_icon_change(self, change: IconChange) -> None:
        if self._delegated is not None:
            self._delegated.last_icon = change.to_icon
        self.emit_icon_change(change.from_icon, change.to_icon)
