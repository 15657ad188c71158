"""
Owner of the icon delegates for a file tree.

The service hands out one delegate per path, wires symlinks to their
targets, and fans strategy queries out to whatever providers registered.
It never decides icons itself: providers do, by calling `add` on the
delegate they are given.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from iconlink.core.config import DisplayOptions
from iconlink.core.delegate import IconDelegate
from iconlink.core.events import Disposable
from iconlink.core.icons import IconTables
from iconlink.core.scheduler import DeferredQueue
from iconlink.core.storage import CacheStore
from iconlink.model import Resource


logger = logging.getLogger(__name__)

# A provider receives the resource and the delegate it should `add` icons to.
IconProvider = Callable[[Resource, IconDelegate], None]


class IconService:
    def __init__(
        self,
        *,
        tables: IconTables,
        options: Optional[DisplayOptions] = None,
        cache: Optional[CacheStore] = None,
        scheduler: Optional[DeferredQueue] = None,
    ):
        self.tables = tables
        self.options = options or DisplayOptions()
        self.cache = cache if cache is not None else CacheStore()
        self.scheduler = scheduler if scheduler is not None else DeferredQueue()
        self._delegates: Dict[str, IconDelegate] = {}
        self._providers: List[IconProvider] = []

    def add_provider(self, provider: IconProvider) -> Disposable:
        self._providers.append(provider)

        def _remove() -> None:
            if provider in self._providers:
                self._providers.remove(provider)

        return Disposable(_remove)

    def query(self, resource: Resource) -> None:
        """Strategy query handed to every delegate."""
        delegate = self._delegates.get(resource.path)
        if delegate is None or delegate.destroyed:
            return
        for provider in list(self._providers):
            provider(resource, delegate)

    def delegate_for(self, resource: Resource) -> IconDelegate:
        delegate = self._delegates.get(resource.path)
        if delegate is not None and not delegate.destroyed:
            return delegate
        delegate = IconDelegate(
            resource,
            tables=self.tables,
            options=self.options,
            cache=self.cache,
            query=self.query,
            scheduler=self.scheduler,
        )
        self._delegates[resource.path] = delegate
        return delegate

    def get(self, path: str) -> Optional[IconDelegate]:
        return self._delegates.get(path)

    def link(self, resource: Resource, target: Optional[Resource]) -> IconDelegate:
        """Make `resource` mirror `target`'s icon (or stop mirroring, with None)."""
        delegate = self.delegate_for(resource)
        delegate.master = self.delegate_for(target) if target is not None else None
        return delegate

    def forget(self, path: str) -> None:
        delegate = self._delegates.pop(path, None)
        if delegate is not None:
            logger.debug("Destroying icon delegate for %s", path)
            delegate.destroy()

    def paths(self) -> List[str]:
        return sorted(self._delegates)

    def destroy(self) -> None:
        for path in list(self._delegates):
            self.forget(path)
        self._providers.clear()
