"""Ref-counted glyph provider registry keyed by backend kind and font path."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from textedit.api.glyph_metrics import GlyphMetricsProvider

_LOG = logging.getLogger(__name__)

ProviderLoader = Callable[[str], GlyphMetricsProvider]
ProviderUnloader = Callable[[GlyphMetricsProvider], None]


@dataclass(frozen=True, slots=True)
class FontHandle:
    kind: str
    path: str


@dataclass(slots=True)
class _LoadedFont:
    provider: GlyphMetricsProvider
    refs: int
    unloader: ProviderUnloader | None


class FontRegistry:
    """Loads each ``(kind, path)`` once and shares the provider until released."""

    def __init__(self) -> None:
        self._loaders: dict[str, tuple[ProviderLoader, ProviderUnloader | None]] = {}
        self._loaded: dict[tuple[str, str], _LoadedFont] = {}

    def register_kind(
        self,
        kind: str,
        loader: ProviderLoader,
        *,
        unloader: ProviderUnloader | None = None,
    ) -> None:
        normalized = kind.strip()
        if not normalized:
            raise ValueError("kind must not be empty")
        self._loaders[normalized] = (loader, unloader)

    def kinds(self) -> tuple[str, ...]:
        return tuple(sorted(self._loaders))

    def load(self, kind: str, path: str) -> FontHandle:
        """Load or acquire a provider; failures from the loader propagate."""
        key = (kind, path)
        loaded = self._loaded.get(key)
        if loaded is not None:
            loaded.refs += 1
            return FontHandle(kind=kind, path=path)
        loader_entry = self._loaders.get(kind)
        if loader_entry is None:
            raise KeyError(f"unknown font kind: {kind}")
        loader, unloader = loader_entry
        provider = loader(path)
        self._loaded[key] = _LoadedFont(provider=provider, refs=1, unloader=unloader)
        _LOG.info("font_loaded kind=%s path=%s", kind, path)
        return FontHandle(kind=kind, path=path)

    def get(self, handle: FontHandle) -> GlyphMetricsProvider:
        loaded = self._loaded.get((handle.kind, handle.path))
        if loaded is None:
            raise KeyError(f"font not loaded: kind={handle.kind} path={handle.path}")
        return loaded.provider

    def ref_count(self, handle: FontHandle) -> int:
        loaded = self._loaded.get((handle.kind, handle.path))
        return 0 if loaded is None else loaded.refs

    def release(self, handle: FontHandle) -> None:
        """Drop one reference; the provider is unloaded with its last reference."""
        key = (handle.kind, handle.path)
        loaded = self._loaded.get(key)
        if loaded is None:
            return
        loaded.refs -= 1
        if loaded.refs > 0:
            return
        self._unload(key, loaded)

    def clear(self) -> None:
        for key, loaded in tuple(self._loaded.items()):
            self._unload(key, loaded)

    def _unload(self, key: tuple[str, str], loaded: _LoadedFont) -> None:
        if loaded.unloader is not None:
            loaded.unloader(loaded.provider)
        self._loaded.pop(key, None)
        _LOG.info("font_unloaded kind=%s path=%s", key[0], key[1])
