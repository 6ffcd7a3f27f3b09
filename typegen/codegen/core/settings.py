"""
Hierarchical generation settings.

A setting is addressed by (unit, item kind, item identity, key). Lookup
goes from the identity-specific entry to the item-kind wildcard ("All")
and finally to the caller's default. Values are stored as text and
coerced at read time; a failed coercion falls back to the default.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar

from ...logging_config import get_logger
from .config import ALL_ITEMS

logger = get_logger(__name__)

T = TypeVar("T")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _key_part(value: Any) -> str:
    return str(getattr(value, "value", value))


@dataclass(frozen=True)
class Setting:
    """One stored setting entry."""

    unit: str
    item: str
    identity: str
    key: str
    value: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Setting":
        return cls(
            unit=str(data["unit"]),
            item=str(data["item"]),
            identity=str(data.get("identity") or ALL_ITEMS),
            key=str(data["key"]),
            value=str(data.get("value", "")),
        )


class SettingsStore:
    """Raw setting storage; answers with text only."""

    def __init__(self, settings: Optional[Iterable[Setting]] = None):
        self._values: Dict[Tuple[str, str, str, str], str] = {}
        for setting in settings or ():
            self.set(setting.unit, setting.item, setting.identity, setting.key, setting.value)

    @classmethod
    def from_entries(cls, entries: Iterable[Mapping[str, Any]]) -> "SettingsStore":
        """Build a store from plain dictionaries (as loaded from JSON)."""
        return cls(Setting.from_dict(entry) for entry in entries)

    def set(self, unit: Any, item: Any, identity: Any, key: str, value: Any) -> None:
        self._values[(_key_part(unit), _key_part(item), _key_part(identity), key)] = str(value)

    def lookup(self, unit: Any, item: Any, identity: Any, key: str) -> Optional[str]:
        """Return the stored value for an exact scope, or None."""
        return self._values.get((_key_part(unit), _key_part(item), _key_part(identity), key))

    def query_value(self, unit: Any, item: Any, identity: Any, key: str, default: str) -> str:
        """Resolve identity -> item-kind wildcard -> default."""
        value = self.lookup(unit, item, identity, key)
        if value is None and _key_part(identity) != ALL_ITEMS:
            value = self.lookup(unit, item, ALL_ITEMS, key)
        return default if value is None else value

    def __len__(self) -> int:
        return len(self._values)


def _to_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


_COERCERS: Dict[type, Callable[[str], Any]] = {
    bool: _to_bool,
    int: lambda value: int(value.strip()),
    float: lambda value: float(value.strip()),
    str: str,
}


class SettingsResolver:
    """
    Typed, memoized read path over a SettingsStore.

    Safe to share between generation threads: the cache is only written
    while holding a lock, and ``prewarm`` can fill it before fan-out.
    """

    def __init__(self, store: Optional[SettingsStore] = None):
        self.store = store if store is not None else SettingsStore()
        self._cache: Dict[Tuple[Any, ...], Any] = {}
        self._lock = threading.Lock()

    def query(
        self,
        unit: Any,
        item_kind: Any,
        identity: Any,
        key: str,
        default: Any,
        value_type: Type[T] = str,
    ) -> T:
        """
        Query a setting and coerce it to ``value_type``.

        Never raises: a value that can't be coerced yields the (coerced)
        default and a warning in the log.
        """
        cache_key = (
            _key_part(unit), _key_part(item_kind), _key_part(identity), key, str(default), value_type
        )
        with self._lock:
            if cache_key in self._cache:
                return self._cache[cache_key]

        raw = self.store.query_value(unit, item_kind, identity, key, str(default))
        result = self._coerce(raw, default, value_type, cache_key)

        with self._lock:
            self._cache.setdefault(cache_key, result)
        return result

    def query_bool(self, unit: Any, item_kind: Any, identity: Any, key: str, default: Any = "True") -> bool:
        return self.query(unit, item_kind, identity, key, default, bool)

    def query_text(self, unit: Any, item_kind: Any, identity: Any, key: str, default: str = "") -> str:
        return self.query(unit, item_kind, identity, key, default, str)

    def prewarm(self, queries: Iterable[Tuple[Any, Any, Any, str, Any, type]]) -> None:
        """Resolve a batch of queries up front."""
        for unit, item_kind, identity, key, default, value_type in queries:
            self.query(unit, item_kind, identity, key, default, value_type)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _coerce(self, raw: str, default: Any, value_type: type, scope: Tuple[Any, ...]) -> Any:
        coercer = _COERCERS.get(value_type, value_type)
        try:
            return coercer(raw)
        except (TypeError, ValueError) as e:
            logger.warning(
                "Setting %s could not be read as %s (%s); using default %r",
                "/".join(str(part) for part in scope[:4]),
                value_type.__name__,
                e,
                default,
            )

        if isinstance(default, value_type):
            return default
        try:
            return coercer(str(default))
        except (TypeError, ValueError):
            logger.warning("Default %r is not a valid %s either", default, value_type.__name__)
            return default
