"""Typed, fallback-safe reads over values coming out of the Lua runtime.

Every read is "attempt typed read; on absence, wrong type or empty string,
return the default". Nothing here raises for malformed script data.

The runtime is built with ``encoding=None``: Lua strings arrive as ``bytes``
and are decoded leniently in ``as_string``, while Python text headed into
Lua goes through ``to_lua``.
"""

from __future__ import annotations

from typing import Any

from lupa import LuaError, LuaRuntime, lua_type

# Upper bound on the number of entries read from one script sequence.
MAX_SEQUENCE_LENGTH = 10_000


def new_runtime() -> LuaRuntime:
    return LuaRuntime(
        encoding=None,
        source_encoding="UTF-8",
        unpack_returned_tuples=True,
        register_eval=False,
    )


def to_lua(value: Any) -> Any:
    """Encode ``str`` as UTF-8; Lua strings are byte strings in this runtime."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


class ScriptValue:
    """A value read from the runtime.

    ``rawget`` is the runtime's own ``rawget``; when present, field reads
    bypass ``__index`` metamethods.
    """

    __slots__ = ("raw", "rawget")

    def __init__(self, raw: Any = None, rawget: Any = None) -> None:
        self.raw = raw
        self.rawget = rawget

    def __repr__(self) -> str:
        return f"ScriptValue({self.raw!r})"

    @property
    def is_table(self) -> bool:
        return self.raw is not None and lua_type(self.raw) == "table"

    @property
    def is_function(self) -> bool:
        return self.raw is not None and lua_type(self.raw) == "function"

    @property
    def is_nil(self) -> bool:
        return self.raw is None

    def get(self, key: str | int) -> "ScriptValue":
        if not self.is_table:
            return ScriptValue()
        try:
            key = to_lua(key)
            if self.rawget is not None:
                value = self.rawget(self.raw, key)
            else:
                value = self.raw[key]
        except (LuaError, TypeError, UnicodeError):
            return ScriptValue()
        return ScriptValue(value, self.rawget)

    def table(self, key: str | int) -> "ScriptValue | None":
        value = self.get(key)
        return value if value.is_table else None

    def as_string(self, default: str) -> str:
        raw = self.raw
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        if isinstance(raw, str) and raw:
            return raw
        return default

    def as_integer(self, default: int, minimum: int | None = None) -> int:
        raw = self.raw
        if isinstance(raw, bool):
            return default
        if isinstance(raw, float) and raw.is_integer():
            raw = int(raw)
        if not isinstance(raw, int) or raw < 0:
            return default
        if minimum is not None:
            return max(raw, minimum)
        return raw

    def as_boolean(self, default: bool) -> bool:
        if isinstance(self.raw, bool):
            return self.raw
        return default

    def string(self, key: str | int, default: str) -> str:
        return self.get(key).as_string(default)

    def integer(self, key: str | int, default: int, minimum: int | None = None) -> int:
        return self.get(key).as_integer(default, minimum)

    def boolean(self, key: str | int, default: bool) -> bool:
        return self.get(key).as_boolean(default)

    def length(self) -> int:
        """Largest positive integer key, so holes never shift later entries."""
        if not self.is_table:
            return 0
        highest = 0
        try:
            for key in self.raw.keys():
                if isinstance(key, int) and not isinstance(key, bool) and key > highest:
                    highest = key
        except (LuaError, UnicodeError):
            return 0
        return min(highest, MAX_SEQUENCE_LENGTH)

    def sequence(self) -> list["ScriptValue"]:
        return [self.get(i) for i in range(1, self.length() + 1)]
