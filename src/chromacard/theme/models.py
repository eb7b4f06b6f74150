"""Data structures describing ChromaCard themes."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple

ColorTuple = Tuple[int, int, int]
THEME_FIELDS: tuple[str, ...] = ("background", "foreground", "primary")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{3}|[0-9a-fA-F]{6}")
_CHANNEL_DIGITS = re.compile(r"[0-9]{1,3}")


class MalformedThemeError(ValueError):
    """Raised when a theme-shaped value is not a total three-color record."""

    def __init__(
        self,
        message: str,
        *,
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.missing: tuple[str, ...] = tuple(missing)
        self.unexpected: tuple[str, ...] = tuple(unexpected)


def _parse_channel(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Color channel {value!r} must be an integer")
    if isinstance(value, str):
        if not _CHANNEL_DIGITS.fullmatch(value):
            raise ValueError(f"Color channel {value!r} is not a decimal integer")
        channel = int(value, 10)
    else:
        channel = int(value)
    if not 0 <= channel <= 255:
        raise ValueError(f"Color channel {value!r} is outside 0-255")
    return channel


def normalize_color(value: Any) -> str:
    """Convert ``value`` into a ``#rrggbb`` string, accepting hex strings or sequences."""

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Color strings cannot be empty")
        if "," in text:
            parts = [part.strip() for part in text.split(",") if part.strip()]
            if len(parts) != 3:
                raise ValueError(f"Color '{value}' must have exactly 3 components")
            return _tuple_to_hex(tuple(_parse_channel(part) for part in parts))  # type: ignore[arg-type]
        if text.startswith("#"):
            text = text[1:]
        if not _HEX_DIGITS.fullmatch(text):
            raise ValueError(f"Unsupported color format: {value!r}")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        return "#" + text.lower()

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        items = list(value)
        if len(items) != 3:
            raise ValueError(f"RGB sequences must contain 3 values, received {value!r}")
        return _tuple_to_hex(tuple(_parse_channel(component) for component in items))  # type: ignore[arg-type]

    raise TypeError(f"Cannot convert {type(value)!r} to a color")


def hex_to_rgb(value: str) -> ColorTuple:
    text = normalize_color(value)[1:]
    return tuple(int(text[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]


def _tuple_to_hex(value: ColorTuple) -> str:
    return "#" + "".join(f"{component:02x}" for component in value)


@dataclass(frozen=True, slots=True)
class Theme:
    """Immutable background/foreground/primary color triple."""

    background: str
    foreground: str
    primary: str

    def __post_init__(self) -> None:
        missing = [name for name in THEME_FIELDS if getattr(self, name) is None]
        if missing:
            raise MalformedThemeError(
                f"Theme is missing required field(s): {', '.join(missing)}", missing=missing
            )
        for name in THEME_FIELDS:
            raw = getattr(self, name)
            try:
                color = normalize_color(raw)
            except (TypeError, ValueError) as exc:
                raise MalformedThemeError(f"Theme field '{name}' has an invalid color {raw!r}") from exc
            object.__setattr__(self, name, color)

    def rgb(self, name: str) -> ColorTuple:
        if name not in THEME_FIELDS:
            raise KeyError(f"Unknown theme field '{name}'")
        return hex_to_rgb(getattr(self, name))

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in THEME_FIELDS}

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Theme":
        """Build a theme from a mapping that supplies exactly the three color fields."""

        missing = [name for name in THEME_FIELDS if payload.get(name) is None]
        unexpected = sorted(str(key) for key in payload if key not in THEME_FIELDS)
        if missing or unexpected:
            details = []
            if missing:
                details.append(f"missing {', '.join(missing)}")
            if unexpected:
                details.append(f"unexpected {', '.join(unexpected)}")
            raise MalformedThemeError(
                f"Theme payload rejected ({'; '.join(details)})",
                missing=missing,
                unexpected=unexpected,
            )
        return cls(**{name: payload[name] for name in THEME_FIELDS})

    @classmethod
    def from_json(cls, text: str) -> "Theme":
        data = json.loads(text)
        if not isinstance(data, Mapping):
            raise MalformedThemeError("Theme JSON root must be an object")
        return cls.from_mapping(data)


def coerce_theme(value: Any) -> Theme:
    """Return ``value`` as a :class:`Theme`, validating mappings strictly."""

    if isinstance(value, Theme):
        return value
    if isinstance(value, Mapping):
        return Theme.from_mapping(value)
    raise MalformedThemeError(f"Expected a theme or mapping, received {type(value).__name__}")


__all__ = [
    "ColorTuple",
    "MalformedThemeError",
    "THEME_FIELDS",
    "Theme",
    "coerce_theme",
    "hex_to_rgb",
    "normalize_color",
]
