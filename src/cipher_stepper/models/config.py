"""Per-cipher configuration variants.

Each variant reads the option keys a share link round-trips (``shift``,
``keyword``, ``rotors``, ``positions``) and ignores everything else. Invalid
values fall back to the last good value or a hardcoded default; with
``strict=True`` they raise :class:`ConfigurationError` instead.
"""
from dataclasses import dataclass, replace
from numbers import Integral, Real
from typing import Any, Mapping, Tuple, Union

import structlog

from cipher_stepper.alphabet import letters_only
from cipher_stepper.errors import ConfigurationError

log = structlog.get_logger(__name__)

type CipherOptions = Mapping[str, Any]

DEFAULT_SHIFT = 3
DEFAULT_KEYWORD = "KEY"
ROTOR_IDS: Tuple[str, ...] = ("I", "II", "III")
DEFAULT_ROTORS: Tuple[str, str, str] = ("I", "II", "III")
DEFAULT_POSITIONS: Tuple[int, int, int] = (0, 0, 0)


def _reject(option: str, value: Any, reason: str, strict: bool, fallback: Any) -> Any:
    if strict:
        raise ConfigurationError(option, value, reason)
    log.warning("invalid cipher option, using fallback", option=option, value=repr(value), reason=reason, fallback=fallback)
    return fallback


def _as_int(value: Any) -> int | None:
    """Accept ints and integral floats (share links carry JSON numbers). Reject bools."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real) and float(value).is_integer():
        return int(value)
    return None


@dataclass(frozen=True, slots=True)
class CaesarConfig:
    shift: int = DEFAULT_SHIFT

    def merge(self, options: CipherOptions, *, strict: bool = False) -> "CaesarConfig":
        if "shift" not in options:
            return self
        value = options["shift"]
        shift = _as_int(value)
        if shift is None:
            return replace(self, shift=_reject("shift", value, "expected an integer", strict, self.shift))
        return replace(self, shift=shift)

    def to_options(self) -> dict:
        return {"shift": self.shift}


@dataclass(frozen=True, slots=True)
class AtbashConfig:
    def merge(self, options: CipherOptions, *, strict: bool = False) -> "AtbashConfig":
        return self

    def to_options(self) -> dict:
        return {}


@dataclass(frozen=True, slots=True)
class VigenereConfig:
    keyword: str = DEFAULT_KEYWORD

    def merge(self, options: CipherOptions, *, strict: bool = False) -> "VigenereConfig":
        if "keyword" not in options:
            return self
        value = options["keyword"]
        if not isinstance(value, str):
            return replace(self, keyword=_reject("keyword", value, "expected a string", strict, self.keyword))
        keyword = letters_only(value)
        if not keyword:
            return replace(self, keyword=_reject("keyword", value, "no letters", strict, DEFAULT_KEYWORD))
        return replace(self, keyword=keyword)

    def to_options(self) -> dict:
        return {"keyword": self.keyword}


@dataclass(frozen=True, slots=True)
class EnigmaConfig:
    rotor_ids: Tuple[str, str, str] = DEFAULT_ROTORS  # right, middle, left
    positions: Tuple[int, int, int] = DEFAULT_POSITIONS

    def merge(self, options: CipherOptions, *, strict: bool = False) -> "EnigmaConfig":
        config = self
        if "rotors" in options:
            config = replace(config, rotor_ids=self._parse_rotors(options["rotors"], strict))
        if "positions" in options:
            config = replace(config, positions=self._parse_positions(options["positions"], strict))
        return config

    def _parse_rotors(self, value: Any, strict: bool) -> Tuple[str, str, str]:
        if isinstance(value, str) or not isinstance(value, (list, tuple)) or len(value) != 3:
            return _reject("rotors", value, "expected three rotor ids", strict, self.rotor_ids)
        rotor_ids = tuple(str(rotor_id).upper() for rotor_id in value)
        unknown = [rotor_id for rotor_id in rotor_ids if rotor_id not in ROTOR_IDS]
        if unknown:
            return _reject("rotors", value, f"unknown rotor(s) {', '.join(unknown)}", strict, self.rotor_ids)
        return rotor_ids

    def _parse_positions(self, value: Any, strict: bool) -> Tuple[int, int, int]:
        if isinstance(value, str) or not isinstance(value, (list, tuple)) or len(value) != 3:
            return _reject("positions", value, "expected three integers", strict, self.positions)
        positions = [_as_int(position) for position in value]
        if any(position is None for position in positions):
            return _reject("positions", value, "expected three integers", strict, self.positions)
        return tuple(position % 26 for position in positions)

    def to_options(self) -> dict:
        return {"rotors": list(self.rotor_ids), "positions": list(self.positions)}


type CipherConfig = Union[CaesarConfig, AtbashConfig, VigenereConfig, EnigmaConfig]
