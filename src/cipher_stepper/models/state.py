import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Mapping, Tuple, Union

type CipherMode = Literal["encrypt", "decrypt"]

CIPHER_MODES: Tuple[str, ...] = ("encrypt", "decrypt")


class CipherFamily(str, Enum):
    """Used only to pick compatible renderers."""
    SUBSTITUTION = "substitution"
    POLYALPHABETIC = "polyalphabetic"
    MECHANICAL = "mechanical"
    TRANSPOSITION = "transposition"
    STREAM = "stream"

    def __str__(self):
        return self.value


class EventType(str, Enum):
    INPUT_RECEIVED = "cipher:input"
    SUBSTITUTION = "cipher:substitution"
    ROTOR_ADVANCED = "cipher:rotor_step"
    KEY_ADVANCED = "cipher:key_advance"
    OUTPUT_EMITTED = "cipher:output"
    RESET = "cipher:reset"

    def __str__(self):
        return self.value


def new_state_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class CipherEvent:
    type: EventType
    payload: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {"type": self.type.value, "payload": dict(self.payload), "timestamp": self.timestamp}


# ---- Visual hints for an external renderer ----
@dataclass(frozen=True, slots=True)
class FocusTarget:
    type: Literal["character", "component", "region"]
    id: str  # e.g. "plaintext:5" or "rotor:1"
    action: Literal["highlight", "rotate", "move"] | None = None


@dataclass(frozen=True, slots=True)
class Annotation:
    text: str
    x: float = 0
    y: float = 0


@dataclass(frozen=True, slots=True)
class Transform:
    source: FocusTarget
    target: FocusTarget
    duration_ms: int = 300


@dataclass(frozen=True, slots=True)
class VisualState:
    """Describes only the most recent transition, never cumulative history."""
    focus: Tuple[FocusTarget, ...] = field(default_factory=tuple)
    annotations: Tuple[Annotation, ...] = field(default_factory=tuple)
    transforms: Tuple[Transform, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class VisualHints:
    preferred_metaphors: Tuple[str, ...]
    colors: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"preferred_metaphors": list(self.preferred_metaphors), "colors": dict(self.colors)}


# ---- Per-cipher state data ----
@dataclass(frozen=True, slots=True)
class CaesarData:
    shift: int

    def to_dict(self) -> dict:
        return {"shift": self.shift}


@dataclass(frozen=True, slots=True)
class AtbashData:
    mapping: str = "atbash"

    def to_dict(self) -> dict:
        return {"mapping": self.mapping}


@dataclass(frozen=True, slots=True)
class VigenereData:
    keyword: str
    key_index: int
    current_shift: int

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "key_index": self.key_index, "current_shift": self.current_shift}


@dataclass(frozen=True, slots=True)
class RotorState:
    rotor_id: str
    wiring: str
    position: int
    notch: int

    def advanced(self) -> "RotorState":
        return RotorState(self.rotor_id, self.wiring, (self.position + 1) % 26, self.notch)

    @property
    def at_notch(self) -> bool:
        return self.position == self.notch

    def to_dict(self) -> dict:
        return {"rotor_id": self.rotor_id, "wiring": self.wiring, "position": self.position, "notch": self.notch}


@dataclass(frozen=True, slots=True)
class EnigmaData:
    rotors: Tuple[RotorState, RotorState, RotorState]  # right, middle, left
    reflector: str
    rotor_config: Tuple[str, str, str]

    @property
    def positions(self) -> Tuple[int, ...]:
        return tuple(rotor.position for rotor in self.rotors)

    def to_dict(self) -> dict:
        return {
            "rotors": [rotor.to_dict() for rotor in self.rotors],
            "reflector": self.reflector,
            "rotor_config": list(self.rotor_config),
        }


type CipherData = Union[CaesarData, AtbashData, VigenereData, EnigmaData]


# ---- Engine state ----
@dataclass(frozen=True, slots=True)
class CipherState:
    """Immutable snapshot of the engine after processing a prefix of the input."""

    step: int
    data: CipherData
    plaintext: str = ""
    ciphertext: str = ""
    visual: VisualState = field(default_factory=VisualState)
    id: str = field(default_factory=new_state_id)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if len(self.plaintext) != len(self.ciphertext):
            raise ValueError(
                f"plaintext length {len(self.plaintext)} != ciphertext length {len(self.ciphertext)}"
            )

    def same_content(self, other: "CipherState") -> bool:
        """Compare everything except the identity fields (id, timestamp)."""
        return (
            self.step == other.step
            and self.data == other.data
            and self.plaintext == other.plaintext
            and self.ciphertext == other.ciphertext
        )


@dataclass(frozen=True, slots=True)
class StepResult:
    next_state: CipherState
    events: Tuple[CipherEvent, ...]
    output_char: str


@dataclass(frozen=True, slots=True)
class EncryptionResult:
    final_state: CipherState
    ciphertext: str
    history: Tuple[CipherState, ...]  # history[0] is the initial state
