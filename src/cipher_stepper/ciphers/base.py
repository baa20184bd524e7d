from abc import ABC, abstractmethod
from typing import Iterable, Optional

import structlog

from cipher_stepper.models.config import CipherConfig, CipherOptions
from cipher_stepper.models.state import (
    Annotation,
    CipherData,
    CipherEvent,
    CipherFamily,
    CipherMode,
    CipherState,
    EncryptionResult,
    EventType,
    FocusTarget,
    StepResult,
    Transform,
    VisualHints,
    VisualState,
)

log = structlog.get_logger(__name__)


class Cipher(ABC):
    """Incremental step contract shared by every cipher.

    ``step`` is a pure function of ``(state, input_char, mode)`` plus the
    cipher's static configuration; it never mutates the state it is given.
    """

    id: str
    name: str
    family: CipherFamily
    description: str = ""
    self_inverse: bool = False

    def __init__(self, config: CipherConfig):
        self._config = config

    @property
    def config(self) -> CipherConfig:
        return self._config

    def configure(self, options: Optional[CipherOptions], *, strict: bool = False) -> None:
        """Merge recognized options into the configuration. Does not reset anything by itself."""
        self._config = self._config.merge(options or {}, strict=strict)
        log.debug("cipher configured", cipher=self.id, config=self._config.to_options())

    @abstractmethod
    def get_initial_state(self) -> CipherState:
        ...

    @abstractmethod
    def step(self, state: CipherState, input_char: str, mode: CipherMode = "encrypt") -> StepResult:
        ...

    @abstractmethod
    def get_visual_hints(self) -> VisualHints:
        ...

    def run(self, text: str, mode: CipherMode = "encrypt") -> EncryptionResult:
        """Fold ``step`` over every character starting from a fresh initial state."""
        state = self.get_initial_state()
        history = [state]
        for ch in text:
            state = self.step(state, ch, mode).next_state
            history.append(state)
        return EncryptionResult(final_state=state, ciphertext=state.ciphertext, history=tuple(history))

    def encrypt(self, plaintext: str) -> EncryptionResult:
        return self.run(plaintext, "encrypt")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, config={self._config!r})"

    # ---- Helpers for building step results ----
    def _initial_state(self, data: CipherData) -> CipherState:
        return CipherState(step=0, data=data)

    @staticmethod
    def _input_event(state: CipherState, input_char: str) -> CipherEvent:
        return CipherEvent(EventType.INPUT_RECEIVED, {"char": input_char, "index": len(state.plaintext)})

    @staticmethod
    def _output_event(state: CipherState, output_char: str) -> CipherEvent:
        return CipherEvent(EventType.OUTPUT_EMITTED, {"char": output_char, "index": len(state.ciphertext)})

    @staticmethod
    def _substitution_event(source: str, target: str, method: str, **extra) -> CipherEvent:
        return CipherEvent(EventType.SUBSTITUTION, {"from": source, "to": target, "method": method, **extra})

    @staticmethod
    def _character_focus(state: CipherState) -> list[FocusTarget]:
        return [
            FocusTarget("character", f"plaintext:{len(state.plaintext)}", "highlight"),
            FocusTarget("character", f"ciphertext:{len(state.ciphertext)}", "highlight"),
        ]

    def _result(
        self,
        state: CipherState,
        input_char: str,
        output_char: str,
        data: CipherData,
        events: list[CipherEvent],
        *,
        focus: Iterable[FocusTarget],
        annotations: Iterable[Annotation] = (),
    ) -> StepResult:
        index = len(state.plaintext)
        transform = Transform(
            FocusTarget("character", f"plaintext:{index}", "move"),
            FocusTarget("character", f"ciphertext:{index}", "move"),
        )
        events.append(self._output_event(state, output_char))
        next_state = CipherState(
            step=state.step + 1,
            data=data,
            plaintext=state.plaintext + input_char,
            ciphertext=state.ciphertext + output_char,
            visual=VisualState(tuple(focus), tuple(annotations), (transform,)),
        )
        return StepResult(next_state=next_state, events=tuple(events), output_char=output_char)


def supports_decrypt(cipher: Cipher) -> bool:
    """Self-inverse ciphers have no separate decrypt operation."""
    return callable(getattr(cipher, "decrypt", None))
