from cipher_stepper.alphabet import index_of, letter_at, shift_letter
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.models.config import CaesarConfig
from cipher_stepper.models.state import (
    Annotation,
    CaesarData,
    CipherFamily,
    CipherMode,
    CipherState,
    EncryptionResult,
    StepResult,
    VisualHints,
)


class CaesarCipher(Cipher):
    id = "caesar"
    name = "Caesar Cipher"
    family = CipherFamily.SUBSTITUTION
    description = "Shifts every letter a fixed number of places down the alphabet."

    def __init__(self, config: CaesarConfig | None = None):
        super().__init__(config or CaesarConfig())

    def get_initial_state(self) -> CipherState:
        return self._initial_state(CaesarData(shift=self.config.shift))

    def step(self, state: CipherState, input_char: str, mode: CipherMode = "encrypt") -> StepResult:
        data: CaesarData = state.data
        index = index_of(input_char)
        events = [self._input_event(state, input_char)]
        annotations = []

        output_char = input_char
        if index != -1:
            shift = data.shift if mode == "encrypt" else -data.shift
            output_char = letter_at(shift_letter(index, shift))
            events.append(self._substitution_event(
                input_char.upper(), output_char, "shift" if mode == "encrypt" else "unshift", shift=shift,
            ))
            annotations.append(Annotation(f"{input_char.upper()} {shift:+d} → {output_char}"))

        return self._result(
            state, input_char, output_char, data, events,
            focus=self._character_focus(state),
            annotations=annotations,
        )

    def decrypt(self, ciphertext: str) -> EncryptionResult:
        return self.run(ciphertext, "decrypt")

    def get_visual_hints(self) -> VisualHints:
        return VisualHints(
            preferred_metaphors=("wheel", "grid", "cascade"),
            colors={"plaintext": "#ffffff", "ciphertext": "#00ff41", "highlight": "#ffff00"},
        )
