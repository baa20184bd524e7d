from cipher_stepper.alphabet import ALPHABET_SIZE, index_of, letter_at
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.models.config import AtbashConfig
from cipher_stepper.models.state import (
    Annotation,
    AtbashData,
    CipherFamily,
    CipherMode,
    CipherState,
    StepResult,
    VisualHints,
)


class AtbashCipher(Cipher):
    """Mirror substitution (A↔Z, B↔Y, ...). Encrypt and decrypt are the same operation."""

    id = "atbash"
    name = "Atbash Cipher"
    family = CipherFamily.SUBSTITUTION
    description = "Maps each letter to its mirror image in the alphabet."
    self_inverse = True

    def __init__(self, config: AtbashConfig | None = None):
        super().__init__(config or AtbashConfig())

    def get_initial_state(self) -> CipherState:
        return self._initial_state(AtbashData())

    def step(self, state: CipherState, input_char: str, mode: CipherMode = "encrypt") -> StepResult:
        index = index_of(input_char)
        events = [self._input_event(state, input_char)]
        annotations = []

        output_char = input_char
        if index != -1:
            mirrored = ALPHABET_SIZE - 1 - index
            output_char = letter_at(mirrored)
            events.append(self._substitution_event(
                input_char.upper(), output_char, "mirror", from_index=index, to_index=mirrored,
            ))
            annotations.append(Annotation(f"{input_char.upper()} ↔ {output_char}"))

        return self._result(
            state, input_char, output_char, state.data, events,
            focus=self._character_focus(state),
            annotations=annotations,
        )

    def get_visual_hints(self) -> VisualHints:
        return VisualHints(
            preferred_metaphors=("mirror", "wheel", "grid"),
            colors={"plaintext": "#ffffff", "ciphertext": "#ff6b6b", "highlight": "#ffff00"},
        )
