from cipher_stepper.alphabet import index_of, letter_at, shift_letter
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.models.config import VigenereConfig
from cipher_stepper.models.state import (
    Annotation,
    CipherEvent,
    CipherFamily,
    CipherMode,
    CipherState,
    EncryptionResult,
    EventType,
    FocusTarget,
    StepResult,
    VigenereData,
    VisualHints,
)


class VigenereCipher(Cipher):
    id = "vigenere"
    name = "Vigenère Cipher"
    family = CipherFamily.POLYALPHABETIC
    description = "Shifts each letter by the matching letter of a repeating keyword."

    def __init__(self, config: VigenereConfig | None = None):
        super().__init__(config or VigenereConfig())

    def get_initial_state(self) -> CipherState:
        keyword = self.config.keyword
        return self._initial_state(VigenereData(keyword=keyword, key_index=0, current_shift=index_of(keyword[0])))

    def step(self, state: CipherState, input_char: str, mode: CipherMode = "encrypt") -> StepResult:
        data: VigenereData = state.data
        keyword = data.keyword
        index = index_of(input_char)
        events = [self._input_event(state, input_char)]

        output_char = input_char
        next_data = data
        # Only letters consume a key position.
        if index != -1:
            key_position = data.key_index % len(keyword)
            key_char = keyword[key_position]
            shift = index_of(key_char)
            output_char = letter_at(shift_letter(index, shift if mode == "encrypt" else -shift))

            events.append(CipherEvent(EventType.KEY_ADVANCED, {"key_char": key_char, "key_index": key_position, "shift": shift}))
            events.append(self._substitution_event(
                input_char.upper(), output_char, "vigenere", shift=shift, key_char=key_char,
            ))
            next_data = VigenereData(keyword=keyword, key_index=data.key_index + 1, current_shift=shift)

        focus = self._character_focus(state)
        focus.append(FocusTarget("character", f"keyword:{next_data.key_index % len(keyword)}", "highlight"))
        # The key letter at data.key_index: the one just used, or still pending after a non-letter.
        annotated_key = keyword[data.key_index % len(keyword)]
        annotation = Annotation(f"Key: {annotated_key} (+{index_of(annotated_key)})")

        return self._result(state, input_char, output_char, next_data, events, focus=focus, annotations=[annotation])

    def decrypt(self, ciphertext: str) -> EncryptionResult:
        return self.run(ciphertext, "decrypt")

    def get_visual_hints(self) -> VisualHints:
        return VisualHints(
            preferred_metaphors=("tabula-recta", "wheel", "cascade"),
            colors={"plaintext": "#ffffff", "ciphertext": "#9b59b6", "highlight": "#f1c40f"},
        )
