"""Simplified three-rotor Enigma with reflector B.

Rotor tuples are ordered right (fast) to left. The stepping rule is a
simplification of the real machine's double step:

1. if the middle rotor sits on its notch, the middle and left rotors advance;
2. if the right rotor sits on its notch, the middle rotor advances;
3. the right rotor always advances.

Both notch checks look at positions from before this keystroke. Real Enigma
mechanics differ in edge cases; this stepping sequence is kept as is.
"""
from typing import Dict, Tuple

from cipher_stepper.alphabet import ALPHABET, index_of, letter_at
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.models.config import EnigmaConfig
from cipher_stepper.models.state import (
    Annotation,
    CipherEvent,
    CipherFamily,
    CipherMode,
    CipherState,
    EnigmaData,
    EventType,
    FocusTarget,
    RotorState,
    StepResult,
    VisualHints,
)

ROTOR_WIRINGS: Dict[str, str] = {
    "I": "EKMFLGDQVZNTOWYHXUSPAIBRCJ",
    "II": "AJDKSIRUXBLHWTMCQGZNPYFVOE",
    "III": "BDFHJLCPRTXVZNYEIWGAKMUSQO",
}

ROTOR_NOTCHES: Dict[str, int] = {
    "I": 16,  # Q
    "II": 4,  # E
    "III": 21,  # V
}

REFLECTOR_B = "YRUHQSLDPXNGOKMIEBFZCWVJAT"

type Rotors = Tuple[RotorState, RotorState, RotorState]


def step_rotors(rotors: Rotors) -> Rotors:
    right, middle, left = rotors
    next_right, next_middle, next_left = right, middle, left

    if middle.at_notch:
        next_middle = next_middle.advanced()
        next_left = next_left.advanced()

    if right.at_notch:
        next_middle = next_middle.advanced()

    next_right = next_right.advanced()
    return next_right, next_middle, next_left


def substitute(index: int, rotors: Rotors, reflector: str) -> int:
    """Pass an alphabet index through the rotors, the reflector, and back."""
    for rotor in rotors:
        index = (index + rotor.position) % 26
        index = ALPHABET.index(rotor.wiring[index])
        index = (index - rotor.position) % 26

    index = ALPHABET.index(reflector[index])

    for rotor in reversed(rotors):
        index = (index + rotor.position) % 26
        index = rotor.wiring.index(ALPHABET[index])
        index = (index - rotor.position) % 26

    return index


class EnigmaCipher(Cipher):
    id = "enigma"
    name = "Enigma (Simplified)"
    family = CipherFamily.MECHANICAL
    description = "Three stepping rotors and a reflector; the same settings encrypt and decrypt."
    self_inverse = True

    def __init__(self, config: EnigmaConfig | None = None):
        super().__init__(config or EnigmaConfig())

    def _create_rotors(self) -> Rotors:
        return tuple(
            RotorState(
                rotor_id=rotor_id,
                wiring=ROTOR_WIRINGS[rotor_id],
                position=position,
                notch=ROTOR_NOTCHES[rotor_id],
            )
            for rotor_id, position in zip(self.config.rotor_ids, self.config.positions)
        )

    def get_initial_state(self) -> CipherState:
        return self._initial_state(EnigmaData(
            rotors=self._create_rotors(),
            reflector=REFLECTOR_B,
            rotor_config=self.config.rotor_ids,
        ))

    def step(self, state: CipherState, input_char: str, mode: CipherMode = "encrypt") -> StepResult:
        data: EnigmaData = state.data
        index = index_of(input_char)
        events = [self._input_event(state, input_char)]

        output_char = input_char
        next_data = data
        # Rotors step before the substitution, and only for letters.
        if index != -1:
            rotors = step_rotors(data.rotors)
            next_data = EnigmaData(rotors=rotors, reflector=data.reflector, rotor_config=data.rotor_config)
            positions = [rotor.position for rotor in rotors]

            for rotor_index, (before, after) in enumerate(zip(data.rotors, rotors)):
                if before.position != after.position:
                    events.append(CipherEvent(EventType.ROTOR_ADVANCED, {
                        "rotor_index": rotor_index,
                        "position": after.position,
                        "positions": positions,
                        "letters": [letter_at(p) for p in positions],
                    }))

            output_char = letter_at(substitute(index, rotors, data.reflector))
            events.append(self._substitution_event(
                input_char.upper(), output_char, "enigma", rotor_positions=positions,
            ))

        window = "-".join(letter_at(rotor.position) for rotor in next_data.rotors)
        focus = [FocusTarget("component", f"rotor:{i}", "rotate") for i in range(len(next_data.rotors))]
        focus.extend(self._character_focus(state))

        return self._result(
            state, input_char, output_char, next_data, events,
            focus=focus,
            annotations=[Annotation(f"Rotors: {window}")],
        )

    def get_visual_hints(self) -> VisualHints:
        return VisualHints(
            preferred_metaphors=("rotor", "wheel", "cascade"),
            colors={"plaintext": "#ffffff", "ciphertext": "#e74c3c", "highlight": "#f39c12"},
        )
