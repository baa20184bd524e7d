from cipher_stepper.ciphers.base import supports_decrypt
from cipher_stepper.ciphers.enigma import (
    REFLECTOR_B,
    ROTOR_NOTCHES,
    ROTOR_WIRINGS,
    EnigmaCipher,
    step_rotors,
    substitute,
)
from cipher_stepper.models.config import EnigmaConfig
from cipher_stepper.models.state import EventType, RotorState


def rotors_at(*positions: int, rotor_ids=("I", "II", "III")):
    return tuple(
        RotorState(rotor_id, ROTOR_WIRINGS[rotor_id], position, ROTOR_NOTCHES[rotor_id])
        for rotor_id, position in zip(rotor_ids, positions)
    )


class TestStepRotors:
    """Test suite for the rotor stepping sequence"""

    def test_right_rotor_always_steps(self):
        """Test only the right rotor moves away from the notches"""
        assert [r.position for r in step_rotors(rotors_at(0, 0, 0))] == [1, 0, 0]

    def test_right_notch_carries(self):
        """Test the right rotor on its notch carries the middle rotor"""
        assert [r.position for r in step_rotors(rotors_at(16, 0, 0))] == [17, 1, 0]

    def test_middle_notch_steps_middle_and_left(self):
        """Test the middle rotor on its notch steps itself and the left rotor"""
        assert [r.position for r in step_rotors(rotors_at(0, 4, 0))] == [1, 5, 1]

    def test_both_notches(self):
        """Test both notch rules apply in the same keystroke"""
        assert [r.position for r in step_rotors(rotors_at(16, 4, 0))] == [17, 6, 1]

    def test_wraps(self):
        """Test a rotor at Z wraps to A"""
        assert step_rotors(rotors_at(25, 0, 0))[0].position == 0


class TestSubstitute:
    """Test suite for the rotor and reflector path"""

    def test_reciprocal(self):
        """Test the path is its own inverse for fixed positions"""
        rotors = rotors_at(3, 7, 11)
        for index in range(26):
            assert substitute(substitute(index, rotors, REFLECTOR_B), rotors, REFLECTOR_B) == index

    def test_no_letter_maps_to_itself(self):
        """Test the reflector prevents fixed points"""
        rotors = rotors_at(0, 0, 0)
        assert all(substitute(index, rotors, REFLECTOR_B) != index for index in range(26))


class TestEnigmaCipher:
    """Test suite for the simplified Enigma"""

    def test_known_output(self):
        """Test rotors III-II-I (right to left) at AAA turn AAAAA into BDZGO"""
        cipher = EnigmaCipher(EnigmaConfig(rotor_ids=("III", "II", "I")))
        assert cipher.encrypt("AAAAA").ciphertext == "BDZGO"

    def test_self_inverse(self):
        """Test running the ciphertext through the same settings restores the plaintext"""
        cipher = EnigmaCipher(EnigmaConfig(positions=(5, 12, 20)))
        ciphertext = cipher.encrypt("ATTACK AT DAWN").ciphertext
        assert cipher.encrypt(ciphertext).ciphertext == "ATTACK AT DAWN"
        assert cipher.self_inverse
        assert not supports_decrypt(cipher)

    def test_non_letters_do_not_step(self):
        """Test spaces pass through without moving the rotors"""
        cipher = EnigmaCipher()
        state = cipher.step(cipher.get_initial_state(), " ").next_state
        assert state.ciphertext == " "
        assert state.data.positions == (0, 0, 0)

    def test_initial_state(self):
        """Test the configured rotors and positions are loaded"""
        data = EnigmaCipher(EnigmaConfig(rotor_ids=("II", "III", "I"), positions=(1, 2, 3))).get_initial_state().data
        assert data.rotor_config == ("II", "III", "I")
        assert data.positions == (1, 2, 3)
        assert data.reflector == REFLECTOR_B

    def test_rotor_events(self):
        """Test one rotor event is emitted per rotor that moved"""
        cipher = EnigmaCipher(EnigmaConfig(positions=(16, 0, 0)))
        result = cipher.step(cipher.get_initial_state(), "A")
        rotor_events = [e for e in result.events if e.type == EventType.ROTOR_ADVANCED]
        assert [e.payload["rotor_index"] for e in rotor_events] == [0, 1]
        assert rotor_events[0].payload["positions"] == [17, 1, 0]

    def test_annotation(self):
        """Test the annotation shows the rotor windows after stepping"""
        cipher = EnigmaCipher()
        state = cipher.step(cipher.get_initial_state(), "A").next_state
        assert state.visual.annotations[0].text == "Rotors: B-A-A"
        assert state.visual.focus[0].id == "rotor:0"

    def test_history_length(self):
        """Test every character adds one state"""
        result = EnigmaCipher().encrypt("HELLO WORLD")
        assert len(result.history) == 12
        assert all(len(s.plaintext) == len(s.ciphertext) for s in result.history)
