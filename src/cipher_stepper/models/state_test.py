import pytest

from cipher_stepper.models.state import CaesarData, CipherEvent, CipherState, EventType, RotorState


class TestCipherState:
    """Test suite for the immutable engine state"""

    def test_length_mismatch(self):
        """Test plaintext and ciphertext must have equal length"""
        with pytest.raises(ValueError, match="length"):
            CipherState(step=1, data=CaesarData(3), plaintext="A", ciphertext="")

    def test_frozen(self):
        """Test states cannot be mutated"""
        state = CipherState(step=0, data=CaesarData(3))
        with pytest.raises(AttributeError):
            state.step = 1

    def test_unique_ids(self):
        """Test every state gets its own id"""
        assert CipherState(step=0, data=CaesarData(3)).id != CipherState(step=0, data=CaesarData(3)).id

    def test_same_content(self):
        """Test content comparison ignores id and timestamp"""
        a = CipherState(step=1, data=CaesarData(3), plaintext="A", ciphertext="D")
        b = CipherState(step=1, data=CaesarData(3), plaintext="A", ciphertext="D")
        assert a != b
        assert a.same_content(b)
        assert not a.same_content(CipherState(step=1, data=CaesarData(4), plaintext="A", ciphertext="D"))


class TestRotorState:
    """Test suite for rotor helpers"""

    def test_advanced_wraps(self):
        """Test a rotor at Z advances to A"""
        rotor = RotorState("I", "EKMFLGDQVZNTOWYHXUSPAIBRCJ", 25, 16)
        assert rotor.advanced().position == 0
        assert rotor.position == 25

    def test_at_notch(self):
        """Test the notch check"""
        assert RotorState("I", "EKMFLGDQVZNTOWYHXUSPAIBRCJ", 16, 16).at_notch


class TestCipherEvent:
    """Test suite for event serialisation"""

    def test_to_dict(self):
        """Test the event type is serialised by value"""
        event = CipherEvent(EventType.OUTPUT_EMITTED, {"char": "D"}, timestamp=1.0)
        assert event.to_dict() == {"type": "cipher:output", "payload": {"char": "D"}, "timestamp": 1.0}
