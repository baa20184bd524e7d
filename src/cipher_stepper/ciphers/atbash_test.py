from cipher_stepper.alphabet import ALPHABET
from cipher_stepper.ciphers.atbash import AtbashCipher
from cipher_stepper.ciphers.base import supports_decrypt


class TestAtbashCipher:
    """Test suite for the Atbash cipher"""

    def test_encrypt(self):
        """Test the mirror substitution"""
        assert AtbashCipher().encrypt("HELLO").ciphertext == "SVOOL"

    def test_full_alphabet(self):
        """Test the alphabet maps onto its reverse"""
        assert AtbashCipher().encrypt(ALPHABET).ciphertext == ALPHABET[::-1]

    def test_self_inverse(self):
        """Test applying Atbash twice restores the text"""
        cipher = AtbashCipher()
        assert cipher.encrypt(cipher.encrypt("ATTACK AT DAWN").ciphertext).ciphertext == "ATTACK AT DAWN"

    def test_mode_ignored(self):
        """Test decrypt mode gives the same output"""
        assert AtbashCipher().run("HELLO", "decrypt").ciphertext == "SVOOL"

    def test_no_decrypt_method(self):
        """Test self-inverse ciphers do not expose decrypt"""
        assert AtbashCipher.self_inverse
        assert not supports_decrypt(AtbashCipher())

    def test_lowercase(self):
        """Test lowercase input is emitted uppercase"""
        assert AtbashCipher().encrypt("abc").ciphertext == "ZYX"

    def test_substitution_payload(self):
        """Test the substitution event carries the mirror indices"""
        cipher = AtbashCipher()
        result = cipher.step(cipher.get_initial_state(), "B")
        payload = result.events[1].payload
        assert payload["method"] == "mirror"
        assert (payload["from_index"], payload["to_index"]) == (1, 24)
