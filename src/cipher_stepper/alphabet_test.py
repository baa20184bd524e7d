from cipher_stepper.alphabet import ALPHABET_SIZE, index_of, is_letter, letter_at, letters_only, shift_letter


class TestIndexOf:
    """Test suite for alphabet index lookups"""

    def test_uppercase(self):
        """Test A and Z map to the ends of the alphabet"""
        assert index_of("A") == 0
        assert index_of("Z") == 25

    def test_lowercase(self):
        """Test lowercase letters are uppercased first"""
        assert index_of("m") == 12

    def test_non_letters(self):
        """Test digits, spaces and punctuation have no index"""
        for ch in ("1", " ", "!", "é", ""):
            assert index_of(ch) == -1

    def test_multiple_characters(self):
        """Test strings longer than one character are rejected"""
        assert index_of("AB") == -1

    def test_is_letter(self):
        """Test is_letter agrees with index_of"""
        assert is_letter("q")
        assert not is_letter("?")


class TestShifting:
    """Test suite for wrap-around arithmetic"""

    def test_letter_at_wraps(self):
        """Test letter_at reduces its index modulo 26"""
        assert letter_at(26) == "A"
        assert letter_at(-1) == "Z"

    def test_shift_forward_wraps(self):
        """Test shifting past Z wraps to A"""
        assert shift_letter(25, 1) == 0

    def test_shift_backward_wraps(self):
        """Test negative shifts wrap below A"""
        assert shift_letter(0, -3) == 23

    def test_large_shift(self):
        """Test shifts larger than the alphabet"""
        assert shift_letter(1, ALPHABET_SIZE * 4 + 2) == 3

    def test_letters_only(self):
        """Test non-letters are stripped and the rest uppercased"""
        assert letters_only("Hello, World! 42") == "HELLOWORLD"
