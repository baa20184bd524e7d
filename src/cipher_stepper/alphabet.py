ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ALPHABET_SIZE = len(ALPHABET)


def index_of(ch: str) -> int:
    """Return the 0-based alphabet index of a character, or -1 if it is not a letter."""
    upper = ch.upper()
    if len(upper) != 1:
        return -1
    return ALPHABET.find(upper)


def is_letter(ch: str) -> bool:
    return index_of(ch) != -1


def letter_at(index: int) -> str:
    return ALPHABET[index % ALPHABET_SIZE]


def shift_letter(index: int, shift: int) -> int:
    """Shift an alphabet index, wrapping around in both directions."""
    return (index + shift) % ALPHABET_SIZE


def letters_only(text: str) -> str:
    """Uppercase the text and drop everything that is not A-Z."""
    return "".join(ch for ch in text.upper() if ch in ALPHABET)
