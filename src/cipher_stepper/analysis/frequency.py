"""Letter frequency statistics: counts, index of coincidence, chi-squared and Caesar shift ranking.

Letters are counted after uppercasing; everything else is ignored.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

from cipher_stepper.alphabet import ALPHABET, letter_at, letters_only, shift_letter

# Expected letter frequencies in English text (percentages).
ENGLISH_FREQUENCIES: Dict[str, float] = {
    "A": 8.2, "B": 1.5, "C": 2.8, "D": 4.3, "E": 12.7, "F": 2.2, "G": 2.0,
    "H": 6.1, "I": 7.0, "J": 0.15, "K": 0.77, "L": 4.0, "M": 2.4, "N": 6.7,
    "O": 7.5, "P": 1.9, "Q": 0.095, "R": 6.0, "S": 6.3, "T": 9.1, "U": 2.8,
    "V": 0.98, "W": 2.4, "X": 0.15, "Y": 2.0, "Z": 0.074,
}

ENGLISH_IC = 0.067
RANDOM_IC = 1 / 26


@dataclass(frozen=True, slots=True)
class LetterFrequency:
    letter: str
    count: int
    percentage: float
    expected_percentage: float

    @property
    def deviation(self) -> float:
        return self.percentage - self.expected_percentage


@dataclass(frozen=True, slots=True)
class FrequencyAnalysis:
    frequencies: Tuple[LetterFrequency, ...]
    total_letters: int
    index_of_coincidence: float
    chi_squared: float
    most_frequent: Tuple[str, ...]
    least_frequent: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ShiftSuggestion:
    shift: int
    confidence: float
    chi_squared: float


def count_frequencies(text: str) -> Dict[str, int]:
    """Count each of the 26 letters. Every letter is present in the result, zero or not."""
    counts = Counter(letters_only(text))
    return {letter: counts.get(letter, 0) for letter in ALPHABET}


def calculate_ic(text: str) -> float:
    """Index of coincidence. ~0.067 for English or monoalphabetic ciphertext, ~0.038 for random text."""
    counts = count_frequencies(text)
    n = sum(counts.values())
    if n <= 1:
        return 0.0
    return sum(count * (count - 1) for count in counts.values()) / (n * (n - 1))


def calculate_chi_squared(text: str) -> float:
    """Chi-squared statistic against English letter frequencies. Lower means closer to English."""
    counts = count_frequencies(text)
    total = sum(counts.values())
    if total == 0:
        return 0.0

    chi_squared = 0.0
    for letter, count in counts.items():
        expected = ENGLISH_FREQUENCIES[letter] / 100 * total
        if expected > 0:
            chi_squared += (count - expected) ** 2 / expected
    return chi_squared


def analyze_frequency(text: str) -> FrequencyAnalysis:
    counts = count_frequencies(text)
    total = sum(counts.values())

    frequencies = tuple(
        LetterFrequency(
            letter=letter,
            count=count,
            percentage=count / total * 100 if total else 0.0,
            expected_percentage=ENGLISH_FREQUENCIES[letter],
        )
        for letter, count in counts.items()
    )

    by_count = sorted(frequencies, key=lambda f: f.count, reverse=True)
    most_frequent = tuple(f.letter for f in by_count[:5] if f.count > 0)
    least_frequent = tuple(f.letter for f in reversed(by_count[-5:]))

    return FrequencyAnalysis(
        frequencies=frequencies,
        total_letters=total,
        index_of_coincidence=calculate_ic(text),
        chi_squared=calculate_chi_squared(text),
        most_frequent=most_frequent,
        least_frequent=least_frequent,
    )


def estimate_cipher_type(ic: float) -> str:
    if ic >= 0.060:
        return "Monoalphabetic (or plaintext)"
    if ic >= 0.045:
        return "Polyalphabetic (short key)"
    if ic >= 0.038:
        return "Polyalphabetic (long key)"
    return "Random or very long key"


def _unshift(letters: str, shift: int) -> str:
    return "".join(letter_at(shift_letter(ALPHABET.index(ch), -shift)) for ch in letters)


def suggest_caesar_shift(ciphertext: str) -> List[ShiftSuggestion]:
    """Try all 26 shifts and rank them by how English the decryption looks."""
    letters = letters_only(ciphertext)
    suggestions = []
    for shift in range(26):
        chi_squared = calculate_chi_squared(_unshift(letters, shift))
        suggestions.append(ShiftSuggestion(
            shift=shift,
            confidence=max(0.0, 100 - chi_squared),
            chi_squared=chi_squared,
        ))

    # Chi-squared breaks ties between shifts that both bottom out at zero confidence.
    return sorted(suggestions, key=lambda s: (-s.confidence, s.chi_squared))
