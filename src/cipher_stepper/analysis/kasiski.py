"""Key length estimation for periodic polyalphabetic ciphertext.

Two independent estimators:

- Kasiski examination: repeated substrings tend to sit a multiple of the key
  length apart, so the common factors of their distances suggest the period.
- Column IC: split the text into ``n`` interleaved columns; at the right ``n``
  each column is a plain Caesar shift and its IC rises towards English.

Once a period is chosen each column is broken like a Caesar cipher.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

from cipher_stepper.alphabet import ALPHABET, letter_at, letters_only, shift_letter
from cipher_stepper.analysis.frequency import calculate_chi_squared, calculate_ic, suggest_caesar_shift

MIN_KEY_LENGTH = 2
MAX_KEY_LENGTH = 20


@dataclass(frozen=True, slots=True)
class KasiskiResult:
    sequence: str
    positions: Tuple[int, ...]
    distances: Tuple[int, ...]  # from the first occurrence


@dataclass(frozen=True, slots=True)
class KeyLengthCandidate:
    length: int
    score: int
    factors: Tuple[int, ...]  # prime factorisation of length


@dataclass(frozen=True, slots=True)
class KeyLengthIC:
    length: int
    average_ic: float


@dataclass(frozen=True, slots=True)
class VigenereCandidate:
    keyword: str
    key_length: int
    average_ic: float
    chi_squared: float
    preview: str


def find_repeated_sequences(ciphertext: str, min_length: int = 3, max_length: int = 6) -> List[KasiskiResult]:
    text = letters_only(ciphertext)
    sequences: Dict[str, List[int]] = {}

    for length in range(min_length, max_length + 1):
        for i in range(len(text) - length + 1):
            sequences.setdefault(text[i:i + length], []).append(i)

    results = [
        KasiskiResult(
            sequence=sequence,
            positions=tuple(positions),
            distances=tuple(p - positions[0] for p in positions[1:]),
        )
        for sequence, positions in sequences.items()
        if len(positions) >= 2
    ]
    # Longer repeats are less likely to be coincidence.
    return sorted(results, key=lambda r: len(r.sequence), reverse=True)


def prime_factors(n: int) -> Tuple[int, ...]:
    factors = []
    d = 2
    while n > 1:
        while n % d == 0:
            factors.append(d)
            n //= d
        d += 1
    return tuple(factors)


def _factors_in_range(n: int) -> List[int]:
    return [f for f in range(MIN_KEY_LENGTH, min(n, MAX_KEY_LENGTH) + 1) if n % f == 0]


def estimate_key_length(ciphertext: str) -> List[KeyLengthCandidate]:
    """Rank plausible key lengths (2..20) by how many repeat distances they divide."""
    factor_counts: Counter = Counter()
    for result in find_repeated_sequences(ciphertext):
        for distance in result.distances:
            factor_counts.update(_factors_in_range(distance))

    candidates = [
        KeyLengthCandidate(length=length, score=count, factors=prime_factors(length))
        for length, count in factor_counts.items()
    ]
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def calculate_column_ics(ciphertext: str, key_length: int) -> List[float]:
    text = letters_only(ciphertext)
    return [calculate_ic(text[column::key_length]) for column in range(key_length)]


def find_key_length_by_ic(ciphertext: str, max_length: int = 15) -> List[KeyLengthIC]:
    results = []
    for length in range(1, max_length + 1):
        column_ics = calculate_column_ics(ciphertext, length)
        results.append(KeyLengthIC(length=length, average_ic=sum(column_ics) / len(column_ics)))
    return sorted(results, key=lambda r: r.average_ic, reverse=True)


def recover_vigenere_keyword(ciphertext: str, key_length: int) -> str:
    """Break each column as a Caesar cipher and read the best shifts as the keyword."""
    text = letters_only(ciphertext)
    if key_length < 1 or not text:
        return ""
    return "".join(
        letter_at(suggest_caesar_shift(text[column::key_length])[0].shift)
        for column in range(key_length)
    )


def _shortest_period(keyword: str) -> str:
    for length in range(1, len(keyword)):
        if len(keyword) % length == 0 and keyword[:length] * (len(keyword) // length) == keyword:
            return keyword[:length]
    return keyword


def _vigenere_decrypt(letters: str, keyword: str) -> str:
    shifts = [ALPHABET.index(k) for k in keyword]
    return "".join(
        letter_at(shift_letter(ALPHABET.index(ch), -shifts[i % len(shifts)]))
        for i, ch in enumerate(letters)
    )


def crack_vigenere(
    ciphertext: str,
    max_length: int = 15,
    candidates: int = 3,
    preview_length: int = 60,
) -> List[VigenereCandidate]:
    """Try the best IC key lengths and return keyword guesses, most English-looking first."""
    text = letters_only(ciphertext)
    if not text:
        return []

    seen: Dict[str, VigenereCandidate] = {}
    for ranked in find_key_length_by_ic(text, max_length)[:candidates]:
        keyword = _shortest_period(recover_vigenere_keyword(text, ranked.length))
        if keyword in seen:
            continue
        plaintext = _vigenere_decrypt(text, keyword)
        seen[keyword] = VigenereCandidate(
            keyword=keyword,
            key_length=len(keyword),
            average_ic=ranked.average_ic,
            chi_squared=calculate_chi_squared(plaintext),
            preview=plaintext[:preview_length],
        )

    return sorted(seen.values(), key=lambda c: (c.chi_squared, c.key_length))
