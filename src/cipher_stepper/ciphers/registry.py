from typing import Dict, Iterator, List, Optional

from cipher_stepper.ciphers.atbash import AtbashCipher
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.ciphers.caesar import CaesarCipher
from cipher_stepper.ciphers.enigma import EnigmaCipher
from cipher_stepper.ciphers.vigenere import VigenereCipher
from cipher_stepper.errors import UnknownCipherError


class CipherRegistry:
    """Cipher id to instance lookup. Registration order is kept; there is no removal."""

    def __init__(self) -> None:
        self._ciphers: Dict[str, Cipher] = {}

    def register(self, cipher: Cipher) -> None:
        """Register a cipher. A later registration for the same id replaces the earlier one."""
        self._ciphers[cipher.id] = cipher

    def get(self, cipher_id: str) -> Optional[Cipher]:
        return self._ciphers.get(cipher_id)

    def require(self, cipher_id: str) -> Cipher:
        cipher = self.get(cipher_id)
        if cipher is None:
            raise UnknownCipherError(cipher_id)
        return cipher

    def get_all(self) -> List[Cipher]:
        return list(self._ciphers.values())

    def ids(self) -> List[str]:
        return list(self._ciphers)

    def __contains__(self, cipher_id: object) -> bool:
        return cipher_id in self._ciphers

    def __iter__(self) -> Iterator[Cipher]:
        return iter(self.get_all())

    def __len__(self) -> int:
        return len(self._ciphers)


def build_default_registry() -> CipherRegistry:
    """Create a registry holding fresh instances of the built-in ciphers."""
    registry = CipherRegistry()
    registry.register(CaesarCipher())
    registry.register(AtbashCipher())
    registry.register(VigenereCipher())
    registry.register(EnigmaCipher())
    return registry
