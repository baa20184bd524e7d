from datetime import datetime, timezone
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field

from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.models.state import CipherFamily, CipherMode, CipherState


class ExportDocument(BaseModel):
    """JSON blob describing the outcome of a run, suitable for download."""

    cipher_id: str
    cipher_name: str
    family: CipherFamily
    mode: Literal["encrypt", "decrypt"]
    step: int
    plaintext: str
    ciphertext: str
    config: Dict[str, Any]
    data: Dict[str, Any]
    exported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def export_state(cipher: Cipher, state: CipherState, mode: CipherMode = "encrypt") -> ExportDocument:
    return ExportDocument(
        cipher_id=cipher.id,
        cipher_name=cipher.name,
        family=cipher.family,
        mode=mode,
        step=state.step,
        plaintext=state.plaintext,
        ciphertext=state.ciphertext,
        config=cipher.config.to_options(),
        data=state.data.to_dict(),
    )


def export_json(cipher: Cipher, state: CipherState, mode: CipherMode = "encrypt", indent: int | None = 2) -> str:
    return export_state(cipher, state, mode).model_dump_json(indent=indent)
