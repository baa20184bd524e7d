from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from cipher_stepper.models.state import CipherEvent, CipherMode, CipherState


class PlaybackStatus(str, Enum):
    IDLE = "idle"  # no cipher selected
    READY = "ready"  # nothing processed yet
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"

    def __str__(self):
        return self.value


@dataclass(frozen=True, slots=True)
class PlaybackSnapshot:
    """Immutable view of the playback controller, handed to renderers."""

    version: int
    status: PlaybackStatus
    cipher_id: Optional[str]
    cipher_name: Optional[str]
    state: Optional[CipherState]
    cursor: int
    history_length: int
    input_text: str
    mode: CipherMode
    is_playing: bool = False
    events: Tuple[CipherEvent, ...] = field(default_factory=tuple)

    @property
    def processed(self) -> int:
        return len(self.state.plaintext) if self.state is not None else 0

    @property
    def complete(self) -> bool:
        return self.status == PlaybackStatus.COMPLETE
