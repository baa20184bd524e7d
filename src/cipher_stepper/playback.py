"""Playback controller: drives a cipher one character at a time and keeps a linear history.

History behaves like an undo/redo stack. Stepping back only moves the cursor;
the next forward step truncates everything after the cursor before appending.
Configuration changes, cipher changes and mode changes always reset.
"""
import threading
from typing import Callable, List, Optional, Tuple

import structlog

from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.ciphers.registry import CipherRegistry
from cipher_stepper.models.config import CipherOptions
from cipher_stepper.models.state import CIPHER_MODES, CipherEvent, CipherMode, CipherState, EventType
from cipher_stepper.snapshot import PlaybackSnapshot, PlaybackStatus

log = structlog.get_logger(__name__)

DEFAULT_PLAY_SPEED_MS = 500
MIN_PLAY_SPEED_MS = 10

type PublishFn = Callable[[PlaybackSnapshot], object]


class PlaybackController:

    def __init__(
        self,
        registry: CipherRegistry,
        *,
        publish: Optional[PublishFn] = None,
        play_speed_ms: int = DEFAULT_PLAY_SPEED_MS,
    ) -> None:
        self._registry = registry
        self._publish = publish
        self._lock = threading.RLock()

        self._cipher: Optional[Cipher] = None
        self._history: List[CipherState] = []
        self._cursor = -1
        self._input = ""
        self._mode: CipherMode = "encrypt"
        self._events: List[CipherEvent] = []
        self._last_events: Tuple[CipherEvent, ...] = ()
        self._version = 0

        self._play_speed_ms = max(MIN_PLAY_SPEED_MS, play_speed_ms)
        self._player: Optional[threading.Thread] = None
        self._stop = threading.Event()

    # ---- Read-only views ----
    @property
    def cipher(self) -> Optional[Cipher]:
        return self._cipher

    @property
    def current_state(self) -> Optional[CipherState]:
        with self._lock:
            if self._cursor < 0:
                return None
            return self._history[self._cursor]

    @property
    def history(self) -> Tuple[CipherState, ...]:
        with self._lock:
            return tuple(self._history)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def input_text(self) -> str:
        return self._input

    @property
    def mode(self) -> CipherMode:
        return self._mode

    @property
    def events(self) -> Tuple[CipherEvent, ...]:
        """Every event since the last reset."""
        with self._lock:
            return tuple(self._events)

    @property
    def last_events(self) -> Tuple[CipherEvent, ...]:
        return self._last_events

    @property
    def play_speed_ms(self) -> int:
        return self._play_speed_ms

    @property
    def is_playing(self) -> bool:
        return self._player is not None

    @property
    def status(self) -> PlaybackStatus:
        with self._lock:
            state = self.current_state
            if self._cipher is None or state is None:
                return PlaybackStatus.IDLE
            processed = len(state.plaintext)
            if processed == 0:
                return PlaybackStatus.READY
            if processed >= len(self._input):
                return PlaybackStatus.COMPLETE
            return PlaybackStatus.IN_PROGRESS

    def snapshot(self) -> PlaybackSnapshot:
        with self._lock:
            return PlaybackSnapshot(
                version=self._version,
                status=self.status,
                cipher_id=self._cipher.id if self._cipher else None,
                cipher_name=self._cipher.name if self._cipher else None,
                state=self.current_state,
                cursor=self._cursor,
                history_length=len(self._history),
                input_text=self._input,
                mode=self._mode,
                is_playing=self.is_playing,
                events=self._last_events,
            )

    # ---- Cipher selection and configuration ----
    def select_cipher(self, cipher_id: str) -> bool:
        cipher = self._registry.get(cipher_id)
        if cipher is None:
            log.warning("unknown cipher, selection ignored", cipher=cipher_id)
            return False
        with self._lock:
            self._cipher = cipher
            self._reset_locked()
        log.info("cipher selected", cipher=cipher_id)
        return True

    def configure(self, options: Optional[CipherOptions], *, strict: bool = False) -> bool:
        """Forward options to the active cipher and restart from its new initial state."""
        with self._lock:
            if self._cipher is None:
                return False
            self._cipher.configure(options, strict=strict)
            self._reset_locked()
        log.info("cipher reconfigured", cipher=self._cipher.id, config=self._cipher.config.to_options())
        return True

    def set_input(self, text: str) -> None:
        """Store the (uppercased) input. Progress is kept while it is still a prefix of the new text."""
        text = text.upper()
        with self._lock:
            self._input = text
            state = self.current_state
            if state is None:
                return
            if not text.startswith(state.plaintext):
                self._reset_locked()
                return
            # Drop redo entries that no longer match the input.
            while len(self._history) > self._cursor + 1 and not text.startswith(self._history[-1].plaintext):
                self._history.pop()

    def set_mode(self, mode: CipherMode) -> bool:
        if mode not in CIPHER_MODES:
            log.warning("unknown mode ignored", mode=mode)
            return False
        with self._lock:
            self._mode = mode
            if self._cipher is not None:
                self._reset_locked()
        return True

    def reset(self) -> bool:
        with self._lock:
            if self._cipher is None:
                return False
            self._reset_locked()
        log.info("playback reset", cipher=self._cipher.id)
        return True

    def _reset_locked(self) -> None:
        self._halt()
        initial = self._cipher.get_initial_state()
        self._history = [initial]
        self._cursor = 0
        reset_event = CipherEvent(EventType.RESET, {"cipher": self._cipher.id})
        self._events = [reset_event]
        self._last_events = (reset_event,)
        self._emit()

    # ---- Stepping ----
    def step_forward(self) -> bool:
        """Process the next input character. Returns False (no-op) at the end of input."""
        with self._lock:
            state = self.current_state
            if self._cipher is None or state is None:
                return False
            position = len(state.plaintext)
            if position >= len(self._input):
                return False

            result = self._cipher.step(state, self._input[position], self._mode)
            del self._history[self._cursor + 1:]
            self._history.append(result.next_state)
            self._cursor = len(self._history) - 1
            self._last_events = result.events
            self._events.extend(result.events)
            log.debug("stepped forward", step=result.next_state.step, output=result.output_char)
            self._emit()
            return True

    def step_back(self) -> bool:
        """Move the cursor back one state without discarding history."""
        with self._lock:
            if self._cursor <= 0:
                return False
            self._cursor -= 1
            self._last_events = ()
            self._emit()
            return True

    def go_to_step(self, index: int) -> bool:
        with self._lock:
            if isinstance(index, bool) or not isinstance(index, int):
                return False
            if index < 0 or index >= len(self._history):
                return False
            self._cursor = index
            self._last_events = ()
            self._emit()
            return True

    def encrypt_all(self) -> bool:
        """Replace the history with a complete trace of the whole input."""
        with self._lock:
            if self._cipher is None:
                return False
            self._halt()
            result = self._cipher.run(self._input, self._mode)
            self._history = list(result.history)
            self._cursor = len(self._history) - 1
            self._last_events = ()
            self._emit()
        log.info("ran full input", cipher=self._cipher.id, mode=self._mode, length=len(self._input))
        return True

    # ---- Auto-play ----
    def set_play_speed(self, speed_ms: int) -> None:
        if speed_ms <= 0:
            log.warning("ignoring non-positive play speed", speed_ms=speed_ms)
            return
        self._play_speed_ms = max(MIN_PLAY_SPEED_MS, int(speed_ms))

    def play(self, on_finish: Optional[Callable[[], object]] = None) -> bool:
        """Start stepping forward on a timer. ``on_finish`` runs once playback stops for any reason."""
        with self._lock:
            if self._cipher is None or self._player is not None:
                return False
            if self.status == PlaybackStatus.COMPLETE:
                return False
            self._stop = threading.Event()
            self._player = threading.Thread(
                target=self._play_loop,
                args=(self._stop, on_finish),
                name="cipher-stepper-autoplay",
                daemon=True,
            )
            self._player.start()
            self._emit()
        log.info("auto-play started", speed_ms=self._play_speed_ms)
        return True

    def pause(self) -> None:
        with self._lock:
            player = self._player
            self._halt()
            if player is not None:
                self._emit()
        if player is not None and player is not threading.current_thread():
            player.join()
            log.info("auto-play paused", cursor=self._cursor)

    def tick(self) -> bool:
        """Run a single auto-play step synchronously; stops auto-play at the end of input."""
        advanced = self.step_forward()
        if not advanced:
            with self._lock:
                self._halt()
        return advanced

    def _halt(self) -> None:
        # Caller holds the lock. The player thread sees the event and exits on its own.
        self._stop.set()
        self._player = None

    def _play_loop(self, stop: threading.Event, on_finish: Optional[Callable[[], object]]) -> None:
        try:
            while not stop.wait(self._play_speed_ms / 1000):
                with self._lock:
                    if stop.is_set() or not self.step_forward():
                        break
        finally:
            with self._lock:
                if not stop.is_set():
                    self._halt()
                    self._emit()
            log.debug("auto-play stopped", cursor=self._cursor)
            if on_finish is not None:
                on_finish()

    def _emit(self) -> None:
        self._version += 1
        if self._publish is not None:
            self._publish(self.snapshot())
