from typing import Literal, Optional

from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cipher_stepper.alphabet import letter_at
from cipher_stepper.analysis.frequency import FrequencyAnalysis
from cipher_stepper.logs import LOG_BUFFER
from cipher_stepper.models.state import CaesarData, EnigmaData, VigenereData
from cipher_stepper.snapshot import PlaybackSnapshot
from cipher_stepper.state_queue import SingleSlotQueue


COLORS = {
    "current_char": "bold yellow on black",
    "plaintext": {
        "pending": "dim",
        "done": "green",
    },
    "ciphertext": {
        "pending": "dim",
        "done": "bright_red",
    },
    "keyword": {
        "pending": "cyan",
        "done": "turquoise2",
    },
}

LEVEL_STYLE = {
    "debug": "dim",
    "info": "",
    "warning": "yellow",
    "error": "red",
    "critical": "bold red",
}

type TrackType = Literal["plaintext", "ciphertext", "keyword"]


def track_to_text(text: str, track_type: TrackType, processed: int, focus_index: int = -1) -> Text:
    """Color a text track: processed characters, the focused character, and what is still pending."""
    track = Text()
    for i, ch in enumerate(text):
        if i == focus_index:
            style = COLORS["current_char"]
        elif i < processed:
            style = COLORS[track_type]["done"]
        else:
            style = COLORS[track_type]["pending"]
        track.append(ch, style=style)
    return track


def _focus_index(snapshot: PlaybackSnapshot, track: str) -> int:
    for target in snapshot.state.visual.focus:
        name, _, index = target.id.partition(":")
        if name == track and index.isdigit():
            return int(index)
    return -1


def render_cipher_data(snapshot: PlaybackSnapshot) -> Table:
    """Render the cipher specific part of the state."""
    data = snapshot.state.data
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()

    if isinstance(data, CaesarData):
        table.add_row("Shift", f"{data.shift:+d}")
    elif isinstance(data, VigenereData):
        key_position = data.key_index % len(data.keyword)
        table.add_row("Keyword", track_to_text(data.keyword, "keyword", 0, key_position))
        table.add_row("Shift", f"+{data.current_shift}")
    elif isinstance(data, EnigmaData):
        windows = "  ".join(
            f"[bold]{letter_at(rotor.position)}[/bold] ({rotor.rotor_id})" for rotor in reversed(data.rotors)
        )
        table.add_row("Rotors (L→R)", windows)
        table.add_row("Reflector", "B")
    else:
        table.add_row("Mapping", "A↔Z  B↔Y  C↔X …")
    return table


def render_log_panel(title: str, max_lines: int) -> Panel:
    """Render exactly max_lines log entries (cropped to width, no wrap)."""
    items = list(LOG_BUFFER)[-max_lines:]
    if len(items) < max_lines:
        items = [("", "")] * (max_lines - len(items)) + items

    grid = Table.grid(padding=(0, 0))
    grid.add_column(no_wrap=True, overflow="crop")
    for level, message in items:
        style = LEVEL_STYLE.get(level, "")
        grid.add_row(Text(message, style=style))
    return Panel(grid, title=title, padding=(0, 1))


def render(snapshot: Optional[PlaybackSnapshot], log_lines: int = 0):
    """Render a playback snapshot."""
    if snapshot is None or snapshot.state is None:
        return Panel("Waiting for first update…", title="Cipher Stepper", border_style="dim")

    state = snapshot.state
    processed = snapshot.processed

    ui_table = Table(
        title=f"{snapshot.cipher_name}  |  {snapshot.mode}  |  Step {snapshot.cursor} / {len(snapshot.input_text)}  |  {snapshot.status}",
        expand=True,
    )
    ui_table.add_column("Track", justify="right")
    ui_table.add_column("Text")
    ui_table.add_row("Input", track_to_text(snapshot.input_text, "plaintext", processed, _focus_index(snapshot, "plaintext")))
    ui_table.add_row("Output", track_to_text(state.ciphertext, "ciphertext", processed, _focus_index(snapshot, "ciphertext")))

    parts = [ui_table, render_cipher_data(snapshot)]

    if state.visual.annotations:
        parts.append(Text("  ".join(a.text for a in state.visual.annotations), style="italic"))

    if snapshot.events:
        events = Table("Event", "Payload", show_edge=False, padding=(0, 1))
        for event in snapshot.events:
            events.add_row(event.type.value, Text(", ".join(f"{k}={v}" for k, v in event.payload.items())))
        parts.append(events)

    if log_lines:
        parts.append(render_log_panel("Log", log_lines))

    return Panel(Group(*parts), title="Cipher Stepper", border_style="green" if snapshot.complete else "blue")


def render_frequency(analysis: FrequencyAnalysis) -> Table:
    """Render a frequency table with observed vs. expected English percentages."""
    table = Table(title=f"Letter frequencies  |  {analysis.total_letters} letters  |  IC {analysis.index_of_coincidence:.4f}")
    table.add_column("Letter", justify="center")
    table.add_column("Count", justify="right")
    table.add_column("Observed %", justify="right")
    table.add_column("English %", justify="right")
    table.add_column("Deviation", justify="right")
    table.add_column("")

    for frequency in analysis.frequencies:
        deviation_style = "green" if frequency.deviation >= 0 else "red"
        table.add_row(
            frequency.letter,
            str(frequency.count),
            f"{frequency.percentage:.2f}",
            f"{frequency.expected_percentage:.2f}",
            f"[{deviation_style}]{frequency.deviation:+.2f}[/{deviation_style}]",
            "█" * round(frequency.percentage),
        )
    return table


def ui_loop(state_queue: SingleSlotQueue[PlaybackSnapshot], log_lines: int = 0) -> Optional[PlaybackSnapshot]:
    """Redraw the live display for every snapshot until the queue closes. Returns the last snapshot."""
    last = None
    with Live(render(None), refresh_per_second=30, screen=False) as live:
        while True:
            snapshot = state_queue.get()
            if snapshot is None:
                break
            last = snapshot
            live.update(render(snapshot, log_lines))
    return last
