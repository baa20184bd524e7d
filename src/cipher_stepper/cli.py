from pathlib import Path
from typing import Optional

import click
import requests
from rich.console import Console
from rich.table import Table

from cipher_stepper.analysis.frequency import analyze_frequency, estimate_cipher_type, suggest_caesar_shift
from cipher_stepper.analysis.kasiski import crack_vigenere, estimate_key_length, find_key_length_by_ic
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.ciphers.registry import build_default_registry
from cipher_stepper.client import DEFAULT_BASE_URL, ClientError, PlaygroundClient
from cipher_stepper.errors import ConfigurationError, UnknownCipherError
from cipher_stepper.export import export_json
from cipher_stepper.logs import configure_logging
from cipher_stepper.models.state import CIPHER_MODES, EncryptionResult
from cipher_stepper.playback import DEFAULT_PLAY_SPEED_MS, PlaybackController
from cipher_stepper.snapshot import PlaybackSnapshot
from cipher_stepper.state_queue import SingleSlotQueue
from cipher_stepper.ui import render_frequency, ui_loop

ENV_PREFIX = "CIPHER_STEPPER"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

console = Console()


def _split_rotors(ctx, param, value: Optional[str]):
    if value is None:
        return None
    return [part.strip().upper() for part in value.split(",") if part.strip()]


def _split_positions(ctx, param, value: Optional[str]):
    if value is None:
        return None
    parts = [part.strip() for part in value.split(",") if part.strip()]
    # Accept rotor window letters ("AAZ") as well as numbers ("0,0,25").
    if len(parts) == 1 and parts[0].isalpha():
        return [ord(ch) - ord("A") for ch in parts[0].upper()]
    try:
        return [int(part) for part in parts]
    except ValueError:
        raise click.BadParameter(f"expected comma separated integers, got {value!r}")


def cipher_options(fn):
    """Options shared by every command that runs a cipher."""
    options = [
        click.option("--cipher", "-c", "cipher_id", default="caesar", show_default=True, help="Cipher id (see `list`)."),
        click.option("--shift", "-s", type=int, help="Caesar shift."),
        click.option("--keyword", "-k", help="Vigenère keyword."),
        click.option("--rotors", callback=_split_rotors, help="Enigma rotors, right to left, e.g. I,II,III."),
        click.option("--positions", callback=_split_positions, help="Enigma start positions, right to left, e.g. 0,0,0 or AAA."),
        click.option("--strict", is_flag=True, help="Reject invalid options instead of falling back to defaults."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def build_options(shift, keyword, rotors, positions) -> dict:
    options = {"shift": shift, "keyword": keyword, "rotors": rotors, "positions": positions}
    return {key: value for key, value in options.items() if value is not None}


def configured_cipher(ctx: click.Context, cipher_id: str, options: dict, strict: bool) -> Cipher:
    """Look up a cipher in the context's registry and apply the options to it."""
    registry = ctx.obj["registry"]
    try:
        cipher = registry.require(cipher_id)
        cipher.configure(options, strict=strict)
    except UnknownCipherError as e:
        raise click.BadParameter(f"{e}. Available: {', '.join(registry.ids())}", param_hint="--cipher")
    except ConfigurationError as e:
        raise click.BadParameter(str(e), param_hint=f"--{e.option}")
    return cipher


def read_text(text: Optional[str], input_path: Optional[str]) -> str:
    if input_path:
        return Path(input_path).read_text(encoding="utf-8").rstrip("\n")
    if text is None:
        return click.get_text_stream("stdin").read().rstrip("\n")
    return text


def render_trace(result: EncryptionResult) -> Table:
    table = Table(title="History")
    table.add_column("Step", justify="right")
    table.add_column("In", justify="center")
    table.add_column("Out", justify="center")
    table.add_column("Data")
    for state in result.history[1:]:
        table.add_row(str(state.step), state.plaintext[-1:], state.ciphertext[-1:], str(state.data.to_dict()))
    return table


@click.group()
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default="WARNING", show_default=True)
@click.option("--log-json", is_flag=True, help="Render logs as JSON.")
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_json: bool):
    """Step through classical ciphers and analyse their output."""
    configure_logging(log_level, json=log_json)
    ctx.ensure_object(dict)
    ctx.obj["registry"] = build_default_registry()
    ctx.obj["log_level"] = log_level
    ctx.obj["log_json"] = log_json


@cli.command("list")
@click.pass_context
def list_ciphers(ctx: click.Context):
    """List the registered ciphers."""
    table = Table()
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Family")
    table.add_column("Self-inverse", justify="center")
    table.add_column("Defaults")
    for cipher in ctx.obj["registry"].get_all():
        table.add_row(cipher.id, cipher.name, str(cipher.family), "yes" if cipher.self_inverse else "no", str(cipher.config.to_options()))
    console.print(table)


def _run(ctx, mode, text, input_path, cipher_id, shift, keyword, rotors, positions, strict, trace, export_path):
    cipher = configured_cipher(ctx, cipher_id, build_options(shift, keyword, rotors, positions), strict)
    result = cipher.run(read_text(text, input_path), mode)

    if trace:
        console.print(render_trace(result))
    if export_path:
        Path(export_path).write_text(export_json(cipher, result.final_state, mode), encoding="utf-8")
    click.echo(result.ciphertext)


def run_options(fn):
    fn = click.option("--export", "export_path", type=click.Path(dir_okay=False, writable=True), help="Write the final state as JSON.")(fn)
    fn = click.option("--trace", is_flag=True, help="Print every step of the history.")(fn)
    fn = click.option("--input-path", "-i", type=click.Path(exists=True, dir_okay=False), help="Read the input from a file.")(fn)
    fn = cipher_options(fn)
    return click.argument("text", required=False)(fn)


@cli.command()
@run_options
@click.pass_context
def encrypt(ctx: click.Context, **kwargs):
    """Encrypt TEXT (or stdin)."""
    _run(ctx, "encrypt", **kwargs)


@cli.command()
@run_options
@click.pass_context
def decrypt(ctx: click.Context, **kwargs):
    """Decrypt TEXT (or stdin). Self-inverse ciphers simply re-run encryption."""
    _run(ctx, "decrypt", **kwargs)


@cli.command()
@cipher_options
@click.option("--mode", "-m", type=click.Choice(CIPHER_MODES), default="encrypt", show_default=True)
@click.option("--speed", type=int, default=DEFAULT_PLAY_SPEED_MS, show_default=True, help="Milliseconds between steps.")
@click.option("--log-lines", type=int, default=5, show_default=True, help="Log lines shown below the display.")
@click.argument("text")
@click.pass_context
def play(ctx: click.Context, text, cipher_id, shift, keyword, rotors, positions, strict, mode, speed, log_lines):
    """Animate the cipher over TEXT one character at a time."""
    cipher = configured_cipher(ctx, cipher_id, build_options(shift, keyword, rotors, positions), strict)

    state_queue: SingleSlotQueue[PlaybackSnapshot] = SingleSlotQueue()
    controller = PlaybackController(ctx.obj["registry"], publish=state_queue.publish, play_speed_ms=speed)
    controller.select_cipher(cipher.id)
    controller.set_mode(mode)
    controller.set_input(text)

    configure_logging(ctx.obj["log_level"], capture=True)
    try:
        if not controller.play(on_finish=state_queue.close):
            state_queue.close()
        ui_loop(state_queue, log_lines)
    except KeyboardInterrupt:
        controller.pause()
        state_queue.close()
    finally:
        configure_logging(ctx.obj["log_level"], json=ctx.obj["log_json"])

    click.echo(controller.current_state.ciphertext)


@cli.command()
@click.option("--input-path", "-i", type=click.Path(exists=True, dir_okay=False), help="Read the text from a file.")
@click.option("--max-key-length", type=int, default=15, show_default=True)
@click.option("--top", type=int, default=5, show_default=True, help="Candidates shown per method.")
@click.argument("text", required=False)
def analyze(text, input_path, max_key_length, top):
    """Frequency, IC, Caesar and Vigenère analysis of TEXT (or stdin)."""
    text = read_text(text, input_path)
    analysis = analyze_frequency(text)
    console.print(render_frequency(analysis))
    console.print(f"Chi-squared vs. English: {analysis.chi_squared:.2f}")
    console.print(f"Likely cipher type: [bold]{estimate_cipher_type(analysis.index_of_coincidence)}[/bold]")

    shifts = ", ".join(f"{s.shift} ({s.confidence:.1f})" for s in suggest_caesar_shift(text)[:top])
    console.print(f"Caesar shifts: {shifts}")

    kasiski = estimate_key_length(text)[:top]
    if kasiski:
        console.print("Kasiski key lengths: " + ", ".join(f"{c.length} ({c.score})" for c in kasiski))
    else:
        console.print("Kasiski key lengths: no repeated sequences")
    by_ic = find_key_length_by_ic(text, max_key_length)[:top]
    console.print("IC key lengths: " + ", ".join(f"{c.length} ({c.average_ic:.4f})" for c in by_ic))

    candidates = crack_vigenere(text, max_key_length)
    if candidates:
        table = Table(title="Vigenère candidates")
        table.add_column("Keyword")
        table.add_column("Chi²", justify="right")
        table.add_column("Preview")
        for candidate in candidates:
            table.add_row(candidate.keyword, f"{candidate.chi_squared:.1f}", candidate.preview)
        console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind the server to")
@click.option("--port", default=8000, help="Port to bind the server to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str, port: int, reload: bool):
    """Start the playground HTTP API."""
    try:
        import uvicorn
        from playground_api.api import app
    except ImportError as e:
        click.echo(f"Error: API dependencies not available: {e}")
        click.echo("Install with: pip install cipher-stepper")
        raise click.Abort()

    click.echo(f"Starting playground API on http://{host}:{port}")
    click.echo("Available endpoints:")
    click.echo("  - GET  /api/ciphers  - Registered ciphers")
    click.echo("  - POST /api/encrypt  - Encrypt text")
    click.echo("  - POST /api/decrypt  - Decrypt text")
    click.echo("  - POST /api/analyze  - Frequency and key length analysis")
    click.echo("  - POST /api/export   - Encrypt and export the final state")
    click.echo("\nPress Ctrl+C to stop the server")

    if reload:
        uvicorn.run("playground_api.api:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port, reload=False)


@cli.command()
@cipher_options
@click.option("--url", default=DEFAULT_BASE_URL, show_default=True, help="Base URL of a running API.")
@click.option("--mode", "-m", type=click.Choice(CIPHER_MODES), default="encrypt", show_default=True)
@click.argument("text")
def remote(text, cipher_id, shift, keyword, rotors, positions, strict, url, mode):
    """Run TEXT through a cipher on a running playground API."""
    client = PlaygroundClient(url)
    options = build_options(shift, keyword, rotors, positions)
    try:
        response = client.run(cipher_id, text, options, mode=mode, strict=strict)
    except ClientError as e:
        raise click.ClickException(str(e))
    except requests.ConnectionError:
        raise click.ClickException(f"Could not connect to {url}")
    click.echo(response["output"])


def main():
    cli(auto_envvar_prefix=ENV_PREFIX)


if __name__ == "__main__":
    main()
