"""Main CLI application using Typer."""

import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from voxsigma import __version__
from voxsigma.client import VoxSigma
from voxsigma.config.loader import DEFAULT_CONFIG_PATH, config_from_env, load_config, save_config
from voxsigma.config.schema import CliConfig, RestConfig, VoxSigmaConfig
from voxsigma.driver.cli import CliDriver
from voxsigma.driver.response import Response
from voxsigma.methods import Method
from voxsigma.registry import MethodRegistry

app = typer.Typer(
    name="voxsigma",
    help="VoxSigma - Speech transcription, diarization and language identification",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file (default: environment variables)",
)
ShowCommandOption = typer.Option(
    False,
    "--show-command",
    help="Print the equivalent shell or curl command instead of running it",
)


def _client(config_path: str | None) -> VoxSigma:
    config = load_config(Path(config_path)) if config_path else config_from_env()
    return VoxSigma(config)


def _show_command(client: VoxSigma, method: Method) -> None:
    command = method.to_cli() if isinstance(client.driver, CliDriver) else method.to_curl()
    console.print(command, markup=False, highlight=False, soft_wrap=True)


def _run(client: VoxSigma, method: Method, show_command: bool) -> None:
    if show_command:
        _show_command(client, method)
        return
    _print_response(method.run())


def _print_response(response: Response) -> None:
    if response.xml:
        console.print(response.xml, markup=False, highlight=False, soft_wrap=True)
    if not response.success:
        code = f" (code {response.error_code})" if response.error_code is not None else ""
        err_console.print(f"[red]Error{code}: {response.error}[/red]")
        raise typer.Exit(1)


@app.command()
def version():
    """Show voxsigma version."""
    console.print(f"voxsigma version {__version__}")


@app.command()
def init(
    driver: str = typer.Option("cli", "--driver", "-d", help="Execution driver: cli or rest"),
    root: str = typer.Option(None, "--root", help="VoxSigma installation root (cli driver)"),
    url: str = typer.Option(None, "--url", help="REST service root URL (rest driver)"),
    api_key: str = typer.Option(None, "--api-key", help="REST API key"),
    config_path: str = typer.Option(
        None, "--config", "-c", help=f"Where to write the config (default: {DEFAULT_CONFIG_PATH})"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
):
    """Write a voxsigma.yaml configuration file."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if path.exists() and not force:
        err_console.print(f"[yellow]Config already exists at {path}[/yellow]")
        err_console.print("Use [bold]--force[/bold] to overwrite it.")
        raise typer.Exit(1)

    try:
        config = VoxSigmaConfig(
            driver=driver,
            cli=CliConfig(root=root) if root else CliConfig(),
            rest=RestConfig(base_url=url, api_key=api_key),
        )
    except ValidationError as e:
        err_console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1) from None

    save_config(config, path)
    console.print(f"[green]Configuration written to {path}[/green]")


@app.command()
def hello(
    config_path: str = ConfigOption,
    show_command: bool = ShowCommandOption,
):
    """Check connectivity and credentials of the REST service."""
    client = _client(config_path)
    _run(client, client.hello(), show_command)


@app.command()
def trans(
    audio_file: str = typer.Argument(..., help="Audio file to transcribe"),
    model: str = typer.Option(None, "--model", "-l", help="Language/model code, e.g. fre"),
    force_language: bool = typer.Option(
        False, "--force-language", help="Skip language identification"
    ),
    max_speakers: int = typer.Option(None, "--max-speakers", "-k", help="Maximum speakers"),
    quality: int = typer.Option(None, "--quality", "-q", help="Quality level (0, 1, 2)"),
    dual_channel: bool = typer.Option(False, "--dual-channel", help="One speaker per channel"),
    config_path: str = ConfigOption,
    show_command: bool = ShowCommandOption,
):
    """Transcribe an audio file."""
    client = _client(config_path)
    method = client.trans().file(audio_file)
    if model:
        method.model(model)
    if force_language:
        method.force_language()
    if max_speakers is not None:
        method.max_speakers(max_speakers)
    if quality is not None:
        method.quality(quality)
    if dual_channel:
        method.dual_channel()
    _run(client, method, show_command)


@app.command()
def part(
    audio_file: str = typer.Argument(..., help="Audio file to partition"),
    model: str = typer.Option(None, "--model", "-l", help="Language/model code"),
    max_speakers: int = typer.Option(None, "--max-speakers", "-k", help="Maximum speakers"),
    config_path: str = ConfigOption,
    show_command: bool = ShowCommandOption,
):
    """Split an audio file into speaker turns."""
    client = _client(config_path)
    method = client.part().file(audio_file)
    if model:
        method.model(model)
    if max_speakers is not None:
        method.max_speakers(max_speakers)
    _run(client, method, show_command)


@app.command()
def lid(
    audio_file: str = typer.Argument(..., help="Audio file to analyze"),
    languages: list[str] = typer.Option(
        None, "--language", "-m", help="Candidate language (repeatable)"
    ),
    duration: float = typer.Option(None, "--duration", help="Seconds of audio to use"),
    config_path: str = ConfigOption,
    show_command: bool = ShowCommandOption,
):
    """Identify the language of an audio file."""
    client = _client(config_path)
    method = client.lid().file(audio_file)
    if languages:
        method.language_list(languages)
    if duration is not None:
        method.duration(duration)
    _run(client, method, show_command)


@app.command()
def status(
    session: str = typer.Argument(..., help="Async session token"),
    config_path: str = ConfigOption,
    show_command: bool = ShowCommandOption,
):
    """Show the status of an async REST session."""
    client = _client(config_path)
    _run(client, client.status().session(session), show_command)


@app.command()
def command(
    method_name: str = typer.Argument(..., help="Method name, e.g. vrxs_trans"),
    audio_file: str = typer.Option(None, "--file", "-f", help="Audio file"),
    parameters: list[str] = typer.Option(
        None, "--set", "-s", help="Parameter as name=value (repeatable)"
    ),
    config_path: str = ConfigOption,
):
    """Print the shell or curl command for any method without running it."""
    try:
        method_cls = MethodRegistry.get(method_name)
    except KeyError:
        available = ", ".join(MethodRegistry.available())
        err_console.print(f"[red]Unknown method: {method_name}[/red] (available: {available})")
        raise typer.Exit(1) from None

    client = _client(config_path)
    method = method_cls(client.driver)
    if audio_file:
        method.file(audio_file)
    for item in parameters or []:
        name, sep, value = item.partition("=")
        if not sep:
            err_console.print(f"[red]Expected name=value, got: {item}[/red]")
            raise typer.Exit(1)
        method.set(name, value)
    _show_command(client, method)


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
