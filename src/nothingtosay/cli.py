"""CLI entry point for nothingtosay."""

from __future__ import annotations

import logging
import os
import subprocess

import click

from nothingtosay.audio.base import MixerError
from nothingtosay.config import Config, SettingsError, ensure_config_file


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def _open_microphone(config: Config):
    """Connect once to the audio server, outside the tray loop."""
    from nothingtosay.audio.pulse import PulseMixerControl
    from nothingtosay.microphone import Microphone

    def call_soon(*_args) -> None:
        # one-shot commands don't process live events
        pass

    mixer = PulseMixerControl(call_soon, config.audio.client_name)
    microphone = Microphone(mixer)
    try:
        microphone.initialize()
    except MixerError as e:
        microphone.teardown()
        _fail(str(e))
    return microphone, mixer


@click.group(invoke_without_command=True)
@click.option("--keybinding", default=None, help='Toggle-mute hotkey, e.g. "<ctrl>+<alt>+m".')
@click.option("--no-osd", is_flag=True, help="Don't show popups.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, keybinding: str | None, no_osd: bool, verbose: bool) -> None:
    """Show whether anything records from the microphone and toggle mute.

    Run without a subcommand to start the tray indicator.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    try:
        config = Config.load()
        # Apply CLI overrides
        if keybinding is not None:
            config.keybinding.toggle_mute = keybinding
            config.validate()
    except SettingsError as e:
        _fail(str(e))
    if no_osd:
        config.osd.enabled = False

    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        from nothingtosay.extension import run_extension

        try:
            run_extension(config)
        except (SettingsError, MixerError) as e:
            _fail(str(e))


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Print whether the microphone is active and muted."""
    microphone, _ = _open_microphone(ctx.obj["config"])
    try:
        click.echo(f"active: {'yes' if microphone.active else 'no'}")
        click.echo(f"muted:  {'yes' if microphone.muted else 'no'}")
        click.echo(f"level:  {microphone.level:.0f}%")
    finally:
        microphone.teardown()


@cli.command()
@click.pass_context
def clients(ctx: click.Context) -> None:
    """List applications currently recording."""
    from nothingtosay.microphone import SELF_MONITORING_IDS, is_counted_client

    microphone, mixer = _open_microphone(ctx.obj["config"])
    try:
        outputs = mixer.get_source_outputs()
        if not outputs:
            click.echo("No application is recording.")
        for output in outputs:
            if is_counted_client(output.application_id):
                note = ""
            elif output.application_id in SELF_MONITORING_IDS:
                note = "  (ignored: volume control)"
            else:
                note = "  (ignored: no application id)"
            click.echo(f"  #{output.index} {output.application_id or '-'}{note}")
    finally:
        microphone.teardown()


@cli.command("config")
def config_cmd() -> None:
    """Open the configuration file in your editor."""
    path = ensure_config_file()
    editor = os.environ.get("EDITOR", "nano")
    click.echo(f"Opening {path} with {editor}...")
    subprocess.run([editor, str(path)])
