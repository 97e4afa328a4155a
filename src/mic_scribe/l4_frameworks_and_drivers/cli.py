"""CLI entry point for mic-scribe."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mic_scribe import __version__


@click.command()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True),
    help='Path to YAML config file.',
)
@click.option(
    '-f',
    '--audio-file',
    'audio_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Transcribe an existing audio file and print the text (no TUI).',
)
@click.option(
    '--timestamps',
    is_flag=True,
    default=False,
    help='With --audio-file: print [MM:SS - MM:SS] lines instead of plain text.',
)
@click.option(
    '--check',
    is_flag=True,
    default=False,
    help='Check the microphone and transcription API, then exit.',
)
@click.option('-v', '--verbose', is_flag=True, default=False, help='Log debug output to stderr.')
@click.version_option(version=__version__)
def cli(config_path, audio_file, timestamps, check, verbose):
    """mic-scribe -- record from the microphone and transcribe with a speech-to-text API."""
    from pydantic import ValidationError  # noqa: PLC0415 -- deferred: not needed for --help

    from mic_scribe.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from mic_scribe.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        InfraConfig,
        build_app_config,
    )

    if verbose or audio_file or check:
        from mic_scribe.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: headless paths only
            setup_stderr_logging,
        )

        setup_stderr_logging(verbose)

    try:
        raw = YamlConfigLoader().load_raw(config_path)
        config = build_app_config(raw)
        infra = InfraConfig.model_validate(raw)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    if check:
        mic_ok = _preflight_microphone(config.recording.device)
        api_ok = _check_connectivity(config, infra)
        sys.exit(0 if mic_ok and api_ok else 1)

    if audio_file:
        from mic_scribe.l4_frameworks_and_drivers.batch_runner import (  # noqa: PLC0415 -- deferred: batch mode only, not loaded for TUI path
            run_batch,
        )

        run_batch(audio_path=Path(audio_file), config=config, infra=infra, timestamps=timestamps)
        return

    _preflight_microphone(config.recording.device)

    from mic_scribe.l3_interface_adapters.gateways.paths import (  # noqa: PLC0415 -- deferred: TUI path only
        LOG_DIR,
    )
    from mic_scribe.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: Textual TUI not loaded for --help
        DependencyContainer,
    )
    from mic_scribe.l4_frameworks_and_drivers.app import (  # noqa: PLC0415 -- deferred: Textual TUI not loaded for --help
        RecorderApp,
    )

    try:
        container = DependencyContainer(config, infra=infra)
    except ValueError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    app = RecorderApp(config=config, controller=container.controller, log_dir=LOG_DIR)
    app.run()


def _preflight_microphone(device: int | str | None = None) -> bool:
    try:
        import sounddevice as sd  # noqa: PLC0415 -- deferred: not loaded on --help

        if device is not None:
            info = sd.query_devices(device, kind='input')
            click.echo(f"Microphone: {info['name']}", err=True)
            return True
        devices = sd.query_devices()
        input_devices = [d for d in devices if d['max_input_channels'] > 0]
        if not input_devices:
            click.echo('Warning: No input audio devices found.', err=True)
            return False
        click.echo(f'Microphone: {len(input_devices)} input device(s) found.', err=True)
        return True
    except Exception as e:
        click.echo(f'Warning: Cannot query audio devices ({e}).', err=True)
        return False


def _check_connectivity(config, infra) -> bool:
    from mic_scribe.l3_interface_adapters.gateways.openai_transcriber import (  # noqa: PLC0415 -- deferred: openai SDK loaded only for --check
        OpenAITranscriber,
    )

    transcriber = OpenAITranscriber(
        api_key=infra.openai.api_key,
        base_url=infra.openai.base_url,
        model=config.transcription.model,
    )
    ok, err = transcriber.check_connectivity()
    if ok:
        click.echo(f'Transcription API reachable ({infra.openai.base_url}).', err=True)
    else:
        click.echo(f'Warning: {err}', err=True)
    return ok
