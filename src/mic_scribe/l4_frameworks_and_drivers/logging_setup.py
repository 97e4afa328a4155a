"""Logging setup — debug file for the TUI, stderr for headless runs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_file_logging(log_dir: Path) -> Path:
    """Configure file-based debug logging (the terminal belongs to Textual)."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / 'mic_scribe_debug.log'
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger('msc')
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    logging.getLogger('msc.app').info('Debug logging started → %s', log_path)
    return log_path


def setup_stderr_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
    root = logging.getLogger('msc')
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(handler)
