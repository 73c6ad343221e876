#!/usr/bin/env python3
"""
tokenflow File Transports

File-based slot store and text sink using blocking I/O.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

_UNSAFE = re.compile(r'[^A-Za-z0-9._-]')


def _replace(path: Path, text: str) -> None:
    # Write beside the target then swap, so readers never see half a document
    tmp = path.with_name(path.name + '.tmp')
    with open(tmp, 'w', encoding='utf-8') as f:
        f.write(text)
        f.flush()
    os.replace(tmp, path)


class FileStore:
    """
    Slot store keeping one JSON file per key in a directory.

    Keys are mapped to file names by replacing every character outside
    [A-Za-z0-9._-] with an underscore.
    """

    def __init__(self, directory: str | Path):
        """
        Initialize the file store.

        Args:
            directory: Directory holding the slot files. Created if missing.
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE.sub('_', key)}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def write(self, key: str, text: str) -> None:
        _replace(self.path_for(key), text)

    def close(self) -> None:
        pass


class FileTextSink:
    """Authoritative text kept in a single file."""

    def __init__(self, filepath: str | Path):
        """
        Initialize the file sink.

        Args:
            filepath: Path to the model file. Parent directories are created;
                the file itself is only created on the first write.
        """
        self.filepath = Path(filepath)
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def read(self) -> Optional[str]:
        if not self.filepath.exists():
            return None
        return self.filepath.read_text(encoding='utf-8')

    def write(self, text: str) -> None:
        _replace(self.filepath, text)

    def close(self) -> None:
        pass

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager support."""
        self.close()
