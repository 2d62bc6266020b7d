"""Holds the raw bytes and path of the currently loaded SVG file."""

from __future__ import annotations

import os
from typing import Optional, Union

_MAX_FILE_SIZE = 0xFFFFFFFF


class DocumentError(Exception):
    """Raised when a document cannot be loaded."""


def _describe(exc: OSError) -> str:
    message = exc.strerror or "Unknown error."
    return message.rstrip("\r\n")


class SvgDocument:
    """An SVG file loaded into memory."""

    def __init__(self) -> None:
        self._data: Optional[bytes] = None
        self._path = ""

    @property
    def empty(self) -> bool:
        return self._data is None

    @property
    def svg_xml(self) -> bytes:
        return self._data if self._data is not None else b""

    @property
    def path(self) -> str:
        return self._path

    def load_from_file(self, path: Union[str, os.PathLike]) -> None:
        """Read the whole file; on failure the document is left empty."""
        self.clear()
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise DocumentError("Failed to open file:\n" + _describe(exc)) from exc

        with handle:
            try:
                size = os.fstat(handle.fileno()).st_size
            except OSError as exc:
                raise DocumentError(
                    "Failed to query file size:\n" + _describe(exc)
                ) from exc

            if size < 0 or size > _MAX_FILE_SIZE:
                raise DocumentError("File is too large to load into memory.")

            try:
                data = handle.read(size) if size else b""
            except OSError as exc:
                raise DocumentError("Failed to read file:\n" + _describe(exc)) from exc

        if len(data) != size:
            raise DocumentError("Failed to read the complete file.")

        self._data = data
        self._path = os.fspath(path)

    def clear(self) -> None:
        self._data = None
        self._path = ""