"""Line terminator width detection."""

from pathlib import Path

from .exceptions import SourceFileError

_LINE_END_BYTES = (b"\r", b"\n")
_PROBE_CHUNK_SIZE = 1 << 16


def line_terminator_width(path: Path) -> int:
    """Return the byte width of the line terminator used by ``path``.

    Scans for the first CR or LF byte and examines the byte after it. If that
    byte is also CR or LF the terminator is two bytes wide, otherwise one.
    Files without any CR/LF (including empty files) report one.

    Raises:
        SourceFileError: If the file cannot be opened.
    """
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise SourceFileError(
            f"Source file unreadable: {path}; {exc}", metadata={"path": str(path)}
        ) from exc

    with handle:
        while True:
            chunk = handle.read(_PROBE_CHUNK_SIZE)
            if not chunk:
                return 1
            positions = [chunk.find(marker) for marker in _LINE_END_BYTES]
            found = [pos for pos in positions if pos >= 0]
            if not found:
                continue
            offset = min(found)
            following = chunk[offset + 1 : offset + 2]
            if not following:
                following = handle.read(1)
            return 2 if following in _LINE_END_BYTES else 1
