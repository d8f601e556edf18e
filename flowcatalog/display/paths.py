"""Width-aware path shortening for workspace and flow file locations."""

from __future__ import annotations

ELLIPSIS = "…/"
NARROW_WIDTH = 200
"""Below this width (px) only the parent and last segment are shown."""
CHAR_WIDTH = 10
"""Conservative pixels-per-character estimate used for the budget."""


def shorten_path(path: str, max_width: int, min_segments: int = 2) -> str:
    """Shorten *path* to fit roughly *max_width* pixels.

    The last segment is always kept.  Dropped leading segments are replaced
    by ``…/``; an absolute path that fits entirely keeps its leading ``/``.
    """
    if not path:
        return ""

    normalized = path.replace("\\", "/")
    segments = [segment for segment in normalized.split("/") if segment]
    if not segments:
        return path

    last = segments[-1]

    if max_width < NARROW_WIDTH:
        if len(segments) == 1:
            return last
        return f"{ELLIPSIS}{segments[-2]}/{last}"

    if len(segments) <= min_segments:
        return path

    budget = max_width // CHAR_WIDTH
    included = [last]
    length = len(last)

    # Walk right to left while the budget allows.
    for i in range(len(segments) - 2, -1, -1):
        segment = segments[i]
        new_length = length + 1 + len(segment)
        if new_length + len(ELLIPSIS) > budget and i > 0:
            return ELLIPSIS + "/".join(included)
        included.insert(0, segment)
        length = new_length

    result = "/".join(included)
    return "/" + result if normalized.startswith("/") else result


def path_width(path: str) -> int:
    """Estimated rendered width in pixels (8px per character)."""
    return len(path) * 8
