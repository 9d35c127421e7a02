"""Utility functions for formatting chat replies."""

from __future__ import annotations

import re
from functools import cache

from music_relay.domain.music.entities import NowPlaying, Track

PROGRESS_BAR_CELLS = 10

_URL_PATTERN = re.compile(r"https?://[^\s<>\"']+")


@cache
def format_duration(seconds: int | float | None) -> str:
    if seconds is None:
        return "–"

    total_seconds = round(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def progress_bar(fraction: float, cells: int = PROGRESS_BAR_CELLS) -> str:
    """Render playback progress as a row of emoji cells."""
    current = int(max(0.0, min(1.0, fraction)) * cells)
    bar = []
    for i in range(cells):
        if i == current:
            bar.append("🔶")
        elif i < current:
            bar.append("🟦")
        else:
            bar.append("➖")
    return "".join(bar)


def extract_url(text: str) -> str | None:
    """Return the first http(s) URL in ``text``.

    Chat clients often wrap links in ``<...>`` to suppress previews; the
    brackets are not part of the match.
    """
    match = _URL_PATTERN.search(text)
    if match is None:
        return None
    return match.group(0).rstrip(").,>")


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def format_track(track: Track) -> str:
    lines = [f"**[{truncate(track.title)}]({track.public_url})**"]
    if track.artist:
        lines.append(f"by {track.artist}")
    lines.append(format_duration(track.duration_seconds))
    return "\n".join(lines)


def format_now_playing(now: NowPlaying) -> str:
    header = (
        f"`{format_duration(now.elapsed_seconds)}` ▶ "
        f"{progress_bar(now.progress)} "
        f"`{format_duration(now.track.duration_seconds)}`"
    )
    return f"{header}\n{format_track(now.track)}"
