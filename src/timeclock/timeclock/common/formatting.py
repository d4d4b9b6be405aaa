from __future__ import annotations


def format_minutes(minutes: int, *, signed: bool = True) -> str:
    """Render minutes as ``+8h05min`` / ``-0h30min``."""
    hours, mins = divmod(abs(int(minutes)), 60)
    body = f"{hours}h{mins:02d}min"
    if not signed:
        return body
    return ("+" if minutes >= 0 else "-") + body


def format_hhmm(minutes: int) -> str:
    minutes = int(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def progress_percentage(worked: int, expected: int, *, cap: int) -> float:
    """Share of the expected minutes reached, capped for display."""
    if expected <= 0:
        return 0.0
    return min(worked / expected * 100, float(cap))
