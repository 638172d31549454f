# mediaconv/parsers/ffprobe.py
import math


def parse_duration(output: str) -> str | None:
    """First numeric line of `-show_entries format=duration` output, as printed."""
    for line in output.splitlines():
        line = line.strip()
        if not line or line == "N/A":
            continue
        try:
            secs = float(line)
        except ValueError:
            continue
        if math.isfinite(secs) and secs >= 0:
            return line
    return None


def format_duration(seconds) -> str:
    try:
        secs = float(seconds)
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(secs) or secs < 0:
        return ""
    total = int(round(secs))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}"

