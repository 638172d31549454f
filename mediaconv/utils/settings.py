# mediaconv/utils/settings.py
import json
import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

SETTINGS_ENV = "MEDIACONV_SETTINGS"

DEFAULT_SETTINGS = {
    "ffmpeg_path": "ffmpeg",
    "ffprobe_path": "ffprobe",
    "output_dir_name": "converted",
    "output_formats": {"video": "mp4", "audio": "mp3", "image": "png"},
    "extra_args": "",                  # appended to every ffmpeg command line

    # Scan / job control
    "max_concurrency": None,           # None => unbounded fan-out
    "poll_interval_ms": 1000,
    "liveness_mode": "process_name",   # "process_name" or "handles"
}


def settings_path() -> Path:
    if env := os.environ.get(SETTINGS_ENV):
        return Path(env).expanduser()
    return Path.home() / ".mediaconv_settings.json"


def load_settings(path: Path | None = None) -> dict:
    """Defaults overlaid with the stored file, if there is one. Never writes."""
    p = path or settings_path()
    if p.exists():
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable settings file %s: %s", p, e)
        else:
            if isinstance(data, dict):
                merged = {**DEFAULT_SETTINGS, **data}
                merged["output_formats"] = {**DEFAULT_SETTINGS["output_formats"],
                                            **(data.get("output_formats") or {})}
                return merged
            log.warning("ignoring settings file %s: not a JSON object", p)
    return json.loads(json.dumps(DEFAULT_SETTINGS))


def save_settings(data: dict, path: Path | None = None) -> None:
    p = path or settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, indent=2), encoding="utf-8")
