#!/usr/bin/env python3
import argparse
import json
import logging
import sys
import time
from pathlib import Path

from .core import MediaConverter
from .models.errors import OutputDirectoryError, SupervisorError
from .models.node import FileNode, FolderNode, node_from_dict, to_dict
from .parsers.ffprobe import format_duration
from .utils.settings import load_settings


def format_tree(nodes, indent: int = 0) -> list[str]:
    lines = []
    pad = "  " * indent
    for node in nodes:
        if isinstance(node, FileNode):
            extra = f" {format_duration(node.duration)}" if node.duration != "none" else ""
            lines.append(f"{pad}{node.name}  {node.media_type.value} {node.size_label}{extra}")
        else:
            tag = "folder" if isinstance(node, FolderNode) else f"failed: {node.error}"
            lines.append(f"{pad}{node.name}/  [{tag}] {node.size_label}")
            lines.extend(format_tree(node.children, indent + 1))
    return lines


def _report_scan_errors(core: MediaConverter) -> None:
    for err in core.scan_errors:
        print(f"scan: {err}", file=sys.stderr)


def _wait(core: MediaConverter) -> None:
    interval = int(core.settings.get("poll_interval_ms", 1000)) / 1000.0
    while True:
        try:
            if not core.poll_liveness():
                return
            time.sleep(interval)
        except KeyboardInterrupt:
            logging.warning("stop requested, killing transcode processes")
            core.request_stop()


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(
        prog="mediaconv",
        description="Scan media trees and batch-convert them with ffmpeg.",
    )
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv).")
    ap.add_argument("--settings", help="Settings JSON file (default: $MEDIACONV_SETTINGS or ~/.mediaconv_settings.json).")
    sub = ap.add_subparsers(dest="command", required=True)

    p_scan = sub.add_parser("scan", help="Print the media tree under the given paths.")
    p_scan.add_argument("paths", nargs="+")
    p_scan.add_argument("--json", action="store_true", help="Print the tree as JSON.")

    p_conv = sub.add_parser("convert", help="Mirror the tree into OUTPUT/converted, one ffmpeg per file.")
    p_conv.add_argument("paths", nargs="*")
    p_conv.add_argument("-o", "--output", required=True, help="Output root.")
    p_conv.add_argument("--tree", help="JSON tree from `scan --json` (possibly edited) instead of scanning.")
    p_conv.add_argument("--wait", action="store_true", help="Poll until every process has exited.")

    sub.add_parser("stop", help="Kill every running transcode process.")
    sub.add_parser("status", help="Report whether any transcode process is running.")

    args = ap.parse_args(argv)

    level = (
        logging.WARNING
        if args.verbose == 0
        else (logging.INFO if args.verbose == 1 else logging.DEBUG)
    )
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s: %(message)s")

    settings = load_settings(Path(args.settings) if args.settings else None)
    core = MediaConverter(settings)

    try:
        if args.command == "scan":
            nodes = core.scan(args.paths)
            if args.json:
                print(json.dumps([to_dict(n) for n in nodes], indent=2))
            else:
                print("\n".join(format_tree(nodes)))
            _report_scan_errors(core)
            return 0

        if args.command == "convert":
            if args.tree:
                try:
                    data = json.loads(Path(args.tree).read_text(encoding="utf-8"))
                    if not isinstance(data, list):
                        raise ValueError("expected a JSON list of nodes")
                    tree = [node_from_dict(d) for d in data]
                except (OSError, ValueError, KeyError) as e:
                    ap.error(f"cannot read tree {args.tree}: {e}")
            elif args.paths:
                tree = core.scan(args.paths)
                _report_scan_errors(core)
            else:
                ap.error("convert needs PATH arguments or --tree")
            try:
                job = core.start_conversion(tree, args.output)
            except OutputDirectoryError as e:
                logging.error("%s", e)
                return 1
            print(f"job {job.job_id}: {len(job.spawned)} started, {len(job.errors)} failed -> {job.output_dir}")
            for err in job.errors:
                print(f"convert: {err}", file=sys.stderr)
            if args.wait:
                _wait(core)
                print(f"job {job.job_id}: {core.state.value}")
            return 0

        if args.command == "stop":
            core.request_stop()
            return 0

        if args.command == "status":
            active = core.supervisor.is_any_active()
            print("running" if active else "idle")
            return 0
    except SupervisorError as e:
        logging.error("%s", e)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
