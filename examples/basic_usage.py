#!/usr/bin/env python3
"""
Basic usage example for jsonlogviewer.

This example demonstrates:
- Indexing a JSON log file
- Random access to lines
- Moving a viewport over the file
- Extracting fields from records
"""

import json
import tempfile
from pathlib import Path

from jsonlogviewer import InvalidLineError, LineIndex, Viewport
from jsonlogviewer.parser import extract_field, format_pretty, parse, shorten_level


def main():
    # Create a sample log file
    levels = ["debug", "info", "info", "warn", "error"]
    with tempfile.NamedTemporaryFile(mode="w", suffix=".log", delete=False) as f:
        for i in range(1, 101):
            record = {
                "time": f"2024-01-15T10:30:{i % 60:02}Z",
                "level": levels[i % len(levels)],
                "msg": f"request {i} handled",
                "http": {"status": 200 if i % 7 else 500, "path": f"/api/items/{i}"},
            }
            f.write(json.dumps(record) + "\n")
        f.write("plain text line, not JSON\r\n")
        log_path = f.name

    print(f"Created sample log at: {log_path}")

    try:
        with LineIndex.open(log_path) as index:
            print("\n=== Basic Access ===")
            print(f"Total lines: {index.line_count}")
            print(f"First line: '{index.get_line_string(1)[:60]}...'")
            print(f"Last line: '{index.get_line_string(index.line_count)}'")

            try:
                index.get_line(index.line_count + 1)
            except InvalidLineError as e:
                print(f"Out of range: {e}")

            print("\n=== Viewport of 10 rows ===")
            viewport = Viewport(index.line_count, 10)
            for command, move in [
                ("start", lambda: None),
                ("5j", lambda: viewport.down(5)),
                ("page down", viewport.page_down),
                ("M", viewport.goto_line_middle),
                ("50%", lambda: viewport.jump_to_percent(50)),
                ("G", viewport.goto_bottom),
                ("gg", viewport.goto_top),
            ]:
                move()
                print(f"{command:>10}: {viewport.state()}")

            print("\n=== Visible rows after 42G ===")
            viewport.goto(42)
            start, end = viewport.visible_range()
            for line_no in range(start, end + 1):
                entry = parse(index.get_line(line_no), line_no)
                marker = ">" if line_no == viewport.cursor else " "
                print(f"{marker} {entry.row:>4} {entry.time} {shorten_level(entry.level)} {entry.msg}")

            print("\n=== Selected record ===")
            raw = index.get_line(viewport.cursor)
            print(format_pretty(raw))
            print(f"http.status = {extract_field(raw, 'http.status')}")

    finally:
        # Clean up
        Path(log_path).unlink()
        print(f"\nCleaned up {log_path}")


if __name__ == "__main__":
    main()
    print("\nExample complete!")
