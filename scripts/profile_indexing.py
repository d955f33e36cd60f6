#!/usr/bin/env python3
"""Profile line indexing for snakeviz analysis."""

import cProfile
import pstats
import sys
from pathlib import Path

from jsonlogviewer import LineIndex, Viewport


def profile_indexing(log_path: str, output_file: str = "logs/profile.stats"):
    """Profile building an index over a log file and walking it once."""

    # Ensure output directory exists
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"Profiling indexing of {log_path}")
    print(f"Output will be saved to {output_file}")
    print("Running profiler...")

    profiler = cProfile.Profile()
    profiler.enable()

    # This is what we're profiling
    with LineIndex.open(log_path) as index:
        viewport = Viewport(index.line_count, 50)
        while True:
            start, end = viewport.visible_range()
            for line_no in range(start, end + 1):
                index.get_line(line_no)
            if end >= index.line_count:
                break
            viewport.page_down()
        line_count = index.line_count

    profiler.disable()

    # Save stats
    profiler.dump_stats(output_file)

    # Print summary
    print(f"\nIndexed {line_count:,} lines")
    print(f"Profile saved to {output_file}")
    print("To view with snakeviz:")
    print(f"  snakeviz {output_file}")
    print("\nTop 20 functions by cumulative time:")
    stats = pstats.Stats(output_file)
    stats.sort_stats("cumulative")
    stats.print_stats(20)

    print("\n\nLineIndex functions:")
    stats.print_stats("line_index")

    print("\n\nViewport functions:")
    stats.print_stats("viewport")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python profile_indexing.py <log_file> [output.stats]")
        print("Example: python profile_indexing.py logs/app.json.log profile.stats")
        sys.exit(1)

    log_path = sys.argv[1]
    output_file = sys.argv[2] if len(sys.argv) > 2 else "profile.stats"

    if not Path(log_path).exists():
        print(f"Error: {log_path} does not exist")
        sys.exit(1)

    profile_indexing(log_path, output_file)
