#!/usr/bin/env python3
"""
run_tests.py
------------
Watch-mode test runner for the addon host.
Re-runs pytest whenever a source, test or config file changes.

Usage:
    python run_tests.py                    # Watch and re-run on changes
    python run_tests.py --run-once         # Run the suite once and exit
    python run_tests.py -k timer           # Only tests matching an expression
    python run_tests.py -m "not slow"      # Only tests matching a marker expression
"""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer


PROJECT_ROOT = Path(__file__).parent
WATCH_DIRS = ("addon_host", "tests", "config")
WATCH_SUFFIXES = (".py", ".yaml", ".yml", ".json")


class TestRunner(FileSystemEventHandler):
    """Runs pytest in a subprocess, debounced across bursts of file events."""

    def __init__(self, args, debounce: float = 1.0):
        self.args = args
        self.debounce = debounce
        self._last_run = 0.0

    # ===========================================================
    # Watchdog Callbacks
    # ===========================================================

    def on_modified(self, event):
        if event.is_directory or not self.is_watched(event.src_path):
            return
        now = time.monotonic()
        if now - self._last_run < self.debounce:
            return
        self._last_run = now
        self.run_tests()

    on_created = on_modified

    @staticmethod
    def is_watched(src_path) -> bool:
        path = Path(src_path)
        if path.suffix not in WATCH_SUFFIXES:
            return False
        try:
            relative = path.resolve().relative_to(PROJECT_ROOT.resolve())
        except ValueError:
            return False
        return bool(relative.parts) and relative.parts[0] in WATCH_DIRS

    # ===========================================================
    # Test Execution
    # ===========================================================

    def build_command(self):
        cmd = [sys.executable, "-m", "pytest", "-v"]
        if self.args.keyword:
            cmd += ["-k", self.args.keyword]
        if self.args.marker:
            cmd += ["-m", self.args.marker]
        if self.args.coverage:
            cmd += ["--cov=addon_host", "--cov-report=term-missing"]
        return cmd

    def run_tests(self) -> bool:
        print("\n" + "=" * 60)
        print("Running addon host tests...")
        print("=" * 60)
        try:
            result = subprocess.run(self.build_command(), cwd=PROJECT_ROOT)
        except KeyboardInterrupt:
            print("\nTest run interrupted")
            return False
        except OSError as e:
            print(f"Could not start pytest: {e}")
            return False

        passed = result.returncode == 0
        print("All tests passed!" if passed else f"pytest exited with code {result.returncode}")
        return passed


def watch(runner: TestRunner) -> int:
    observer = Observer()
    for directory in WATCH_DIRS:
        path = PROJECT_ROOT / directory
        if path.is_dir():
            observer.schedule(runner, str(path), recursive=True)

    print(f"Watching {', '.join(WATCH_DIRS)} (Ctrl+C to stop)")
    observer.start()
    try:
        while observer.is_alive():
            observer.join(1)
    except KeyboardInterrupt:
        print("\nFile watcher stopped")
    finally:
        observer.stop()
        observer.join()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Watch-mode test runner for the addon host")
    parser.add_argument("--run-once", action="store_true", help="Run tests once and exit")
    parser.add_argument("-k", "--keyword", help="pytest -k expression")
    parser.add_argument("-m", "--marker", help="pytest -m marker expression")
    parser.add_argument("--coverage", action="store_true",
                        help="Report coverage (needs pytest-cov)")
    args = parser.parse_args()

    runner = TestRunner(args)
    passed = runner.run_tests()
    if args.run_once:
        return 0 if passed else 1
    return watch(runner)


if __name__ == "__main__":
    sys.exit(main())
