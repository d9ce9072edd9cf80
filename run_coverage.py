#!/usr/bin/env python3
"""
Coverage test runner for Tiger Sweeper
Runs the pytest suite under pytest-cov and optionally opens the HTML report
"""

import argparse
import subprocess
import sys
import webbrowser
from pathlib import Path


COVERED_PACKAGES = ("game", "ai", "records")


def build_command(html: bool, extra_args=None):
    """pytest invocation measuring the src packages and the root scripts"""
    cmd = [sys.executable, "-m", "pytest", "tests/"]
    for package in COVERED_PACKAGES:
        cmd.append(f"--cov={package}")
    cmd += ["--cov=main", "--cov=evaluation", "--cov-report=term-missing"]
    if html:
        cmd.append("--cov-report=html:htmlcov")
    return cmd + list(extra_args or [])


def run_coverage(html: bool = True, open_report: bool = False, extra_args=None) -> bool:
    """Run tests with coverage; returns True when every test passed"""
    print("🧪 Running tests with coverage...")
    print("=" * 50)

    try:
        result = subprocess.run(build_command(html, extra_args), check=False)
    except FileNotFoundError:
        print("❌ Error: Python or pytest not found")
        return False

    if result.returncode == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Some tests failed (exit code: {result.returncode})")

    html_report = Path("htmlcov/index.html")
    if html and html_report.exists():
        print(f"\n📊 Coverage report generated: {html_report.absolute()}")
        if open_report:
            webbrowser.open(f"file://{html_report.absolute()}")
            print("🌐 Coverage report opened in browser")

    return result.returncode == 0


def main():
    parser = argparse.ArgumentParser(description="Run the Tiger Sweeper tests with coverage")
    parser.add_argument('--no-html', action='store_true', help='Skip the HTML report')
    parser.add_argument('--open', action='store_true', help='Open the HTML report when done')
    args, pytest_args = parser.parse_known_args()

    success = run_coverage(html=not args.no_html, open_report=args.open, extra_args=pytest_args)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
