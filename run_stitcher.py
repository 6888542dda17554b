"""
run_stitcher.py: CLI entry point

This script serves as the command-line interface entry point for the
den stitcher. It forwards execution to the
modularized CLI logic defined in `src/den_stitcher/cli.py`.

Usage:
    python run_stitcher.py [--scope dual|single] [--layout tight|square] [options]

This wrapper allows you to run the tool directly without needing to
modify PYTHONPATH or install the project as a package.

For help on available options, run:
    python run_stitcher.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import den_stitcher.cli as sd_cli

if __name__ == "__main__":
    sd_cli.main()
