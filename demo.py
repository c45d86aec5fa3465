#!/usr/bin/env python3
"""
IRLens Demo Script
==================

This script walks through the embedding pipeline:
1. Load and inspect the seed vocabulary
2. Embed the sample IR module (functions, blocks, instructions)
3. Index the function vectors in ChromaDB
4. Search for functions similar to sum_to

Run from the repository root: python demo.py
"""

import subprocess
import sys
from pathlib import Path

# Colors for terminal output
GREEN = "\033[92m"
BLUE = "\033[94m"
RESET = "\033[0m"
BOLD = "\033[1m"


def run(args: list[str]) -> int:
    """Run the irlens CLI with the seed vocabulary."""
    cmd = [sys.executable, "-m", "irlens.main", "--vocab-path", "data/seed_vocab.json", *args]
    print(f"{BLUE}$ irlens {' '.join(cmd[5:])}{RESET}")
    return subprocess.run(cmd).returncode


def section(title: str):
    """Print a section header."""
    print(f"\n{BOLD}{GREEN}{'='*60}{RESET}")
    print(f"{BOLD}{GREEN}  {title}{RESET}")
    print(f"{BOLD}{GREEN}{'='*60}{RESET}\n")


def main() -> int:
    base_dir = Path(__file__).parent
    if Path.cwd() != base_dir.resolve():
        print("Run this script from the repository root.")
        return 1

    section("1. Vocabulary")
    run(["stats"])
    run(["vocab"])

    section("2. Embeddings for the sample module")
    run(["embed", "sample_ir.programs:build"])

    section("3. Index function vectors")
    run(["--db-path", "./irlens_demo_db", "index", "sample_ir.programs:build"])

    section("4. Similar functions")
    return run(["--db-path", "./irlens_demo_db", "search", "sample_ir.programs:build", "sum_to", "-k", "2"])


if __name__ == "__main__":
    sys.exit(main())
