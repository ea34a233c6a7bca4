#!/usr/bin/env python3
"""
Stable entrypoint for the fractal journal shell.

Usage:
    python fractal_shell.py
    python fractal_shell.py --batch inputs.txt --seed 7
"""

from fractal_journal.shell import main

if __name__ == "__main__":
    raise SystemExit(main())
