#!/usr/bin/env python3
"""
bdiff — compare two binary files byte by byte

Usage:
    python bdiff_cli.py [-c] [-g n] [-l n] [-h] [-v] <file1> <file2>

Examples:
    python bdiff_cli.py stock.bin patched.bin
    python bdiff_cli.py -c -l 0 a.o b.o          # all blocks, highlighted
    python bdiff_cli.py -g 1 dump1.dat dump2.dat # one byte per hex group
"""

import os
import sys

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bdiff.cli import main


if __name__ == "__main__":
    sys.exit(main())
