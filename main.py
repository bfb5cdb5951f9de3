#!/usr/bin/env python3
"""
Main entry point for PicSorter application.
"""

import sys

from pic_sorter.cli import main

if __name__ == "__main__":
    sys.exit(main())
