#!/usr/bin/env python3
"""Allow ``python -m namelint``."""

import sys

from namelint.cli import main

if __name__ == '__main__':
    sys.exit(main())
