#!/usr/bin/env python3
"""
Bank Ledger Entry Point

`python run.py` starts the console teller; `python run.py serve` starts the
HTTP teller API.
"""

import sys

from bank_ledger.cli import main
from bank_ledger.api import run_server


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "serve":
            run_server()
        else:
            main()
    except KeyboardInterrupt:
        print("\nShutting down bank application...")
