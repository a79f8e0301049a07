"""Run the inspection tool from a checkout: `python3 inspection.py stats`."""
import sys

from inspection_lib.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
