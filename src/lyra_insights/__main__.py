"""
Package entry point for python -m execution.

USAGE:
    python -m lyra_insights report data.json   # Print analysis report
    python -m lyra_insights animate 250        # Print counter sequence
    python -m lyra_insights serve              # Run HTTP API
"""

import sys

from lyra_insights.cli import main

if __name__ == "__main__":
    sys.exit(main())
