"""Run the snapshot pruner: python -m dateprune"""

import sys

from dateprune.cli import main

if __name__ == "__main__":
    sys.exit(main())
