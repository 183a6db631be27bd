"""Entry point for running arrowbind as a module: python -m arrowbind"""

import sys
from .ui import main

if __name__ == "__main__":
    sys.exit(main())
