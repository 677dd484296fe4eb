"""plotfarm: plotfarm/__main__.py.

Load, validate and display disk farm and plot server configuration.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
