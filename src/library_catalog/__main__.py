"""Allow ``python -m library_catalog``."""

import sys

from .cli import main

sys.exit(main())
