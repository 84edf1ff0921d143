"""Allow ``python -m context_cache init|copy-and-run``."""

import sys

from context_cache.cli import main

sys.exit(main())
