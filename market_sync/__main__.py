"""Allow ``python -m market_sync``."""

from __future__ import annotations

import sys

from market_sync.cli import main

sys.exit(main())
