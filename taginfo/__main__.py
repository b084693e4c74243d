"""Allow ``python -m taginfo`` as an alias of the ``taginfo`` command."""

from __future__ import annotations

import sys

from taginfo.cli import main

if __name__ == "__main__":
    sys.exit(main())
