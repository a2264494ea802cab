from __future__ import annotations

import sys

from statsview.app import run

if __name__ == "__main__":  # pragma: no cover
    sys.exit(run())
