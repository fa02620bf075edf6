#!/usr/bin/env python3
"""
Run the availability query optimizer from a source checkout.

    python scripts/optimize_availability_query.py --endpoint https://api.example.com/graphql --quick
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from availability_optimizer.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
