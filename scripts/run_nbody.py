#!/usr/bin/env python
from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from nbody.run import main


if __name__ == "__main__":
    sys.exit(main())
