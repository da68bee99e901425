"""Pytest configuration for the repository root."""

import sys
from pathlib import Path

# Add the repository root to the path so absolute imports work without install
root_dir = Path(__file__).parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))
