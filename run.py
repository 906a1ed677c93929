"""
Quick launcher for micanalyzer without installing it.
"""

import sys
from pathlib import Path

# Add src directory to the path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from micanalyzer.main import main

if __name__ == "__main__":
    sys.exit(main())
