"""
Zen Particles runner.

Usage:
    python particle_field.py --prompt "a spiral galaxy"
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from zenparticles.app import main

if __name__ == "__main__":
    main()
