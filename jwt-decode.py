#!/usr/bin/env python3
"""
Backward-compatible entry point.

Usage:
    python3 jwt-decode.py <token>

This shim delegates to the jwt_decode package under src/.
"""

import os
import sys

# Ensure the src/ directory is on the Python path so the package can be found
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from jwt_decode.cli import main

if __name__ == "__main__":
    main()
