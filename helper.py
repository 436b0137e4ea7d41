#!/usr/bin/env python3
"""
Convenience launcher for the helper daemon.
Just run: python helper.py
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

# Import and run
from scripts.helper_daemon import main

if __name__ == "__main__":
    main()
