#!/usr/bin/env python3
"""MiniTimer entry point.

Run with:
    python main.py
    python -m minitimer
"""

from minitimer.__main__ import main


if __name__ == "__main__":
    main()
