#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch --text-file lyrics.txt

Or render one picture:

    python -m lyric_mosaic.cli render my_photo.jpg --text "..."
"""

from lyric_mosaic.cli import app

if __name__ == "__main__":
    app()
