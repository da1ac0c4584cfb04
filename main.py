# main.py
"""
The main entry point for launching the Chess Tracker command-line application.
"""
from chess_tracker.cli import main

if __name__ == "__main__":
    main()
