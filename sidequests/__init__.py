"""
Heinous Sidequests - Mini-game engine for Heinous Trivia.

A small, timer-driven engine for the horror-themed sidequest mini-games.
Every game is a thin configuration of one shared skeleton:
- Phase machine (idle -> intro -> presenting -> awaiting input -> resolving)
- Centralized timers with structural cancellation
- Scoring with win/lose thresholds
- Randomized content without repetition until exhaustion
- Completed-session records handed to the leaderboard
"""

__version__ = "0.1.0"
