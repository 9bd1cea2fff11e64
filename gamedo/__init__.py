"""
GameDo progression engine

Turns task completions into XP, levels, daily streaks and achievements.
The core lives in gamedo.gamification and is pure; gamedo.storage holds the
local persistence and export/import collaborators.
"""

__version__ = "1.0.0"
