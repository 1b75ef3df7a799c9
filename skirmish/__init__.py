"""
Skirmish package: the resolution core of a turn-based tactical battle.

This package contains turn ordering, action resolution, status effects and
termination detection for a roster of player and enemy combatants fighting a
scripted encounter.
"""
