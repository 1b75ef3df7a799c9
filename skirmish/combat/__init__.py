"""
Combat system module for the combat core.

This module handles the resolution of a single battle: the actions a
combatant can submit, the probabilistic resolver, the initiative scheduler,
the session that owns the battle state and the result log it produces.
"""
