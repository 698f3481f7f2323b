"""
Zombie Chickens - A rules engine for the farm-defence card game.

Players build defensive stacks from day cards and survive zombie
attacks each night. The package provides:
- The card tables, decks and farm rules
- An interruptible day/night state machine that suspends on prompts
- A lobby/session layer and a JSON API for networked play
- A terminal client
"""

__version__ = "0.1.0"
