"""
Gear Forge: item progression and equipment-slot engine for RPG companion apps.
"""

__version__ = "0.1.0"
