"""Dungeon Delve backend package."""
