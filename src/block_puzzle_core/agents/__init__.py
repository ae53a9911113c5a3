"""Scripted players for exercising the game session and the gym env."""
