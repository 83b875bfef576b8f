"""CLI module for the Wellness Record Builder."""
