"""Tactician: offline chess puzzle trainer with UCI engine analysis."""
