"""Labelled console logging and the JSON Lines error log."""
