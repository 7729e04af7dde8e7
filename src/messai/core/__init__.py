"""Core settings, constants and logging for MESSAI."""
