"""
Shared helpers: filename composition, human-readable formatting, and structured
event logging.
"""
