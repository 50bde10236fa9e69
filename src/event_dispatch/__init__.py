"""
Event layout & dispatch engine.

Reshapes analytics events (track, identify, group, page, ...) into table
records under a configurable data layout and delivers them to Bulker.
"""

__version__ = "0.1.0"
