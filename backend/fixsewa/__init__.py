"""FixSewa - service booking backend connecting customers and workers."""

__version__ = "0.1.0"
