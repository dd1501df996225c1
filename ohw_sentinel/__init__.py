"""OHW Sentinel: pregnancy registration and reminder scheduling for community health workers."""

__version__ = "0.1.0"
