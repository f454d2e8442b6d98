"""
PollPulse data layer.

Normalizes poll and funding records read either directly from the polls
contract or from the indexed subgraph into one canonical, display-ready model.
"""

__version__ = "0.1.0"
