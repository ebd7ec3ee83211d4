"""StreetFood Connect: vendors and raw material suppliers marketplace."""

__version__ = "1.0.0"
