"""pathtraffic - daily top-N request paths from flat access-log exports."""

__version__ = "1.0.0"
