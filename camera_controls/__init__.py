"""Discover, present and edit the controls of V4L2 capture devices."""

__version__ = "0.1.0"
