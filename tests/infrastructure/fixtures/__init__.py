"""Captured ``v4l2-ctl`` output used by parser tests."""
