"""Concrete control sources."""

from camera_controls.backends.v4l2_ctl import V4l2CtlSource, open_v4l2_device, v4l2_opener

__all__ = ["V4l2CtlSource", "open_v4l2_device", "v4l2_opener"]
