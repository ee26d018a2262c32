"""Command line helpers shared by the camera-controls entry points."""

from camera_controls.cli.common import (
    add_common_cli_arguments,
    config_overrides_from_args,
    install_exception_handlers,
    positive_float,
)

__all__ = [
    "add_common_cli_arguments",
    "config_overrides_from_args",
    "install_exception_handlers",
    "positive_float",
]
