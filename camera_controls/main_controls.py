"""camera-controls entry point: show or print the controls of a V4L2 device."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, TextIO

from camera_controls.app.render import render_groups
from camera_controls.backends.v4l2_ctl import v4l2_opener
from camera_controls.cli.common import (
    add_common_cli_arguments,
    config_overrides_from_args,
    install_exception_handlers,
    log_shutdown,
    log_startup,
    positive_float,
)
from camera_controls.config import ControlsConfig, load_config, read_config_file
from camera_controls.controls.controller import ControlsController, DeviceState
from camera_controls.core.logging_config import configure_logging
from camera_controls.core.logging_utils import get_module_logger

DISPLAY_NAME = "Camera Controls"

logger = get_module_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="camera-controls", description=f"{DISPLAY_NAME} for V4L2 devices")
    parser.add_argument(
        "--device",
        type=str,
        default=None,
        help="Capture device path (default: device.path from the config file)",
    )
    parser.add_argument(
        "--v4l2-ctl",
        dest="v4l2_ctl",
        type=str,
        default=None,
        help="v4l2-ctl executable to run",
    )
    parser.add_argument(
        "--timeout",
        type=positive_float,
        default=None,
        help="Seconds to wait for each v4l2-ctl call",
    )
    add_common_cli_arguments(parser)

    args = parser.parse_args(argv)
    if args.config is not None and not args.config.exists():
        parser.error(f"config file not found: {args.config}")
    return args


def build_config(args: argparse.Namespace) -> ControlsConfig:
    data = read_config_file(args.config)
    return load_config(data, config_overrides_from_args(args), logger=logger)


def build_controller(config: ControlsConfig) -> ControlsController:
    opener = v4l2_opener(command=config.v4l2.command, timeout=config.v4l2.timeout_s, logger=logger)
    return ControlsController(opener, logger=logger)


def run_headless(controller: ControlsController, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    groups = []
    info_group = controller.information_group()
    if info_group is not None:
        groups.append(info_group)
    groups.extend(controller.groups)
    out.write(render_groups(groups, header=f"Device: {controller.device_path}"))
    return 0 if controller.state is DeviceState.BOUND else 1


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    config = build_config(args)

    configure_logging(config.logging.level, mode=args.mode, log_file=config.logging.file)
    install_exception_handlers(logger)
    log_startup(
        logger,
        DISPLAY_NAME,
        device=config.device.path,
        mode=args.mode,
        v4l2_ctl=config.v4l2.command,
    )

    controller = build_controller(config)
    controller.switch_device(config.device.path)

    try:
        if args.mode == "headless":
            return run_headless(controller)

        from camera_controls.app.controls_panel import run_panel

        run_panel(
            controller,
            geometry=config.ui.geometry,
            debounce_ms=config.ui.debounce_ms,
            logger=logger,
        )
        return 0
    except KeyboardInterrupt:
        return 130
    finally:
        log_shutdown(logger, DISPLAY_NAME)


if __name__ == "__main__":
    sys.exit(main())
