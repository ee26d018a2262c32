"""Shared pytest configuration and fixtures for the camera-controls test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.infrastructure.mocks.device_mocks import (  # noqa: E402
    MockControlSource,
    MockOpener,
    webcam_descriptors,
    webcam_values,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "hardware: mark test as requiring a V4L2 device and v4l2-ctl"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that require physical hardware",
    )
    parser.addoption(
        "--device",
        action="store",
        default="/dev/video0",
        help="Device path used by hardware tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip hardware tests unless --run-hardware is specified."""
    if config.getoption("--run-hardware"):
        return

    skip_hardware = pytest.mark.skip(reason="Need --run-hardware option to run")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def test_data_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "infrastructure" / "fixtures"


@pytest.fixture
def list_ctrls_output(test_data_dir) -> str:
    """Captured ``v4l2-ctl --list-ctrls-menus`` output."""
    return (test_data_dir / "list_ctrls_menus.txt").read_text(encoding="utf-8")


@pytest.fixture
def info_output(test_data_dir) -> str:
    """Captured ``v4l2-ctl --info`` output."""
    return (test_data_dir / "info.txt").read_text(encoding="utf-8")


@pytest.fixture
def webcam_source() -> MockControlSource:
    """Mock webcam with user and camera control classes."""
    return MockControlSource(webcam_descriptors(), webcam_values(), path="/dev/video0")


@pytest.fixture
def webcam_opener(webcam_source) -> MockOpener:
    """Opener that knows only /dev/video0."""
    return MockOpener({"/dev/video0": webcam_source})


@pytest.fixture
def hardware_device(request) -> str:
    """Device path for hardware tests."""
    return request.config.getoption("--device")
