"""Tests for the Tk controls panel; skipped where no display is available."""

import pytest

from camera_controls.app import controls_panel
from camera_controls.controls.controller import ControlsController
from tests.infrastructure.mocks.device_mocks import (
    AUTO_EXPOSURE_ID,
    BRIGHTNESS_ID,
    EXPOSURE_ID,
    WHITE_BALANCE_AUTO_ID,
    link_auto_exposure,
)

tk = controls_panel.tk


@pytest.fixture
def root():
    if tk is None:
        pytest.skip("tkinter not available")
    try:
        window = tk.Tk()
    except tk.TclError:
        pytest.skip("No display available")
    window.withdraw()
    yield window
    window.destroy()


@pytest.fixture
def panel(root, webcam_opener):
    controller = ControlsController(webcam_opener)
    controller.switch_device("/dev/video0")
    return controls_panel.ControlsPanel(root, controller, debounce_ms=0)


class TestControlsPanel:
    def test_builds_one_frame_per_group(self, panel, root):
        frames = panel._groups_frame.winfo_children()

        assert [f.cget("text") for f in frames] == ["Information", "User Controls", "Camera Controls"]
        assert "Mock Webcam" in root.title()

    def test_switch_toggle_writes_device(self, panel, webcam_source):
        info = panel._row_widgets[WHITE_BALANCE_AUTO_ID]
        info["var"].set(False)

        panel._on_switch_toggled(WHITE_BALANCE_AUTO_ID)

        assert (WHITE_BALANCE_AUTO_ID, False) in webcam_source.writes

    def test_choice_selection_updates_dependent_widget(self, panel, webcam_source):
        webcam_source.on_write = link_auto_exposure
        combo = panel._row_widgets[AUTO_EXPOSURE_ID]["widget"]
        exposure = panel._row_widgets[EXPOSURE_ID]["widget"]
        assert exposure.instate(["disabled"])

        combo.current(0)
        panel._on_choice_selected(AUTO_EXPOSURE_ID)

        assert not exposure.instate(["disabled"])

    def test_scale_edit_is_applied_after_debounce(self, panel, root, webcam_source):
        info = panel._row_widgets[BRIGHTNESS_ID]
        info["var"].set(-12.0)

        panel._on_scale_changed(BRIGHTNESS_ID, "-12.0")
        panel._on_scale_settled(BRIGHTNESS_ID)

        assert (BRIGHTNESS_ID, -12) in webcam_source.writes

    def test_switch_to_missing_device_shows_error(self, panel):
        panel._path_var.set("/dev/video9")

        panel._switch_device()

        frames = panel._groups_frame.winfo_children()
        assert [f.cget("text") for f in frames] == ["Error"]
        assert panel._row_widgets == {}
