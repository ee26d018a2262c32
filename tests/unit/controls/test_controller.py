"""Unit tests for the controls controller: device switching and refresh."""

import pytest

from camera_controls.controls.bindings import SwitchBinding
from camera_controls.controls.controller import INFO_GROUP_TITLE, ControlsController, DeviceState
from camera_controls.controls.state import ERROR_GROUP_TITLE, ControlFlags, RowKind
from tests.infrastructure.mocks.device_mocks import (
    AUTO_EXPOSURE_ID,
    BRIGHTNESS_ID,
    EXPOSURE_ID,
    FOCUS_TRIGGER_ID,
    WHITE_BALANCE_AUTO_ID,
    WHITE_BALANCE_TEMP_ID,
    MockControlSource,
    MockOpener,
    link_auto_exposure,
    make_boundary,
    make_range,
    make_switch,
)

AUTO_ID = 1
BRIGHTNESS = 2


@pytest.fixture
def scenario_source():
    descriptors = [
        make_boundary(0x009A0001, "Exposure"),
        make_switch(AUTO_ID, "Auto"),
        make_boundary(0x00980001, "Image"),
        make_range(BRIGHTNESS, "Brightness", minimum=0, maximum=100, step=1, default=50),
    ]
    return MockControlSource(descriptors, {AUTO_ID: True, BRIGHTNESS: 73}, path="/dev/video2")


@pytest.fixture
def bound_controller(webcam_opener):
    controller = ControlsController(webcam_opener)
    controller.switch_device("/dev/video0")
    return controller


class TestDeviceSwitch:
    """Unbound / Bound / Error transitions."""

    def test_starts_unbound(self, webcam_opener):
        controller = ControlsController(webcam_opener)

        assert controller.state is DeviceState.UNBOUND
        assert controller.groups == []
        assert len(controller.registry) == 0
        assert controller.information_group() is None

    def test_switch_binds_groups_and_registry(self, scenario_source):
        controller = ControlsController(MockOpener({"/dev/video2": scenario_source}))

        assert controller.switch_device("/dev/video2") is DeviceState.BOUND

        assert [g.title for g in controller.groups] == ["Exposure", "Image"]
        exposure, image = controller.groups
        assert [row.kind for row in exposure.rows] == [RowKind.SWITCH]
        brightness = image.rows[0]
        assert brightness.kind is RowKind.RANGE
        assert (brightness.minimum, brightness.maximum) == (0, 100)
        assert brightness.value == 73
        assert set(b.control_id for b in controller.registry) == {AUTO_ID, BRIGHTNESS}

    def test_switch_fetches_device_info(self, bound_controller, webcam_source):
        assert bound_controller.device_info == webcam_source.info
        info = bound_controller.information_group()
        assert info.title == INFO_GROUP_TITLE
        assert [row.title for row in info.rows] == ["Bus", "Card", "Driver", "Version", "Capabilities"]

    def test_device_info_failure_still_binds(self, webcam_source, webcam_opener):
        webcam_source.fail_info = True
        controller = ControlsController(webcam_opener)

        assert controller.switch_device("/dev/video0") is DeviceState.BOUND
        assert controller.device_info.card == ""

    def test_invalid_path_shows_error_group(self, bound_controller):
        old_bindings = list(bound_controller.registry)
        assert old_bindings

        state = bound_controller.switch_device("/dev/video9")

        assert state is DeviceState.ERROR
        assert len(bound_controller.registry) == 0
        assert len(bound_controller.groups) == 1
        group = bound_controller.groups[0]
        assert group.title == ERROR_GROUP_TITLE
        assert group.rows[0].kind is RowKind.INFO
        assert group.rows[0].title == "Message"
        assert "/dev/video9" in group.rows[0].text
        assert bound_controller.error_message == group.rows[0].text
        assert bound_controller.information_group() is None
        for binding in old_bindings:
            assert bound_controller.registry.get(binding.control_id) is None

    def test_listing_failure_after_open_shows_error_group(self, webcam_source, webcam_opener):
        webcam_source.fail_list = True
        controller = ControlsController(webcam_opener)

        assert controller.switch_device("/dev/video0") is DeviceState.ERROR
        assert [g.title for g in controller.groups] == [ERROR_GROUP_TITLE]
        assert len(controller.registry) == 0

    def test_apply_after_failed_switch_reaches_nothing(self, bound_controller, webcam_source):
        bound_controller.switch_device("/dev/video9")

        assert bound_controller.apply(BRIGHTNESS_ID, 5) is False
        assert webcam_source.writes == []

    def test_contract_violation_while_grouping_leaves_controller_unbound(self, bound_controller, webcam_source):
        webcam_source.update_descriptor(AUTO_EXPOSURE_ID, items=())

        with pytest.raises(AssertionError):
            bound_controller.switch_device("/dev/video0")

        assert bound_controller.state is DeviceState.UNBOUND
        assert bound_controller.source is None
        assert len(bound_controller.registry) == 0
        assert bound_controller.information_group() is None

    def test_switch_back_rebuilds_fresh_bindings(self, bound_controller):
        first = bound_controller.registry.get(BRIGHTNESS_ID)

        bound_controller.switch_device("/dev/video9")
        bound_controller.switch_device("/dev/video0")

        assert bound_controller.state is DeviceState.BOUND
        assert bound_controller.registry.get(BRIGHTNESS_ID) is not first


class TestApplyAndRefresh:
    """User edits and refresh propagation."""

    def test_switch_write_refresh_disables_dependent_range(self, scenario_source):
        controller = ControlsController(MockOpener({"/dev/video2": scenario_source}))
        controller.switch_device("/dev/video2")

        def disable_brightness(source, control_id, value):
            source.set_flags(BRIGHTNESS, ControlFlags.INACTIVE)

        scenario_source.on_write = disable_brightness

        assert controller.apply(AUTO_ID, False) is True

        brightness = controller.registry.get(BRIGHTNESS)
        assert brightness.enabled is False
        assert brightness.value == 73

    def test_range_edit_does_not_refresh(self, bound_controller, webcam_source):
        calls = webcam_source.list_calls

        assert bound_controller.apply(BRIGHTNESS_ID, 20) is False

        assert webcam_source.list_calls == calls
        assert bound_controller.registry.get(BRIGHTNESS_ID).value == 20

    def test_failed_write_skips_refresh(self, bound_controller, webcam_source):
        webcam_source.fail_writes.add(WHITE_BALANCE_AUTO_ID)
        calls = webcam_source.list_calls

        assert bound_controller.apply(WHITE_BALANCE_AUTO_ID, False) is False
        assert webcam_source.list_calls == calls

    def test_choice_edit_activates_exposure(self, bound_controller, webcam_source):
        webcam_source.on_write = link_auto_exposure
        exposure = bound_controller.registry.get(EXPOSURE_ID)
        assert exposure.enabled is False

        bound_controller.apply(AUTO_EXPOSURE_ID, 0)

        assert webcam_source.values[AUTO_EXPOSURE_ID] == 1
        assert exposure.enabled is True

    def test_action_triggers_refresh(self, bound_controller, webcam_source):
        calls = webcam_source.list_calls

        assert bound_controller.apply(FOCUS_TRIGGER_ID) is True
        assert webcam_source.list_calls == calls + 1

    def test_refresh_picks_up_device_side_values(self, bound_controller, webcam_source):
        webcam_source.values[BRIGHTNESS_ID] = -20

        changed = bound_controller.refresh()

        assert [row.control_id for row in changed] == [BRIGHTNESS_ID]
        assert bound_controller.registry.get(BRIGHTNESS_ID).value == -20

    def test_refresh_ignores_bindings_missing_from_listing(self, bound_controller, webcam_source):
        webcam_source.descriptors = [d for d in webcam_source.descriptors if d.control_id != BRIGHTNESS_ID]
        webcam_source.values[BRIGHTNESS_ID] = -20
        reads_before = len(webcam_source.reads)

        bound_controller.refresh()

        assert bound_controller.registry.get(BRIGHTNESS_ID).value == 10
        assert BRIGHTNESS_ID not in webcam_source.reads[reads_before:]

    def test_refresh_ignores_unknown_descriptors(self, bound_controller, webcam_source):
        webcam_source.descriptors.append(make_switch(0x00989999, "Late Arrival"))
        webcam_source.values[0x00989999] = True

        bound_controller.refresh()

        assert 0x00989999 not in bound_controller.registry

    def test_refresh_listing_failure_is_abandoned(self, bound_controller, webcam_source):
        webcam_source.fail_list = True
        webcam_source.values[BRIGHTNESS_ID] = -20

        assert bound_controller.refresh() == []
        assert bound_controller.registry.get(BRIGHTNESS_ID).value == 10

    def test_second_refresh_is_a_no_op(self, bound_controller, webcam_source):
        webcam_source.values[BRIGHTNESS_ID] = -20
        bound_controller.refresh()

        assert bound_controller.refresh() == []

    def test_refresh_resolves_state_before_value(self, bound_controller, webcam_source):
        order = []
        binding = bound_controller.registry.get(WHITE_BALANCE_AUTO_ID)
        original_state, original_value = binding.update_state, binding.update_value
        binding.update_state = lambda d: order.append("state") or original_state(d)
        binding.update_value = lambda d: order.append("value") or original_value(d)

        bound_controller.refresh()

        assert order == ["state", "value"]

    def test_unknown_control_id(self, bound_controller):
        assert bound_controller.apply(0xDEAD, 1) is False

    def test_refresh_while_unbound(self, webcam_opener):
        assert ControlsController(webcam_opener).refresh() == []


class TestResetAndListeners:
    """Reset-all and change notification."""

    def test_reset_all_defaults_only_touches_ranges(self, bound_controller, webcam_source):
        bound_controller.apply(BRIGHTNESS_ID, 40)
        webcam_source.writes.clear()

        changed = bound_controller.reset_all_defaults()

        written = dict(webcam_source.writes)
        assert written[BRIGHTNESS_ID] == 0
        assert WHITE_BALANCE_AUTO_ID not in written
        assert AUTO_EXPOSURE_ID not in written
        assert FOCUS_TRIGGER_ID not in written
        assert [row.control_id for row in changed] == [BRIGHTNESS_ID]

    def test_reset_all_defaults_skips_read_only(self, webcam_source, webcam_opener):
        webcam_source.set_flags(BRIGHTNESS_ID, ControlFlags.READ_ONLY)
        controller = ControlsController(webcam_opener)
        controller.switch_device("/dev/video0")

        controller.reset_all_defaults()

        assert BRIGHTNESS_ID not in dict(webcam_source.writes)

    def test_listeners_receive_changed_rows(self, bound_controller, webcam_source):
        received = []
        bound_controller.add_listener(received.append)
        webcam_source.on_write = link_auto_exposure

        bound_controller.apply(WHITE_BALANCE_AUTO_ID, False)

        changed_ids = {row.control_id for batch in received for row in batch}
        assert WHITE_BALANCE_AUTO_ID in changed_ids
        assert WHITE_BALANCE_TEMP_ID in changed_ids

    def test_failing_listener_does_not_break_apply(self, bound_controller):
        def broken(rows):
            raise RuntimeError("boom")

        received = []
        bound_controller.add_listener(broken)
        bound_controller.add_listener(received.append)

        bound_controller.apply(BRIGHTNESS_ID, 5)

        assert received

    def test_remove_listener(self, bound_controller):
        received = []
        bound_controller.add_listener(received.append)
        bound_controller.remove_listener(received.append)

        bound_controller.apply(BRIGHTNESS_ID, 5)

        assert received == []

    def test_registry_holds_bindings_by_id(self, bound_controller):
        binding = bound_controller.registry.get(WHITE_BALANCE_AUTO_ID)

        assert isinstance(binding, SwitchBinding)
        assert WHITE_BALANCE_AUTO_ID in bound_controller.registry
