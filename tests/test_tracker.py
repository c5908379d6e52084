from core.state import DeviceChange, DeviceType, InputDevice
from core.tracker import ActiveDeviceTracker, TrackerState, select_default

from conftest import KEYS, MOUSE, PAD

PRIORITY = [DeviceType.GAMEPAD, DeviceType.KEYBOARD, DeviceType.MOUSE]


def make_tracker(devices, priority=PRIORITY):
    connected = list(devices)
    tracker = ActiveDeviceTracker(priority, lambda: connected)
    seen = []
    tracker.subscribe(seen.append)
    return tracker, connected, seen


def test_init_picks_first_priority_category():
    tracker, _, seen = make_tracker([KEYS, MOUSE, PAD])
    assert tracker.state is TrackerState.UNINITIALIZED
    tracker.init()
    assert tracker.current_device == PAD
    assert tracker.state is TrackerState.ACTIVE
    assert seen == []


def test_init_skips_empty_categories_and_keeps_enumeration_order():
    second_keys = InputDevice("Keyboard", DeviceType.KEYBOARD, 7)
    tracker, _, _ = make_tracker([MOUSE, KEYS, second_keys])
    tracker.init()
    assert tracker.current_device == KEYS


def test_init_without_match_is_not_an_error():
    tracker, _, _ = make_tracker([MOUSE], priority=[DeviceType.TOUCHSCREEN])
    tracker.init()
    assert tracker.current_device is None
    assert tracker.state is TrackerState.NO_ACTIVE_DEVICE


def test_button_press_switches_once():
    tracker, _, seen = make_tracker([KEYS, PAD])
    tracker.init()
    tracker.on_button_pressed(KEYS)
    tracker.on_button_pressed(KEYS)
    assert tracker.current_device == KEYS
    assert seen == [KEYS]


def test_press_on_active_device_is_noop():
    tracker, _, seen = make_tracker([PAD])
    tracker.init()
    tracker.on_button_pressed(PAD)
    assert seen == []


def test_disconnect_of_active_device_falls_back():
    tracker, connected, seen = make_tracker([KEYS, PAD])
    tracker.init()
    tracker.on_device_change(PAD, DeviceChange.DISCONNECTED)
    assert tracker.current_device == KEYS
    assert seen == [KEYS]


def test_disconnect_excludes_leaving_device_even_if_still_listed():
    tracker, connected, seen = make_tracker([PAD])
    tracker.init()
    tracker.on_device_change(PAD, DeviceChange.REMOVED)
    assert tracker.current_device is None
    assert tracker.state is TrackerState.NO_ACTIVE_DEVICE
    assert seen == [None]


def test_other_changes_are_ignored():
    tracker, connected, seen = make_tracker([KEYS, PAD])
    tracker.init()
    tracker.on_device_change(KEYS, DeviceChange.REMOVED)
    tracker.on_device_change(PAD, DeviceChange.ADDED)
    tracker.on_device_change(PAD, DeviceChange.CONNECTED)
    assert tracker.current_device == PAD
    assert seen == []


def test_failing_observer_does_not_block_others():
    tracker, _, seen = make_tracker([PAD])

    def boom(device):
        raise RuntimeError("observer bug")

    tracker.subscribe(boom)
    later = []
    tracker.subscribe(later.append)
    tracker.init()
    tracker.on_button_pressed(KEYS)
    assert seen == [KEYS]
    assert later == [KEYS]


def test_unsubscribe():
    tracker, _, seen = make_tracker([PAD])
    tracker.unsubscribe(seen.append)
    tracker.init()
    tracker.on_button_pressed(KEYS)
    assert seen == []


def test_select_default_helper():
    assert select_default([DeviceType.MOUSE], [KEYS, MOUSE]) == MOUSE
    assert select_default([], [KEYS]) is None
