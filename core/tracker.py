"""Active device tracking: last input wins, with priority fallback"""
import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

from core.state import DeviceChange, DeviceType, InputDevice

LOG = logging.getLogger("promptbridge.tracker")

LEAVING_CHANGES = (DeviceChange.DISCONNECTED, DeviceChange.REMOVED)


class TrackerState(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    NO_ACTIVE_DEVICE = "no_active_device"


def select_default(priority: Sequence[DeviceType], devices: Sequence[InputDevice]) -> Optional[InputDevice]:
    """First device matching the first category that has any device."""
    for device_type in priority:
        for device in devices:
            if device.device_type == device_type:
                return device
    return None


class ActiveDeviceTracker:
    """Tracks which device the player is currently using.

    Observers are called synchronously, in registration order, with the new
    active device (or None when no device is left).
    """

    def __init__(self, priority: Sequence[DeviceType], list_devices: Callable[[], Sequence[InputDevice]]):
        self._priority = list(priority)
        self._list_devices = list_devices
        self._current: Optional[InputDevice] = None
        self._initialized = False
        self._subs: List[Callable[[Optional[InputDevice]], None]] = []

    @property
    def current_device(self) -> Optional[InputDevice]:
        return self._current

    @property
    def state(self) -> TrackerState:
        if not self._initialized:
            return TrackerState.UNINITIALIZED
        if self._current is None:
            return TrackerState.NO_ACTIVE_DEVICE
        return TrackerState.ACTIVE

    def subscribe(self, callback):
        self._subs.append(callback)

    def unsubscribe(self, callback):
        if callback in self._subs:
            self._subs.remove(callback)

    def init(self):
        """Pick the startup device from the priority list. Does not notify."""
        self._current = select_default(self._priority, list(self._list_devices()))
        self._initialized = True
        if self._current is None:
            LOG.info("no connected device matches priority %s", [t.value for t in self._priority])
        else:
            LOG.info("default device: %s (%s)", self._current.name, self._current.device_type.value)

    def on_button_pressed(self, device: InputDevice):
        if device == self._current:
            return
        LOG.debug("active device %s -> %s", self._current, device)
        self._current = device
        self._emit(device)

    def on_device_change(self, device: InputDevice, change: DeviceChange):
        if device != self._current or change not in LEAVING_CHANGES:
            return
        remaining = [d for d in self._list_devices() if d != device]
        self._current = select_default(self._priority, remaining)
        LOG.info("active device %s %s; fell back to %s", device.name, change.value, self._current)
        self._emit(self._current)

    def _emit(self, device):
        for cb in list(self._subs):
            try:
                cb(device)
            except Exception:
                LOG.exception("active device observer failed")
