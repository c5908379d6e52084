"""In-memory device signal source

Useful for headless hosts, replays and tests: devices are connected,
disconnected and pressed by calling methods instead of reading hardware.
"""
import logging

from core.reader import DeviceSignalSource
from core.state import DeviceChange

LOG = logging.getLogger("promptbridge.virtual")


class VirtualDeviceSource(DeviceSignalSource):
    def __init__(self, devices=()):
        super().__init__()
        self._devices = list(devices)

    def start(self):
        LOG.info("virtual device source started with %d devices", len(self._devices))

    def stop(self):
        self._devices.clear()

    def connected_devices(self):
        return list(self._devices)

    def connect(self, device, change=DeviceChange.ADDED):
        if device not in self._devices:
            self._devices.append(device)
        self._emit_change(device, change)

    def disconnect(self, device, change=DeviceChange.REMOVED):
        if device in self._devices:
            self._devices.remove(device)
        self._emit_change(device, change)

    def press(self, device):
        self._emit_button(device)
