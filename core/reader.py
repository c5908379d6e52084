"""Base device signal source abstraction

A source reports two kinds of signal: a button was pressed on some device,
and a device's connectivity changed. Callbacks run synchronously on the
thread that delivers the signal.
"""
import abc
import logging

LOG = logging.getLogger("promptbridge.reader")


class DeviceSignalSource(abc.ABC):
    def __init__(self):
        self._button_subs = []
        self._change_subs = []

    @abc.abstractmethod
    def start(self):
        raise NotImplementedError

    @abc.abstractmethod
    def stop(self):
        raise NotImplementedError

    @abc.abstractmethod
    def connected_devices(self):
        """Return currently connected devices in enumeration order."""
        raise NotImplementedError

    def subscribe_button(self, callback):
        """callback(device) on any button press."""
        self._button_subs.append(callback)

    def subscribe_device_change(self, callback):
        """callback(device, change) on connectivity changes."""
        self._change_subs.append(callback)

    def unsubscribe(self, callback):
        for subs in (self._button_subs, self._change_subs):
            while callback in subs:
                subs.remove(callback)

    def _emit_button(self, device):
        LOG.debug("button pressed on %s", device)
        for cb in list(self._button_subs):
            try:
                cb(device)
            except Exception:
                LOG.exception("button subscriber callback failed")

    def _emit_change(self, device, change):
        LOG.debug("device %s -> %s", device, change.value)
        for cb in list(self._change_subs):
            try:
                cb(device, change)
            except Exception:
                LOG.exception("device change subscriber callback failed")
