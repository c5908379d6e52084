"""Device signal source backed by pygame events

The host keeps its own event loop and forwards every event through
`PygameDeviceSource.handle_event`. Joysticks report as GamePad devices named
after `Joystick.get_name()`; keyboard and mouse are always connected.
"""
import logging

import pygame

from core.reader import DeviceSignalSource
from core.state import DeviceChange, DeviceType, InputDevice

LOG = logging.getLogger("promptbridge.pygame")

KEYBOARD = InputDevice("Keyboard", DeviceType.KEYBOARD)
MOUSE = InputDevice("Mouse", DeviceType.MOUSE)
TOUCHSCREEN = InputDevice("Touchscreen", DeviceType.TOUCHSCREEN)


class PygameDeviceSource(DeviceSignalSource):
    def __init__(self, joystick_factory=None, include_keyboard=True, include_mouse=True):
        super().__init__()
        self._joystick_factory = joystick_factory or pygame.joystick.Joystick
        self._include_keyboard = include_keyboard
        self._include_mouse = include_mouse
        self._joysticks = {}  # instance_id -> InputDevice, in attach order
        self._handles = {}  # instance_id -> pygame Joystick, kept alive while attached
        self._touch_seen = False

    def start(self):
        pygame.joystick.init()
        for index in range(pygame.joystick.get_count()):
            self._attach(index, notify=False)
        LOG.info("pygame device source started (%d joysticks)", len(self._joysticks))

    def stop(self):
        for js in self._handles.values():
            try:
                js.quit()
            except pygame.error:
                LOG.debug("joystick already released")
        self._handles.clear()
        self._joysticks.clear()

    def connected_devices(self):
        devices = []
        if self._include_keyboard:
            devices.append(KEYBOARD)
        if self._include_mouse:
            devices.append(MOUSE)
        if self._touch_seen:
            devices.append(TOUCHSCREEN)
        devices.extend(self._joysticks.values())
        return devices

    def handle_event(self, event):
        """Translate one pygame event into device signals. Unrelated events are ignored."""
        etype = event.type
        if etype == pygame.JOYDEVICEADDED:
            self._attach(event.device_index, notify=True)
        elif etype == pygame.JOYDEVICEREMOVED:
            device = self._joysticks.pop(event.instance_id, None)
            self._handles.pop(event.instance_id, None)
            if device is not None:
                LOG.info("joystick removed: %s (instance %d)", device.name, device.device_id)
                self._emit_change(device, DeviceChange.REMOVED)
        elif etype == pygame.JOYBUTTONDOWN:
            self._press_joystick(event.instance_id)
        elif etype == pygame.JOYHATMOTION:
            if tuple(event.value) != (0, 0):
                self._press_joystick(event.instance_id)
        elif etype == pygame.KEYDOWN:
            if self._include_keyboard:
                self._emit_button(KEYBOARD)
        elif etype == pygame.MOUSEBUTTONDOWN:
            # SDL synthesizes mouse clicks from touches; those belong to the touchscreen
            if self._include_mouse and not getattr(event, "touch", False):
                self._emit_button(MOUSE)
        elif etype == pygame.FINGERDOWN:
            if not self._touch_seen:
                self._touch_seen = True
                self._emit_change(TOUCHSCREEN, DeviceChange.ADDED)
            self._emit_button(TOUCHSCREEN)

    def _attach(self, device_index, notify):
        js = self._joystick_factory(device_index)
        js.init()
        instance_id = js.get_instance_id()
        if instance_id in self._joysticks:
            return
        device = InputDevice(js.get_name() or f"Joystick {instance_id}", DeviceType.GAMEPAD, instance_id)
        self._joysticks[instance_id] = device
        self._handles[instance_id] = js
        LOG.info("joystick attached: %s (instance %d, buttons=%d)", device.name, instance_id, js.get_numbuttons())
        if notify:
            self._emit_change(device, DeviceChange.ADDED)

    def _press_joystick(self, instance_id):
        device = self._joysticks.get(instance_id)
        if device is None:
            LOG.debug("input from unknown joystick instance %s", instance_id)
            return
        self._emit_button(device)
