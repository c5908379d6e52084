"""State models and lightweight DTOs"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class DeviceType(str, Enum):
    """Coarse device categories used to pick a default device."""

    GAMEPAD = "GamePad"
    KEYBOARD = "Keyboard"
    MOUSE = "Mouse"
    TOUCHSCREEN = "Touchscreen"

    @classmethod
    def parse(cls, value: str) -> "DeviceType":
        wanted = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f"unknown device type: {value!r}")


class DeviceChange(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class InputDevice:
    name: str  # key into the device prompt registry, e.g. "Xbox 360 Controller"
    device_type: DeviceType
    device_id: int = 0


@dataclass(frozen=True)
class BindingDescriptor:
    binding_path: str  # e.g. "<Gamepad>/buttonSouth" or "*/{Submit}"
    is_composite: bool = False
    is_part_of_composite: bool = False


@dataclass(frozen=True)
class DevicePromptEntry:
    binding_path: str
    glyph_id: str


@dataclass(frozen=True)
class DeviceSpriteEntry:
    name: str
    glyph_id: str


@dataclass(frozen=True)
class DeviceDataset:
    """Prompt configuration for one device family."""

    name: str
    device_names: Tuple[str, ...]
    sprite_sheet_id: str
    binding_prompt_entries: Tuple[DevicePromptEntry, ...] = ()
    sprite_entries: Tuple[DeviceSpriteEntry, ...] = ()

    def find_prompt(self, binding_path: str) -> Optional[DevicePromptEntry]:
        wanted = binding_path.lower()
        for entry in self.binding_prompt_entries:
            if entry.binding_path.lower() == wanted:
                return entry
        return None

    def find_sprite(self, name: str) -> Optional[DeviceSpriteEntry]:
        wanted = name.lower()
        for entry in self.sprite_entries:
            if entry.name.lower() == wanted:
                return entry
        return None
