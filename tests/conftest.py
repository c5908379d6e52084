import pytest

from core.settings import PromptSettings
from core.state import DeviceDataset, DevicePromptEntry, DeviceSpriteEntry, DeviceType, InputDevice
from devices.virtual import VirtualDeviceSource
from prompt_system import PromptSystem

PAD = InputDevice("Xbox Controller", DeviceType.GAMEPAD, 1)
KEYS = InputDevice("Keyboard", DeviceType.KEYBOARD)
MOUSE = InputDevice("Mouse", DeviceType.MOUSE)


def binding(action, path, composite=False, part=False):
    return {"action": action, "path": path, "isComposite": composite, "isPartOfComposite": part}


@pytest.fixture
def action_source():
    return {
        "name": "PlayerControls",
        "maps": [
            {
                "name": "Player",
                "bindings": [
                    binding("Jump", "<Gamepad>/buttonSouth"),
                    binding("Jump", "<Keyboard>/space"),
                    binding("Move", "2DVector", composite=True),
                    binding("Move", "<Keyboard>/w", part=True),
                    binding("Move", "<Keyboard>/s", part=True),
                    binding("Move", "<Keyboard>/a", part=True),
                    binding("Move", "<Keyboard>/d", part=True),
                    binding("Submit", "*/{Submit}"),
                    binding("Submit", "<Gamepad>/start"),
                    binding("Cancel", "*/{Cancel}"),
                ],
            }
        ],
    }


@pytest.fixture
def xbox_dataset():
    return DeviceDataset(
        name="xbox",
        device_names=("Xbox Controller",),
        sprite_sheet_id="xbox_sheet",
        binding_prompt_entries=(
            DevicePromptEntry("<Gamepad>/buttonSouth", "G1"),
            DevicePromptEntry("<Gamepad>/start", "G_START"),
        ),
        sprite_entries=(DeviceSpriteEntry("Logo", "xbox_logo"),),
    )


@pytest.fixture
def keyboard_dataset():
    return DeviceDataset(
        name="keyboard",
        device_names=("Keyboard", "Mouse"),
        sprite_sheet_id="kb_sheet",
        binding_prompt_entries=(
            DevicePromptEntry("<Keyboard>/space", "K_SPACE"),
            DevicePromptEntry("<Keyboard>/w", "K_W"),
            DevicePromptEntry("<Keyboard>/s", "K_S"),
            DevicePromptEntry("<Keyboard>/a", "K_A"),
            DevicePromptEntry("<Keyboard>/d", "K_D"),
        ),
        sprite_entries=(DeviceSpriteEntry("Logo", "kb_logo"),),
    )


@pytest.fixture
def settings(action_source, xbox_dataset, keyboard_dataset):
    return PromptSettings(
        device_datasets=[xbox_dataset, keyboard_dataset],
        action_sources=[action_source],
        prompt_template="<g:{SPRITE}>",
    )


@pytest.fixture
def source():
    return VirtualDeviceSource([KEYS, MOUSE, PAD])


@pytest.fixture
def system(settings, source):
    ps = PromptSystem(settings, source, platform_name="Linux")
    assert ps.initialize()
    return ps
