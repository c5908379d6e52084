"""Prompt settings: YAML loading for datasets, delimiters and templates"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import yaml

from core.state import DeviceDataset, DevicePromptEntry, DeviceSpriteEntry, DeviceType

LOG = logging.getLogger("promptbridge.settings")

SPRITE_PLACEHOLDER = "{SPRITE}"
SHEET_PLACEHOLDER = "{SHEET}"
DEFAULT_OPEN_TAG = "["
DEFAULT_CLOSE_TAG = "]"
DEFAULT_PRIORITY = (DeviceType.GAMEPAD, DeviceType.KEYBOARD, DeviceType.MOUSE)


class SettingsError(ValueError):
    """Raised when a settings or action file is structurally unusable."""


def _read_yaml(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"{path}: {e}") from e


def load_action_source(path: str) -> dict:
    """Load one action-definition document (.inputactions JSON or YAML)."""
    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise SettingsError(f"action source {path} is not a mapping")
    maps = data.get("maps", [])
    if not isinstance(maps, list):
        raise SettingsError(f"action source {path}: 'maps' must be a list")
    for action_map in maps:
        if not isinstance(action_map, dict):
            raise SettingsError(f"action source {path}: action map {action_map!r} is not a mapping")
        bindings = action_map.get("bindings", [])
        if not isinstance(bindings, list) or not all(isinstance(b, dict) for b in bindings):
            raise SettingsError(
                f"action source {path}: 'bindings' of map {action_map.get('name')!r} must be a list of mappings"
            )
    return data


def dataset_from_dict(data: dict) -> DeviceDataset:
    if not isinstance(data, dict):
        raise SettingsError(f"device dataset must be a mapping, got {type(data).__name__}")
    name = data.get("name")
    sheet = data.get("sprite_sheet")
    if not name or not sheet:
        raise SettingsError(f"device dataset needs 'name' and 'sprite_sheet': {data}")
    device_names = data.get("device_names") or []
    if isinstance(device_names, str):
        device_names = [device_names]
    elif not isinstance(device_names, list):
        raise SettingsError(f"device dataset {name!r}: 'device_names' must be a list")
    try:
        prompts = tuple(
            DevicePromptEntry(binding_path=str(p["binding_path"]), glyph_id=str(p["glyph"]))
            for p in data.get("binding_prompts") or []
        )
        sprites = tuple(
            DeviceSpriteEntry(name=str(s["name"]), glyph_id=str(s["glyph"])) for s in data.get("sprites") or []
        )
    except (KeyError, TypeError) as e:
        raise SettingsError(f"device dataset {name!r}: malformed entry ({e})") from e
    return DeviceDataset(
        name=str(name),
        device_names=tuple(str(n) for n in device_names),
        sprite_sheet_id=str(sheet),
        binding_prompt_entries=prompts,
        sprite_entries=sprites,
    )


def _section(data: dict, key: str, kind: type):
    value = data.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise SettingsError(f"'{key}' must be a {'mapping' if kind is dict else kind.__name__}, got {type(value).__name__}")
    return value


def _parse_priority(values) -> List[DeviceType]:
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, list):
        raise SettingsError(f"'default_device_priority' must be a list, got {type(values).__name__}")
    priority = []
    for value in values:
        try:
            priority.append(DeviceType.parse(value))
        except ValueError:
            LOG.warning("ignoring unknown device type %r in default_device_priority", value)
    return priority


@dataclass
class PromptSettings:
    device_datasets: List[DeviceDataset] = field(default_factory=list)
    action_sources: List[dict] = field(default_factory=list)
    default_device_priority: List[DeviceType] = field(default_factory=lambda: list(DEFAULT_PRIORITY))
    open_tag: str = DEFAULT_OPEN_TAG
    close_tag: str = DEFAULT_CLOSE_TAG
    prompt_template: str = SPRITE_PLACEHOLDER
    rich_text_tags: str = ""
    platform_overrides: Dict[str, DeviceDataset] = field(default_factory=dict)

    def platform_override(self, platform_name: Optional[str]) -> Optional[DeviceDataset]:
        if not platform_name:
            return None
        wanted = platform_name.lower()
        for key, dataset in self.platform_overrides.items():
            if key.lower() == wanted:
                return dataset
        return None

    @classmethod
    def load(cls, path: str) -> "PromptSettings":
        data = _read_yaml(path)
        return cls.from_dict(data, base_dir=os.path.dirname(os.path.abspath(path)))

    @classmethod
    def from_dict(cls, data, base_dir: Optional[str] = None) -> "PromptSettings":
        if not isinstance(data, dict):
            raise SettingsError("settings document must be a mapping")

        datasets = [dataset_from_dict(d) for d in _section(data, "device_datasets", list)]
        by_name = {d.name: d for d in datasets}

        sources = []
        for ref in _section(data, "action_sources", list):
            if isinstance(ref, dict):
                sources.append(ref)
                continue
            if not isinstance(ref, str):
                raise SettingsError(f"action source entry must be a path or a mapping, got {ref!r}")
            path = ref if base_dir is None or os.path.isabs(ref) else os.path.join(base_dir, ref)
            sources.append(load_action_source(path))

        overrides = {}
        for platform_name, dataset_name in _section(data, "platform_overrides", dict).items():
            if not isinstance(dataset_name, str):
                raise SettingsError(f"platform override {platform_name!r} must name a dataset, got {dataset_name!r}")
            dataset = by_name.get(dataset_name)
            if dataset is None:
                LOG.warning("platform override %r names unknown dataset %r", platform_name, dataset_name)
                continue
            overrides[str(platform_name)] = dataset

        settings = cls(
            device_datasets=datasets,
            action_sources=sources,
            platform_overrides=overrides,
            rich_text_tags=str(data.get("rich_text_tags") or ""),
        )
        if "default_device_priority" in data:
            settings.default_device_priority = _parse_priority(data.get("default_device_priority") or [])
        if "prompt_template" in data:
            settings.prompt_template = str(data.get("prompt_template") or "")
        for attr, default in (("open_tag", DEFAULT_OPEN_TAG), ("close_tag", DEFAULT_CLOSE_TAG)):
            value = data.get(attr, default)
            if not value:
                LOG.warning("%s must not be empty; using %r", attr, default)
                value = default
            setattr(settings, attr, str(value))
        return settings
