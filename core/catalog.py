"""Binding catalog and device prompt registry

Both tables are built once per initialization and never mutated afterwards.
"""
import logging
from typing import Dict, Iterable, List, Optional

from core.state import BindingDescriptor, DeviceDataset

LOG = logging.getLogger("promptbridge.catalog")

USAGE_MARKER = "*/{"


def action_key(action_path: str) -> str:
    """Normalize a logical action path like 'Player/Jump' to its catalog key."""
    return action_path.lower()


def is_usage_binding(binding_path: str) -> bool:
    return USAGE_MARKER in binding_path


def usage_from_binding_path(binding_path: str) -> str:
    """Return the usage token of a wildcard path, e.g. '*/{Submit}' -> 'Submit'.

    Returns an empty string for non-usage paths and for usage paths missing
    their closing brace.
    """
    start = binding_path.find(USAGE_MARKER)
    if start < 0:
        return ""
    start += len(USAGE_MARKER)
    end = binding_path.find("}", start)
    if end < 0:
        return ""
    return binding_path[start:end]


class BindingCatalog:
    """Maps lowercase 'map/action' keys to the bindings that trigger them."""

    def __init__(self):
        self._bindings: Dict[str, List[BindingDescriptor]] = {}

    @classmethod
    def build(cls, action_sources: Iterable[dict]) -> "BindingCatalog":
        catalog = cls()
        for source in action_sources:
            if not isinstance(source, dict):
                LOG.warning("skipping action source that is not a mapping: %r", source)
                continue
            for action_map in source.get("maps") or []:
                if not isinstance(action_map, dict):
                    LOG.warning("skipping action map that is not a mapping: %r", action_map)
                    continue
                map_name = action_map.get("name", "")
                for binding in action_map.get("bindings") or []:
                    if not isinstance(binding, dict):
                        LOG.warning("skipping binding that is not a mapping in map %r: %r", map_name, binding)
                        continue
                    action = binding.get("action")
                    if not action:
                        LOG.debug("skipping binding without action in map %r: %s", map_name, binding)
                        continue
                    # effective path: a runtime override wins over the authored path
                    path = str(binding.get("overridePath") or binding.get("path") or "")
                    catalog.add(
                        f"{map_name}/{action}",
                        BindingDescriptor(
                            binding_path=path,
                            is_composite=bool(binding.get("isComposite", False)),
                            is_part_of_composite=bool(binding.get("isPartOfComposite", False)),
                        ),
                    )
        LOG.info("binding catalog built: %d actions", len(catalog))
        return catalog

    def add(self, action_path: str, descriptor: BindingDescriptor):
        self._bindings.setdefault(action_key(action_path), []).append(descriptor)

    def lookup(self, key: str) -> Optional[List[BindingDescriptor]]:
        """Exact lookup by lowercase key; None on miss."""
        return self._bindings.get(key)

    def actions(self) -> List[str]:
        return list(self._bindings)

    def __contains__(self, key) -> bool:
        return key in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


class DevicePromptRegistry:
    """Maps physical device names to their prompt dataset."""

    def __init__(self):
        self._datasets: Dict[str, DeviceDataset] = {}

    @classmethod
    def build(cls, datasets: Iterable[DeviceDataset]) -> "DevicePromptRegistry":
        registry = cls()
        for dataset in datasets:
            for device_name in dataset.device_names:
                registry.register(device_name, dataset)
        return registry

    def register(self, device_name: str, dataset: DeviceDataset) -> bool:
        existing = self._datasets.get(device_name)
        if existing is not None:
            LOG.warning(
                "duplicate device name %r in dataset %r (already registered by %r); check your entries",
                device_name,
                dataset.name,
                existing.name,
            )
            return False
        self._datasets[device_name] = dataset
        return True

    def lookup(self, device_name: str) -> Optional[DeviceDataset]:
        return self._datasets.get(device_name)

    def device_names(self) -> List[str]:
        return list(self._datasets)

    def __contains__(self, device_name) -> bool:
        return device_name in self._datasets

    def __len__(self) -> int:
        return len(self._datasets)
