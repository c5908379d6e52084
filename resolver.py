"""Tag resolution: logical action path -> prompt entries for the active device"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from core.catalog import BindingCatalog, DevicePromptRegistry, action_key, is_usage_binding, usage_from_binding_path
from core.state import DeviceDataset, DevicePromptEntry, DeviceSpriteEntry
from core.tracker import ActiveDeviceTracker

LOG = logging.getLogger("promptbridge.resolver")


class ResolveError(Exception):
    """A tag could not be resolved. str(err) is the text shown in its place."""


class NotInitialized(ResolveError):
    def __init__(self):
        super().__init__("NOT_INITIALIZED")


class NoActiveDevice(ResolveError):
    def __init__(self):
        super().__init__("NO_ACTIVE_DEVICE")


class UnregisteredDevice(ResolveError):
    def __init__(self, device_name: str):
        self.device_name = device_name
        super().__init__(f"MISSING_DEVICE_ENTRIES '{device_name}'")


class UnknownAction(ResolveError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"MISSING_ACTION {key}")


class NoPromptEntriesResolved(ResolveError):
    def __init__(self, action_path: str):
        self.action_path = action_path
        super().__init__(f"MISSING_PROMPT '{action_path}'")


@dataclass(frozen=True)
class Resolution:
    dataset: DeviceDataset
    entries: Tuple[DevicePromptEntry, ...]
    # binding paths that had no prompt entry on the dataset
    missing: Tuple[str, ...] = ()


class TagResolver:
    """Reads the catalogs and the tracker on every call; nothing is cached."""

    def __init__(
        self,
        catalog: BindingCatalog,
        registry: DevicePromptRegistry,
        tracker: ActiveDeviceTracker,
        platform_override: Optional[DeviceDataset] = None,
    ):
        self.catalog = catalog
        self.registry = registry
        self.tracker = tracker
        self.platform_override = platform_override

    def active_dataset(self) -> DeviceDataset:
        if self.platform_override is not None:
            return self.platform_override
        device = self.tracker.current_device
        if device is None:
            raise NoActiveDevice()
        dataset = self.registry.lookup(device.name)
        if dataset is None:
            raise UnregisteredDevice(device.name)
        return dataset

    def resolve(self, action_path: str) -> Resolution:
        """Resolve 'Group/Action' to the active device's prompt entries.

        Entries keep binding catalog order, so composite parts (up, down,
        left, right) come out in authored order. Usage wildcards such as
        '*/{Submit}' are skipped without a diagnostic.
        """
        try:
            dataset = self.active_dataset()
        except ResolveError as e:
            LOG.warning("cannot resolve %r: %s", action_path, e)
            raise

        key = action_key(action_path)
        descriptors = self.catalog.lookup(key)
        if descriptors is None:
            LOG.warning("action binding map does not contain key %r", key)
            raise UnknownAction(key)

        entries = []
        missing = []
        for descriptor in descriptors:
            if is_usage_binding(descriptor.binding_path):
                LOG.debug(
                    "skipping usage binding %r (usage %r) for %r",
                    descriptor.binding_path,
                    usage_from_binding_path(descriptor.binding_path),
                    key,
                )
                continue
            prompt = dataset.find_prompt(descriptor.binding_path)
            if prompt is not None:
                entries.append(prompt)
                continue
            missing.append(descriptor.binding_path)
            # composite parents ("2DVector") rarely carry a glyph of their own
            log = LOG.debug if descriptor.is_composite else LOG.warning
            log("missing prompt for binding path %r on dataset %r", descriptor.binding_path, dataset.name)

        if not entries:
            LOG.warning("no prompt entries found for %r on dataset %r", action_path, dataset.name)
            raise NoPromptEntriesResolved(action_path)
        return Resolution(dataset=dataset, entries=tuple(entries), missing=tuple(missing))

    def resolve_single(self, action_path: str) -> Optional[DevicePromptEntry]:
        """First resolved entry only; composite display is not supported here."""
        try:
            return self.resolve(action_path).entries[0]
        except ResolveError:
            return None

    def device_sprite(self, name: str) -> Optional[DeviceSpriteEntry]:
        try:
            dataset = self.active_dataset()
        except ResolveError as e:
            LOG.debug("no device sprite %r: %s", name, e)
            return None
        return dataset.find_sprite(name)
