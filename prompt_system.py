"""Prompt system: wires catalogs, device tracking, resolution and text rewriting

One `PromptSystem` per host. Re-initialization rebuilds everything and is not
safe to run while another thread is resolving or formatting text.
"""
import logging
import platform
from typing import Iterable, List, Optional

from core.catalog import BindingCatalog, DevicePromptRegistry
from core.reader import DeviceSignalSource
from core.settings import SPRITE_PLACEHOLDER, PromptSettings
from core.state import DeviceDataset, InputDevice
from core.tracker import ActiveDeviceTracker
from resolver import NotInitialized, Resolution, TagResolver
from rewriter import TextRewriter

LOG = logging.getLogger("promptbridge.system")

NOT_READY_TEXT = "Waiting for initialization..."


class PromptSystem:
    def __init__(
        self,
        settings: Optional[PromptSettings],
        device_source: DeviceSignalSource,
        platform_name: Optional[str] = None,
    ):
        self.settings = settings
        self.device_source = device_source
        self.platform_name = platform_name if platform_name is not None else platform.system()
        self._subs = []
        self._tracker: Optional[ActiveDeviceTracker] = None
        self._resolver: Optional[TagResolver] = None
        self._rewriter: Optional[TextRewriter] = None

    @property
    def initialized(self) -> bool:
        return self._rewriter is not None

    @property
    def active_device(self) -> Optional[InputDevice]:
        return self._tracker.current_device if self._tracker else None

    @property
    def platform_override(self) -> Optional[DeviceDataset]:
        return self._resolver.platform_override if self._resolver else None

    @property
    def resolver(self) -> Optional[TagResolver]:
        return self._resolver

    def initialize(self, action_sources: Iterable[dict] = ()) -> bool:
        """(Re)build all tables from settings plus `action_sources`.

        Returns False, leaving text in the not-ready state, when settings are
        missing.
        """
        self._teardown()

        settings = self.settings
        if settings is None:
            LOG.warning("prompt settings missing; prompts disabled")
            return False
        LOG.info("initializing prompt system (platform %s)", self.platform_name)

        if settings.prompt_template and SPRITE_PLACEHOLDER not in settings.prompt_template:
            LOG.error("prompt_template must include %s or no glyphs will be shown", SPRITE_PLACEHOLDER)

        sources: List[dict] = list(action_sources) + list(settings.action_sources)
        LOG.info("loaded %d action sources", len(sources))
        catalog = BindingCatalog.build(sources)
        registry = DevicePromptRegistry.build(settings.device_datasets)
        LOG.info("prompts ready: actions=%s devices=%s", catalog.actions(), registry.device_names())

        tracker = ActiveDeviceTracker(settings.default_device_priority, self.device_source.connected_devices)
        tracker.subscribe(self._on_active_device_changed)
        self.device_source.subscribe_button(tracker.on_button_pressed)
        self.device_source.subscribe_device_change(tracker.on_device_change)
        tracker.init()

        override = settings.platform_override(self.platform_name)
        if override is not None:
            LOG.info("platform %s forces device dataset %r", self.platform_name, override.name)

        self._tracker = tracker
        self._resolver = TagResolver(catalog, registry, tracker, platform_override=override)
        self._rewriter = TextRewriter(
            self._resolver,
            open_tag=settings.open_tag,
            close_tag=settings.close_tag,
            template=settings.prompt_template,
            rich_text_tags=settings.rich_text_tags,
        )
        return True

    def shutdown(self):
        self._teardown()

    def _teardown(self):
        if self._tracker is not None:
            self.device_source.unsubscribe(self._tracker.on_button_pressed)
            self.device_source.unsubscribe(self._tracker.on_device_change)
            self._tracker.unsubscribe(self._on_active_device_changed)
        self._tracker = None
        self._resolver = None
        self._rewriter = None

    def format(self, text: str) -> str:
        if self._rewriter is None:
            return NOT_READY_TEXT
        return self._rewriter.format(text)

    def resolve(self, action_path: str) -> Resolution:
        if self._resolver is None:
            raise NotInitialized()
        return self._resolver.resolve(action_path)

    def resolve_single_glyph(self, action_path: str) -> Optional[str]:
        if self._resolver is None:
            return None
        entry = self._resolver.resolve_single(action_path)
        return entry.glyph_id if entry else None

    def lookup_named_glyph(self, name: str) -> Optional[str]:
        if self._resolver is None:
            return None
        entry = self._resolver.device_sprite(name)
        return entry.glyph_id if entry else None

    def subscribe(self, callback):
        """callback(device) whenever the active device changes."""
        self._subs.append(callback)

    def unsubscribe(self, callback):
        if callback in self._subs:
            self._subs.remove(callback)

    def _on_active_device_changed(self, device):
        LOG.info("active device changed: %s", device.name if device else None)
        for cb in list(self._subs):
            try:
                cb(device)
            except Exception:
                LOG.exception("active device subscriber failed")
