"""Entry point for promptbridge

Formats tagged text with the glyph references of the active input device,
either once for a named device or live from pygame input with --watch.
"""
import argparse
import logging
import sys

from core.settings import PromptSettings, SettingsError, load_action_source
from core.state import DeviceType, InputDevice
from devices.virtual import VirtualDeviceSource
from prompt_system import PromptSystem

LOG = logging.getLogger("promptbridge")


def build_parser():
    parser = argparse.ArgumentParser(description="promptbridge: [Action/Tags] → device glyph references")
    parser.add_argument("text", help="text containing action tags, e.g. 'Press [Player/Jump]'")
    parser.add_argument("--settings", required=True, help="YAML prompt settings")
    parser.add_argument("--actions", nargs="*", default=[], help="extra action definition files (.inputactions)")
    parser.add_argument("--device", help="device name to treat as connected and active (one-shot mode)")
    parser.add_argument("--device-type", default="GamePad",
                        choices=[t.value for t in DeviceType],
                        help="category of --device (default: GamePad)")
    parser.add_argument("--platform", default=None, help="platform name for overrides (default: this OS)")
    parser.add_argument("--watch", action="store_true", help="open a pygame window and follow live input")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: WARNING)")
    parser.add_argument("--log-format", default="%(levelname)s:%(name)s:%(message)s",
                        help="Logging format string (default: %(levelname)s:%(name)s:%(message)s)")
    parser.add_argument("--debug-modules", nargs="*", default=[],
                        help="Modules to set to DEBUG level (e.g. 'tracker', 'resolver', 'pygame')")
    return parser


def configure_logging(args):
    logging.basicConfig(level=getattr(logging, args.log_level), format=args.log_format)
    for module in args.debug_modules:
        logging.getLogger(f"promptbridge.{module}").setLevel(logging.DEBUG)


def run_once(system, text, device=None):
    source = system.device_source
    if device is not None:
        source.connect(device)
        source.press(device)
    print(system.format(text))


def run_watch(system, text, action_sources=()):
    import pygame

    pygame.init()
    pygame.display.set_caption("promptbridge")
    pygame.display.set_mode((360, 120))
    source = system.device_source
    source.start()
    system.initialize(action_sources)
    system.subscribe(lambda device: print(system.format(text), flush=True))
    print(system.format(text), flush=True)
    clock = pygame.time.Clock()
    try:
        LOG.info("watching input — close the window or press Ctrl+C to stop")
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break
                source.handle_event(event)
            clock.tick(30)
    except KeyboardInterrupt:
        LOG.info("shutdown requested")
    finally:
        system.shutdown()
        source.stop()
        pygame.quit()


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args)

    try:
        settings = PromptSettings.load(args.settings)
        extra_sources = [load_action_source(path) for path in args.actions]
    except (OSError, SettingsError) as e:
        LOG.error("cannot load settings: %s", e)
        return 2

    if args.watch:
        from devices.pygame_source import PygameDeviceSource

        system = PromptSystem(settings, PygameDeviceSource(), platform_name=args.platform)
        run_watch(system, args.text, extra_sources)
        return 0

    system = PromptSystem(settings, VirtualDeviceSource(), platform_name=args.platform)
    system.initialize(extra_sources)
    device = InputDevice(args.device, DeviceType.parse(args.device_type)) if args.device else None
    run_once(system, args.text, device)
    return 0


if __name__ == "__main__":
    sys.exit(main())
