"""
SoundBackgrounds - entry point.

Opens the window, starts audio capture, loads cartridges and runs the
frame loop until the window is closed or Escape is pressed.

    SB_ENV=development python soundbackgrounds.py --windowed --fps 30
"""

import crashguard  # Must come first
crashguard.checkpoint("Crashguard imported")

import argparse
import sys

try:
    from core.app import SoundBackgrounds
    crashguard.checkpoint("SoundBackgrounds imported successfully")
except Exception as e:
    crashguard.emergency_log(f"FATAL: Failed to import SoundBackgrounds: {e}")
    raise

import showlog


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Audio-reactive cartridge visualizer")
    parser.add_argument("--cartridges", default=None,
                        help="Package to load cartridges from (default: CARTRIDGE_PACKAGE)")
    parser.add_argument("--windowed", action="store_true",
                        help="Force windowed mode")
    parser.add_argument("--fps", type=int, default=None,
                        help="Target frame rate (default: FRAME_RATE)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Application entry point."""
    args = parse_args(argv)
    crashguard.checkpoint("Entering main()")

    app = SoundBackgrounds()
    try:
        app.initialize(frame_rate=args.fps, fullscreen=False if args.windowed else None)
        crashguard.checkpoint("app.initialize() complete")

        ids = app.load_cartridges(args.cartridges)
        if not ids:
            showlog.warn("[APP] No cartridges loaded; running an empty background")

        crashguard.checkpoint("Entering main event loop...")
        app.run()
    except KeyboardInterrupt:
        crashguard.checkpoint("Interrupted by user (KeyboardInterrupt)")
    except Exception as e:
        crashguard.emergency_log(f"Application error: {e}")
        showlog.error(f"[APP] Application error: {e}")
        return 1
    finally:
        crashguard.checkpoint("Entering cleanup...")
        app.destroy()
        showlog.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
