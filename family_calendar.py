#!/usr/bin/env python3
"""
Family Calendar - A PySide6 desktop calendar with interchangeable calendar styles.

This is the main entry point for the application.
"""

import sys
import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from backend.config import Config, EXAMPLE_CONFIG
from backend.timezone_utils import set_timezone
from gui.main_window import MainWindow


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Family Calendar - A desktop calendar with many calendar styles"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    parser.add_argument(
        "--ics",
        type=Path,
        nargs="+",
        default=[],
        metavar="FILE",
        help="Additional iCalendar files to show"
    )
    return parser.parse_args(argv)


def main():
    """Main entry point."""
    args = parse_args()

    # Load configuration
    try:
        config = Config.load(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("\nPlease create a configuration file, for example at:")
        print(f"  - {Config.get_default_config_path()}")
        print("\nExample configuration:")
        print(EXAMPLE_CONFIG)
        sys.exit(1)
    except ValueError as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    set_timezone(config.timezone)

    if args.debug:
        print(f"Loaded configuration from: {args.config or Config.get_default_config_path()}")
        print(f"  Timezone: {config.timezone}")
        print(f"  State file: {config.state_file}")
        print(f"  ICS files: {len(config.events.ics_files) + len(args.ics)}")

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName("Family Calendar")
    app.setApplicationVersion("0.1")

    # Set application style
    app.setStyle("Fusion")

    # Create and show main window
    window = MainWindow(config, extra_ics_files=args.ics)
    window.show()

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
