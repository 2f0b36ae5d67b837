import argparse
import logging
import sys
from pathlib import Path

from .config import AppConfig, load_settings
from .placeholders import generate_placeholders

logger = logging.getLogger("winstreak_tracker")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="winstreak-tracker", description="Win streak overlay for streaming")
    parser.add_argument("--data-dir", type=Path, help="folder holding media/, category lists and streaks.json")
    parser.add_argument("--config-dir", type=Path, help="folder holding settings.json and the log file")
    parser.add_argument("--placeholders", action="store_true", help="create placeholder portraits for missing characters")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return parser.parse_args(argv)


def setup_logging(log_file, verbose=False):
    handlers = [logging.StreamHandler()]
    try:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as exc:
        print(f"Could not open log file {log_file}: {exc}", file=sys.stderr)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )


def main(argv=None):
    args = parse_args(argv)
    config = AppConfig.default(args.data_dir, args.config_dir)
    config.ensure_dirs()
    setup_logging(config.log_file, args.verbose)
    logger.info("Data folder: %s", config.data_dir)

    if args.placeholders:
        generate_placeholders(config.media_dir, config.icons_dir)

    from PyQt5.QtWidgets import QApplication

    from .app import SaveWorker, WinStreakApp
    from .startup import build_session

    settings = load_settings(config.settings_file)
    app = QApplication(sys.argv[:1])
    worker = SaveWorker(config.streaks_file)
    worker.start()
    session = build_session(config, settings, worker)
    win = WinStreakApp(session, config, settings, worker)
    win.show()
    try:
        return app.exec_()
    finally:
        worker.stop()


if __name__ == "__main__":
    sys.exit(main())
