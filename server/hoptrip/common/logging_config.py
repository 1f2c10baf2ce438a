"""
Logging Configuration for Flask App
====================================

Configure logging to both console and file with rotation.
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(app):
    """
    Setup logging for Flask application.

    Logs will be written to:
    - Console (stderr) - warnings and above
    - File (<LOG_DIR>/app.log) - for persistence

    File rotation:
    - Max size: 10MB per file
    - Backup count: 5 files
    """
    log_dir = Path(app.config.get("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    log_level = logging.DEBUG if app.debug else logging.INFO
    log_level_console = logging.WARNING

    detailed_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        '%(levelname)s - %(message)s'
    )

    # delay=True defers opening the file until the first write
    file_handler = RotatingFileHandler(
        log_dir / 'app.log',
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8',
        delay=True
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(detailed_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level_console)
    console_handler.setFormatter(simple_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Drop handlers from a previous setup_logging call (several apps per process in tests)
    for handler in list(root_logger.handlers):
        if getattr(handler, "_hoptrip_handler", False):
            root_logger.removeHandler(handler)
            handler.close()
    file_handler._hoptrip_handler = True
    console_handler._hoptrip_handler = True

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Flask app logger reuses the root handlers
    app.logger.setLevel(log_level)
    app.logger.propagate = True

    app.logger.info("=" * 60)
    app.logger.info(f"HopTrip API started - Logging to {log_dir / 'app.log'}")
    app.logger.info(f"Log level: {logging.getLevelName(log_level)}")
    app.logger.info("=" * 60)

    return app
