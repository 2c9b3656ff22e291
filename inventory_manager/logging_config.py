import logging
import logging.config
import os
import json_log_formatter

class CustomJSONFormatter(json_log_formatter.JSONFormatter):
    def json_record(self, message, extra, record):
        extra['message'] = message
        extra['timestamp'] = self.formatTime(record, self.datefmt)
        extra['level'] = record.levelname
        extra['logger'] = record.name
        if record.exc_info:
            extra['exc_info'] = self.formatException(record.exc_info)
        return extra

def setup_logging(app_log_file='logs/app.log', level='INFO', migration_log_file=None):
    log_dir = os.path.dirname(app_log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    formatter = CustomJSONFormatter()

    # Main application log handler
    app_handler = logging.FileHandler(app_log_file)
    app_handler.setFormatter(formatter)

    # force=True so a second call (tests, re-init) swaps the handler instead of stacking
    logging.basicConfig(
        level=level,
        handlers=[app_handler],
        force=True,
    )

    # Schema/migration events can be split into their own file
    if migration_log_file:
        migration_dir = os.path.dirname(migration_log_file)
        if migration_dir:
            os.makedirs(migration_dir, exist_ok=True)
        migration_handler = logging.FileHandler(migration_log_file)
        migration_handler.setFormatter(formatter)

        migration_logger = logging.getLogger("inventory_manager.db.migrations")
        migration_logger.setLevel(level)
        migration_logger.addHandler(migration_handler)
        migration_logger.propagate = False
