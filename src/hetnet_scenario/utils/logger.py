import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any
import json
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

from .helpers import generate_timestamp

LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
ROTATIONS = ('size', 'time')


class SimulationLogger:
    """Scenario logging class

    Records scenario setup steps, attachment decisions and engine events.
    """

    def __init__(self, name: str,
                 log_dir: str = 'logs',
                 level: str = 'INFO',
                 console_output: bool = True,
                 file_output: bool = False,
                 rotation: str = 'size',
                 max_bytes: int = 10*1024*1024,  # 10MB
                 backup_count: int = 5):
        """
        Parameters
        ----------
        name : str
            Logger name
        log_dir : str
            Directory for log files; only created when file_output is set
        level : str
            Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        console_output : bool
            Write to stdout
        file_output : bool
            Write to a log file in log_dir
        rotation : str
            Log file rotation scheme ('size' or 'time')
        max_bytes : int
            Maximum log file size in bytes
        backup_count : int
            Number of rotated files to keep
        """
        self.name = name
        self.log_dir = Path(log_dir)

        if str(level).upper() not in LEVELS:
            raise ValueError(f"Unknown logging level: {level}")
        if rotation not in ROTATIONS:
            raise ValueError(f"Unknown log rotation: {rotation}")

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        # one scenario per logger name; drop handlers left by an earlier run
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if file_output:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.log_dir / f"{name}_{generate_timestamp()}.log"

            if rotation == 'size':
                file_handler = RotatingFileHandler(
                    log_file,
                    maxBytes=max_bytes,
                    backupCount=backup_count
                )
            else:
                file_handler = TimedRotatingFileHandler(
                    log_file,
                    when='midnight',
                    interval=1,
                    backupCount=backup_count
                )

            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def from_config(cls, name: str, config) -> 'SimulationLogger':
        """Build a logger from a LoggingConfig"""
        return cls(name,
                   log_dir=config.directory,
                   level=config.level,
                   console_output=config.console,
                   file_output=config.file,
                   rotation=config.rotation)

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def critical(self, message: str):
        self.logger.critical(message)

    def log_event(self, event_type: str, details: Dict[str, Any]):
        """Record a structured event

        Parameters
        ----------
        event_type : str
            Event type
        details : dict
            Event details, must be JSON serialisable
        """
        self.logger.info(f"Event: {event_type} - {json.dumps(details)}")

    def log_deployment(self, cells: list, terminals: list):
        """Dump node positions at DEBUG level

        Parameters
        ----------
        cells : list
            Cell nodes (anchor first)
        terminals : list
            Terminal nodes
        """
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        state = {
            'cells': [{
                'id': cell.i,
                'kind': cell.kind,
                'position': cell.xyz.tolist(),
            } for cell in cells],
            'terminals': [{
                'id': terminal.i,
                'position': terminal.xyz.tolist(),
            } for terminal in terminals]
        }
        self.logger.debug(f"Deployment: {json.dumps(state)}")

    def close(self):
        """Detach and close all handlers"""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

    def get_logger(self) -> logging.Logger:
        return self.logger
