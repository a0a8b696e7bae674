"""
Configuration module for plateplus.
Handles loading and saving of user settings.
"""
import os
import json
import logging
from platformdirs import user_config_dir

from plateplus.core.data.formats import FORMAT_ALIASES
from plateplus.core.data.geometry import VALID_PLATE_SIZES
from plateplus.core.data.inference import DEFAULT_CANDIDATES


class Config:
    """Class to manage user configuration."""

    def __init__(self, config_dir=None):
        """Initialize configuration with default values."""
        config_dir = config_dir or user_config_dir("PlatePlus", "PlatePlus")
        os.makedirs(config_dir, exist_ok=True)
        self.config_file = os.path.join(config_dir, "plateplus_config.json")
        self.default_plate_size = 96
        self.default_position_format = "letter_number"
        self.recent_files = []
        self.max_recent_files = 5
        self.log_level = "INFO"  # Default log level
        # Extra conventional column names, tried after the built-in ones
        self.extra_position_columns = []
        self.extra_row_column_pairs = []
        self.extra_value_columns = []
        self._dirty = False  # Flag to indicate if configuration needs saving

    def to_dict(self):
        return {
            "default_plate_size": self.default_plate_size,
            "default_position_format": self.default_position_format,
            "recent_files": self.recent_files,
            "log_level": self.log_level,
            "extra_position_columns": self.extra_position_columns,
            "extra_row_column_pairs": [list(pair) for pair in self.extra_row_column_pairs],
            "extra_value_columns": self.extra_value_columns,
        }

    def save(self):
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)
        except IOError as e:
            logging.getLogger('plateplus').error(f"Error saving configuration to {self.config_file}: {e}")

    def load(self):
        """Load configuration from file."""
        if not os.path.exists(self.config_file):
            return False

        try:
            with open(self.config_file, 'r') as f:
                config_data = json.load(f)
        except (IOError, ValueError) as e:
            logging.getLogger('plateplus').error(f"Error loading configuration: {e}")
            return False

        plate_size = config_data.get("default_plate_size", 96)
        if plate_size in VALID_PLATE_SIZES and not isinstance(plate_size, bool):
            self.default_plate_size = plate_size
        else:
            self.default_plate_size = 96

        position_format = config_data.get("default_position_format", "letter_number")
        if isinstance(position_format, str) and position_format in FORMAT_ALIASES:
            self.default_position_format = position_format
        else:
            self.default_position_format = "letter_number"

        recent_files = config_data.get("recent_files", [])
        if isinstance(recent_files, list):
            self.recent_files = recent_files[:self.max_recent_files]
        else:
            self.recent_files = []

        log_level = config_data.get("log_level", "INFO")
        if isinstance(log_level, str):
            self.log_level = log_level
        else:
            self.log_level = "INFO"

        self.extra_position_columns = self._string_list(config_data.get("extra_position_columns", []))
        self.extra_value_columns = self._string_list(config_data.get("extra_value_columns", []))

        pairs = config_data.get("extra_row_column_pairs", [])
        if isinstance(pairs, list):
            self.extra_row_column_pairs = [
                tuple(pair) for pair in pairs
                if isinstance(pair, list) and len(pair) == 2 and all(isinstance(name, str) for name in pair)
            ]
        else:
            self.extra_row_column_pairs = []

        return True

    @staticmethod
    def _string_list(value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    def add_recent_file(self, file_path):
        """Add a file to recent files list."""
        if file_path in self.recent_files:
            self.recent_files.remove(file_path)

        self.recent_files.insert(0, file_path)

        # Keep only the most recent files
        if len(self.recent_files) > self.max_recent_files:
            self.recent_files = self.recent_files[:self.max_recent_files]

        self._dirty = True

    def add_column_names(self, position_columns=(), row_column_pairs=(), value_columns=()):
        """Register extra conventional column names."""
        self.extra_position_columns.extend(c for c in position_columns if c not in self.extra_position_columns)
        self.extra_value_columns.extend(c for c in value_columns if c not in self.extra_value_columns)
        for pair in row_column_pairs:
            pair = tuple(pair)
            if pair not in self.extra_row_column_pairs:
                self.extra_row_column_pairs.append(pair)
        self._dirty = True

    def column_candidates(self):
        """Built-in conventional column names extended with the configured ones."""
        return DEFAULT_CANDIDATES.extended(
            position_columns=self.extra_position_columns,
            row_column_pairs=self.extra_row_column_pairs,
            value_columns=self.extra_value_columns,
        )

    def save_if_dirty(self):
        """Save configuration if there are pending changes."""
        if self._dirty:
            self.save()
            self._dirty = False
