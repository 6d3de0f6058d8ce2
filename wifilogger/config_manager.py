# wifilogger/config_manager.py

import json
import os

DEFAULT_CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".wifi-logger")

DEFAULTS = {
    "grid_width": 100,
    "grid_height": 100,
    "idw_power": 2.0,
    "scan_timeout": 30,
    "survey_path": os.path.join(DEFAULT_CONFIG_DIR, "survey.json"),
    "scan_provider": "nmcli",
}

SCAN_PROVIDERS = ("nmcli", "simulated")


class ConfigManager:
    """
    Manages application configuration, including loading from and saving to a JSON file.
    Keys missing from the file fall back to the values in DEFAULTS.
    """
    def __init__(self, config_file_path):
        """
        Initializes the ConfigManager with the path to the configuration file.

        Args:
            config_file_path (str): The absolute path to the configuration JSON file.
        """
        self.config_file_path = config_file_path
        self.config = {}
        self._load_config()

    def _load_config(self):
        """
        Loads the configuration from the JSON file. If the file does not exist
        or is malformed, it initializes with an empty dictionary.
        """
        if os.path.exists(self.config_file_path):
            try:
                with open(self.config_file_path, 'r', encoding='utf-8') as f:
                    self.config = json.load(f)
            except json.JSONDecodeError:
                print(f"Warning: Configuration file '{self.config_file_path}' is malformed. Initializing with empty config.")
                self.config = {}
            except OSError as e:
                print(f"Error loading config file '{self.config_file_path}': {e}")
                self.config = {}
            if not isinstance(self.config, dict):
                print(f"Warning: Configuration file '{self.config_file_path}' does not hold an object. Initializing with empty config.")
                self.config = {}
        else:
            print(f"Info: Configuration file '{self.config_file_path}' not found. Initializing with empty config.")
            self.config = {}

    def _save_config(self):
        """
        Saves the current configuration dictionary to the JSON file.
        Ensures the directory for the config file exists.
        """
        try:
            os.makedirs(os.path.dirname(self.config_file_path), exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=4)
        except OSError as e:
            print(f"Error saving config file '{self.config_file_path}': {e}")

    def get(self, key, default=None):
        """
        Retrieves a configuration value by its key.

        Args:
            key (str): The key of the configuration setting.
            default: Returned if the key is neither set nor in DEFAULTS.

        Returns:
            The configured value, the built-in default, or `default`.
        """
        if key in self.config:
            return self.config[key]
        return DEFAULTS.get(key, default)

    def set(self, key, value):
        """
        Sets a configuration value and immediately saves the updated configuration.

        Args:
            key (str): The key of the configuration setting.
            value: The value to set for the key.
        """
        self.config[key] = value
        self._save_config()

    def interpolation_settings(self):
        """
        Returns the validated heatmap interpolation settings.

        Returns:
            tuple: (grid_width, grid_height, power)

        Raises:
            ValueError: If a configured value is out of range.
        """
        grid_width = int(self.get("grid_width"))
        grid_height = int(self.get("grid_height"))
        power = float(self.get("idw_power"))
        if grid_width < 2 or grid_height < 2:
            raise ValueError(f"Configured grid must be at least 2x2, got {grid_width}x{grid_height}")
        if not power > 0:
            raise ValueError(f"Configured idw_power must be positive, got {power}")
        return grid_width, grid_height, power

    def get_all_config(self):
        """
        Returns a copy of the entire configuration dictionary, defaults included.

        Returns:
            dict: A copy of the current configuration.
        """
        merged = dict(DEFAULTS)
        merged.update(self.config)
        return merged
