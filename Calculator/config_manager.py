# config_manager.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"


# Used for every key missing from config.json (or when the file is unreadable)
DEFAULT_SETTINGS = {
    "darkmode": False,
    "max_digits": 16,
    "shift_to_paste": True,
    "debug_logging": False,
}

# Lower bounds for integer settings, enforced by the settings dialog
SETTING_MINIMUMS = {
    "max_digits": 1,
}


def _read_json(path):
    try:
        with open(path, 'r', encoding= 'utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}


def load_setting_value(key_value):
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    descriptions = _read_json(ui_strings)

    if key_value == "all":
        return descriptions

    else:
        return descriptions.get(key_value, key_value)


def get_max_digits():
    """Digit cap for the editing engine; falls back to the default if the stored value is unusable."""
    value = load_setting_value("max_digits")
    minimum = SETTING_MINIMUMS["max_digits"]
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        logger.warning("Invalid max_digits setting %r, using %d", value, DEFAULT_SETTINGS["max_digits"])
        return DEFAULT_SETTINGS["max_digits"]
    return value


def save_setting(settings_dict):
    try:
        with open (config_json, 'w', encoding= 'utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except (OSError, TypeError) as e:
        logger.error("Could not save settings to %s: %s", config_json, e)
        return{}
