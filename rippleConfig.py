import json
import logging
import os

logger = logging.getLogger(__name__)

CONFIG_FILE = "assets/config/ripple.json"


class ConfigManager:
    def __init__(self, path=CONFIG_FILE):
        self.path = path

        # big splash on click, small trail while dragging
        self.default_config = {
            "fps": 60,
            "clickSplashRadius": 10,
            "dragSplashRadius": 5,
            "windowSize": [600, 600],
            "image": None,
            "animationEnabled": True,
        }
        self.data = self.load()

    def __getitem__(self, key):
        return self.data[key]

    def load(self):
        data = dict(self.default_config)
        if not os.path.exists(self.path):
            return data

        try:
            with open(self.path, 'r') as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s (%s), using defaults", self.path, e)
            return data

        if not isinstance(stored, dict):
            logger.warning("%s does not hold a JSON object, using defaults", self.path)
            return data

        for key, value in stored.items():
            if key not in data:
                logger.warning("Ignoring unknown config key %r", key)
                continue
            data[key] = value
        return data

    def override(self, **values):
        """Apply values that are not None on top of the loaded config."""
        for key, value in values.items():
            if key not in self.data:
                raise KeyError(key)
            if value is not None:
                self.data[key] = value

    def save(self):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.data, f, indent=4)
