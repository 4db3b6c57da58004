import json
import os
from dataclasses import asdict, dataclass, fields
from core.palette import SUMMARY_STRATEGIES
from core.renderer import GRID_STYLES, STYLE_SYMBOL

SETTINGS_FILENAME = "settings.json"


@dataclass
class AppSettings:
    catalog_path: str = "assets/thread_colors.txt"
    font_path: str = ""
    output_dir: str = "output"
    default_height: int = 30
    default_num_colors: int = 30
    min_height: int = 10
    max_height: int = 200
    min_colors: int = 10
    max_colors: int = 200
    cell_size: int = 20
    grid_style: str = STYLE_SYMBOL
    summary_strategy: str = "frequency"

    @classmethod
    def load(cls, path):
        """
        Loads settings from a JSON file.
        Missing file, unreadable JSON or bad values fall back to defaults.
        Relative catalog/font paths are resolved against the file's folder.
        """
        settings = cls()
        base_dir = os.path.dirname(os.path.abspath(path))

        if os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    settings = cls.from_dict(data)
                else:
                    print(f"Settings file {path} is not a JSON object, using defaults")
            except (OSError, ValueError) as e:
                print(f"Error loading settings: {e}")

        settings.catalog_path = _resolve(base_dir, settings.catalog_path)
        settings.font_path = _resolve(base_dir, settings.font_path)
        return settings

    @classmethod
    def from_dict(cls, data):
        defaults = cls()
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            expected = type(getattr(defaults, f.name))
            if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
                print(f"Invalid setting {f.name}={value!r}, using default")
                continue
            if expected is str and not isinstance(value, str):
                print(f"Invalid setting {f.name}={value!r}, using default")
                continue
            values[f.name] = value

        settings = cls(**values)
        settings._validate(defaults)
        return settings

    def _validate(self, defaults):
        if self.grid_style not in GRID_STYLES:
            print(f"Unknown grid style {self.grid_style!r}, using default")
            self.grid_style = defaults.grid_style
        if self.summary_strategy not in SUMMARY_STRATEGIES:
            print(f"Unknown summary strategy {self.summary_strategy!r}, using default")
            self.summary_strategy = defaults.summary_strategy
        if self.cell_size <= 0:
            self.cell_size = defaults.cell_size
        if not 0 < self.min_height <= self.max_height:
            self.min_height, self.max_height = defaults.min_height, defaults.max_height
        if not 0 < self.min_colors <= self.max_colors:
            self.min_colors, self.max_colors = defaults.min_colors, defaults.max_colors
        self.default_height = self.clamp_height(self.default_height)
        self.default_num_colors = self.clamp_num_colors(self.default_num_colors)

    def clamp_height(self, value):
        return max(self.min_height, min(self.max_height, int(value)))

    def clamp_num_colors(self, value):
        return max(self.min_colors, min(self.max_colors, int(value)))

    def save(self, path):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=4)


def _resolve(base_dir, path):
    if not path or os.path.isabs(path):
        return path
    return os.path.join(base_dir, path)
