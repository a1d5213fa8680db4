from __future__ import annotations
from os import path
from pathlib import Path
from yaml import safe_load

from . import ConfigException


class ConfigFiles(list):
    def fetch_dict(self, environment: str = None, defaults: dict = {}) -> dict:
        ret_val = dict(defaults)

        for config_file in self:
            # Top-level keys in file are lowest priority
            ret_val.update(config_file.settings())

            # Environment-specific keys are higher priority
            ret_val.update(config_file.environment(environment))

        return ret_val


class ConfigFile(dict):
    SETTING_KEYS = ['charset', 'boundary', 'separator', 'delegate', 'writers']
    EXPECTED_KEYS = SETTING_KEYS + ['include', 'environments']

    def __init__(self, filename: str, config_dir: str):
        self.filename = filename
        self.config_dir = config_dir

        self['include'] = []
        self['environments'] = {}

        config_path = path.join(config_dir, filename)

        with open(config_path) as f:
            cfg = safe_load(f) or dict()

        if type(cfg) != dict:
            raise ConfigException(f"Config file {filename} should contain a mapping, got a {type(cfg).__name__}")

        self.update(cfg)
        self._ensure_valid_keys()

    def _ensure_valid_keys(self):
        """
        Ensure config file only contains expected keys
        """
        unknown_keys = set(self.keys()) - set(self.EXPECTED_KEYS)

        if unknown_keys:
            raise ConfigException(f"Config file {self.filename} has unexpected keys: {unknown_keys}")

        for name, settings in (self['environments'] or {}).items():
            unknown_keys = set(settings or {}) - set(self.SETTING_KEYS)
            if unknown_keys:
                raise ConfigException(f"Config file {self.filename} environment {name} has unexpected keys: {unknown_keys}")

    def settings(self) -> dict:
        return {k: v for k, v in self.items() if k in self.SETTING_KEYS}

    def environments(self) -> list:
        return list((self['environments'] or {}).keys())

    def environment(self, environment: str) -> dict:
        """
        Returns environment section from a config file. Returns empty dict if not defined, or None.
        """
        if not environment:
            return {}
        return (self['environments'] or {}).get(environment, None) or {}

    def includes(self) -> list:
        """
        Returns list of included files (relative to config dir). Files will be given .yaml extension
        if they don't have an extension already
        """
        includes = self['include']
        if type(includes) != list:
            raise ConfigException(f'{self.filename} invalid `include` directive. Expect a list, got a {type(includes)}')

        include_paths = []
        for included in includes:
            p = Path(included)
            if not p.suffix:
                p = p.with_suffix('.yaml')
            include_paths.append(str(p))
        return include_paths

    def load_includes(self) -> ConfigFiles:
        """
        Returns list of config files with highest precedence last (lowest first)
        """
        return ConfigFiles(self._load_includes(set()))

    def _load_includes(self, seen: set) -> list:
        """
        Recursive loading of includes. Returns a list with lowest-precedence first.

        E.g. if A includes B, and B includes C then a._load_includes() returns [C, B, A]
        """
        includes = []
        for include in self.includes():
            if include not in seen:
                seen.add(include)
                includes += ConfigFile(include, self.config_dir)._load_includes(seen)

        includes += [self]

        return includes
