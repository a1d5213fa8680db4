from __future__ import annotations

import codecs
import os

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, StrictUndefined
from yaml import safe_load

from . import ConfigException, log
from .boundary import BOUNDARY_FACTORIES, boundary_factory
from .config_file import ConfigFile, ConfigFiles
from .encoders import ENCODERS, encoder_for
from .processor import DEFAULT_WRITERS, MultipartFormContentProcessor

DEFAULT_CONFIG_FILE = "multiform.yaml"


class Config:
    @dataclass
    class Settings:
        charset: str = "UTF-8"
        boundary: str = "time"
        separator: str = "."
        delegate: str = "json"
        writers: list = None

        def __post_init__(self):
            try:
                codecs.lookup(str(self.charset))
            except LookupError:
                raise ConfigException(f"Charset {self.charset} is not a known text encoding")

            if self.boundary not in BOUNDARY_FACTORIES:
                raise ConfigException(f"Boundary source {self.boundary} is invalid. Can be only one of {', '.join(sorted(BOUNDARY_FACTORIES))}")

            if self.delegate not in ENCODERS:
                raise ConfigException(f"Delegate encoder {self.delegate} is invalid. Can be only one of {', '.join(sorted(ENCODERS))}")

            if type(self.separator) != str or not self.separator:
                raise ConfigException(f"Separator {self.separator!r} is invalid, must be a non-empty string")

            if self.writers is not None:
                if type(self.writers) != list:
                    raise ConfigException(f"writers should be a list of writer names, got {self.writers}")
                unknown = [w for w in self.writers if w not in DEFAULT_WRITERS]
                if unknown:
                    raise ConfigException(f"Unknown writers {unknown}, only {', '.join(DEFAULT_WRITERS)} are available")

    class InterpolatedDict(dict):
        def __init__(self, object: Dict[str, Any], vars: Dict[str, Any]):
            # Handle loading from empty YAML file (results in None) which is okay.
            if not object:
                return

            env = Environment(undefined=StrictUndefined)

            for key, value in object.items():
                try:
                    parsed_value = self.render(env, value, vars)
                    if parsed_value != None:
                        self[key] = parsed_value
                except Exception as ex:
                    raise ConfigException(f"Unable to process {key}, value={value}: {ex}") from ex

        def render(self, env: Environment, value: Any, vars: Dict[str, Any]):
            if isinstance(value, list):
                return [self.render(env, v, vars) for v in value]
            if isinstance(value, str):
                return safe_load(env.from_string(value).render(vars))
            return value

    def __init__(self, config_path: str = ".", filename: str = DEFAULT_CONFIG_FILE, environment: str = None, overrides: dict = {}):
        self.config_path = config_path
        self.environment = environment

        includes = self._load(config_path, filename, environment)

        vars = {"environ": os.environ, "environment": environment}
        settings = self.InterpolatedDict(includes.fetch_dict(environment), vars)
        settings.update({k: v for k, v in overrides.items() if v is not None})

        log.debug("settings for environment %s: %s", environment, settings)
        try:
            self.settings = self.Settings(**settings)
        except TypeError as ex:
            raise ConfigException(f"Unable to parse settings: have {dict(settings)}: {ex}") from ex

    @staticmethod
    def _load(config_path: str, filename: str, environment: str) -> ConfigFiles:
        if not Path(config_path, filename).exists():
            # A missing default config file just means 'use defaults'
            if filename == DEFAULT_CONFIG_FILE and not environment:
                return ConfigFiles()
            raise ConfigException(f"Configuration file {filename} not found in {config_path}")

        cfg = ConfigFile(filename=filename, config_dir=config_path)

        if environment and environment not in cfg.environments():
            raise ConfigException(f"Environment {environment} is not defined in {cfg.filename}. Only {cfg.environments()} permitted.")

        try:
            return cfg.load_includes()
        except FileNotFoundError as err:
            raise ConfigException(f"Included configuration file not found: {err}") from err

    def processor(self) -> MultipartFormContentProcessor:
        """
        Build a content processor from these settings
        """
        s = self.settings
        return MultipartFormContentProcessor(
            delegate=encoder_for(s.delegate),
            boundary_factory=boundary_factory(s.boundary),
            separator=s.separator,
            writers=s.writers,
        )

    def as_dict(self) -> dict:
        return asdict(self.settings)
