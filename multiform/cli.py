#!/usr/bin/env python3 -m multiform.cli

from __future__ import annotations

import functools
import sys

from os import environ
from typing import List

import click
from click_aliases import ClickAliasedGroup
from rich.table import Table

from . import VERSION, ConfigException, EncodingError, console
from .config import Config, DEFAULT_CONFIG_FILE
from .util import parse_fields, parse_files

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def common_config_params(func):
    """Decorator for commands that need same configuration parameters"""

    @click.option("--config-path", default=environ.get("MULTIFORM_CONFIG_PATH", "."), help="Directory containing config file")
    @click.option("--config-file", default=DEFAULT_CONFIG_FILE, help="Config file name")
    @click.option("--environment", default=environ.get("MULTIFORM_ENVIRONMENT"), help="Environment section of config to apply")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def load_config(config_path: str, config_file: str, environment: str, **overrides) -> Config:
    try:
        return Config(config_path=config_path, filename=config_file, environment=environment, overrides=overrides)
    except ConfigException as ex:
        console.log(f"Invalid configuration: {ex}", style="red")
        sys.exit(-1)


@click.group(context_settings=CONTEXT_SETTINGS, cls=ClickAliasedGroup)
@click.version_option(version=VERSION)
def multiform():
    """
    Encode form fields and files as multipart/form-data
    """


@multiform.command(aliases=["enc"])
@common_config_params
@click.option("--field", help="form field as key=value (value parsed as JSON when possible)", multiple=True)
@click.option("--file", "file_", help="file field as key=path, repeat key for several files", multiple=True)
@click.option("--charset", default=None, help="Override configured charset")
@click.option("--output-file", default="", help="Write encoded body to file instead of stdout")
def encode(config_path: str, config_file: str, environment: str, field: List, file_: List, charset: str, output_file: str):
    """Encode fields and print the body"""
    config = load_config(config_path, config_file, environment, charset=charset)

    try:
        data = {**parse_fields(field), **parse_files(file_)}
    except ValueError as ex:
        console.log(str(ex), style="red")
        sys.exit(-1)

    try:
        body, header = config.processor().encode(data, config.settings.charset)
    except EncodingError as ex:
        console.log(f"Unable to encode {ex.key}: {ex}", style="red")
        if ex.__cause__:
            console.log(f"Caused by: {ex.__cause__}", style="red")
        sys.exit(-1)

    console.log(f"Content-Type: {header}")

    if output_file:
        with open(output_file, "wb") as f:
            f.write(body)
        console.log(f"Wrote {len(body)} bytes to {output_file}")
    else:
        stdout = click.get_binary_stream("stdout")
        stdout.write(body)
        stdout.flush()


@multiform.command()
@common_config_params
def writers(config_path: str, config_file: str, environment: str):
    """Show writer chain in dispatch order"""
    config = load_config(config_path, config_file, environment)
    processor = config.processor()

    t = Table("#", "Writer", "Handles", title="Writer Chain", title_justify="left", title_style="bold")
    for index, writer in enumerate(processor.writers):
        t.add_row(str(index), type(writer).__name__, writer.describe())

    fallback = processor.chain.fallback
    t.add_row("-", type(fallback).__name__, f"{fallback.describe()} ({config.settings.delegate})")
    console.print(t)


@multiform.command()
@common_config_params
def show_config(config_path: str, config_file: str, environment: str):
    """Show effective settings"""
    config = load_config(config_path, config_file, environment)

    t = Table("Setting", "Value", title="Settings")
    for k, v in config.as_dict().items():
        t.add_row(k, str(v))
    console.print(t)


if __name__ == "__main__":
    multiform()
