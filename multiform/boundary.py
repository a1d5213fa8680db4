import binascii
import os
import time

from . import ConfigException


def time_boundary() -> str:
    """
    Hex encoded nanosecond wall-clock time. Two passes started within the same
    clock tick get the same token, so this is unique in practice only.
    """
    return format(time.time_ns(), "x")


def random_boundary() -> str:
    return binascii.hexlify(os.urandom(16)).decode()


BOUNDARY_FACTORIES = {
    "time": time_boundary,
    "random": random_boundary,
}


def boundary_factory(name: str):
    try:
        return BOUNDARY_FACTORIES[name]
    except KeyError:
        raise ConfigException(f"Unknown boundary source {name}, expected one of {', '.join(sorted(BOUNDARY_FACTORIES))}")
