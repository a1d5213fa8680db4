import typing
import json

from pathlib import Path


def parse_fields(fields: typing.List[str]) -> dict:
    """
    Parse user-provided cli arguments into dict; used to allow user to pass
    form fields on the command-line.
    """
    ret_val = {}
    for v in fields:
        key, value = split_pair(v)
        try:
            # try parsing value as a JSON object. E.g. user can do --field 'foo=[123]'
            parsed_value = json.loads(value)
        except json.JSONDecodeError:
            # value passed may not have been json, e.g. user may have just done
            # --field foo=bar ; shortcut for having to do --field 'foo="bar"'
            parsed_value = value
        ret_val[key] = parsed_value

    return ret_val


def parse_files(files: typing.List[str]) -> dict:
    """
    Parse `key=path` arguments into dict of Path objects. A key given more
    than once becomes a list of paths (sent as several parts with same name).
    """
    ret_val = {}
    for v in files:
        key, value = split_pair(v)
        path = Path(value)
        if key not in ret_val:
            ret_val[key] = path
        elif isinstance(ret_val[key], list):
            ret_val[key].append(path)
        else:
            ret_val[key] = [ret_val[key], path]

    return ret_val


def split_pair(v: str) -> typing.Tuple[str, str]:
    if "=" not in v:
        raise ValueError(f"Expected key=value, got {v}")
    key, value = v.split("=", 1)
    return key, value
