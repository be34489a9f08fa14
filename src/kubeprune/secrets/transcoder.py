#!/usr/bin/env python3
"""
KUBEPRUNE SECRET TRANSCODER
---------------------------
Converts v1 Secrets between two forms:

* wire form: every value of `data` is base64, as the API server expects.
* edit form: printable values are decoded into a `decodedData` side channel
  so a human can read and edit them; binary values stay encoded in `data`.

Both transforms return a new object and leave their input untouched.

Author: KubePrune Team
"""

import base64
import binascii
import copy
import re
from typing import Any, Dict, Optional

DECODED_DATA_KEY = "decodedData"

# Control characters other than tab, newline and carriage return, plus DEL.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def is_secret(obj: Any) -> bool:
    return (isinstance(obj, dict)
            and obj.get("apiVersion") == "v1"
            and obj.get("kind") == "Secret")


def is_printable(raw: bytes) -> bool:
    """True if `raw` is UTF-8 text a human can safely read and edit."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return _CONTROL_CHARS.search(text) is None


def b64decode(value: str) -> Optional[bytes]:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None


def b64encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def to_edit_form(secret: Dict[str, Any]) -> Dict[str, Any]:
    """
    Lifts printable entries of `data` into `decodedData`.

    Entries that are not valid base64 or decode to binary content are left
    in `data` untouched.
    """
    if not is_secret(secret):
        return secret

    result = copy.deepcopy(secret)
    data = result.get("data")
    if not isinstance(data, dict):
        return result

    decoded = {}
    for key in list(data.keys()):
        value = data[key]
        if not isinstance(value, str):
            continue
        raw = b64decode(value)
        if raw is None or not is_printable(raw):
            continue
        decoded[key] = raw.decode("utf-8")
        del data[key]

    if decoded:
        shadow = result.get(DECODED_DATA_KEY)
        if not isinstance(shadow, dict):
            shadow = result[DECODED_DATA_KEY] = type(data)()
        shadow.update(decoded)
    return result


def to_wire_form(secret: Dict[str, Any]) -> Dict[str, Any]:
    """
    Re-encodes `decodedData` into `data` and drops the side channel.

    A key present in both wins from `data`: an edit of the encoded form
    overrides a stale decoded shadow.
    """
    if not is_secret(secret):
        return secret

    result = copy.deepcopy(secret)
    decoded = result.pop(DECODED_DATA_KEY, None)
    if not isinstance(decoded, dict) or not decoded:
        return result

    data = result.get("data")
    if not isinstance(data, dict):
        data = result["data"] = type(decoded)()

    for key, value in decoded.items():
        if key in data and data[key]:
            continue
        data[key] = b64encode("" if value is None else str(value))
    return result
