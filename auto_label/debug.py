"""Helpers for debugging."""

import base64
import gzip
import json
import logging


def is_debug(module_name):
    """Is this module configured for debug-level information?"""
    return logging.getLogger(module_name).isEnabledFor(logging.DEBUG)


def compressed_json(jdata) -> str:
    """
    Pack JSON data into one line of Python that prints it.

    Paste the line into Python to see the data.
    """
    text = json.dumps(jdata, sort_keys=True, indent=4)
    data = base64.b85encode(gzip.compress(text.encode())).decode()
    return f"import base64,gzip;print(gzip.decompress(base64.b85decode({data!r})).decode())"


def log_long_json(logger, label, jdata):
    """Log a JSON data dump at debug level."""
    logger.debug(f"{label}: {compressed_json(jdata)}")
