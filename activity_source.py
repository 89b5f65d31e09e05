"""
Activity Source
===============

Loads the activity list that board cells are drawn from and splits it into
the two label sets the board generator works with.

Accepted file formats (picked by extension):

    activities.yaml / activities.yml
        activities:
          - Read a book
          - Drink water (repeatable)

    activities.toml
        activities = ["Read a book", "Drink water (repeatable)"]

A label suffixed with "(repeatable)" (any case, optional surrounding
whitespace) may appear on the board up to three times.
"""

import os
import re
import tomllib

import yaml

from bingo_constants import EMPTY_LABEL, FREE_LABEL
from bingo_errors import SourceMalformed, SourceUnavailable

REPEATABLE_MARKER = re.compile(r'\s*\(repeatable\)\s*$', re.IGNORECASE)

ACTIVITIES_KEY = 'activities'

# Board-layout labels; an activity with one of these names is dropped
RESERVED_LABELS = (FREE_LABEL, EMPTY_LABEL)


def load_activities_file(filepath):
    """
    Read an activity source file and return its top-level mapping.

    Raises SourceUnavailable if the file is missing or unreadable, and
    SourceMalformed if it cannot be parsed or is not a mapping.
    """
    filename = os.path.basename(filepath).lower()

    if not filename.endswith(('.yaml', '.yml', '.toml')):
        raise SourceMalformed(
            f"Unsupported activities file format: {filename}. Expected .yaml, .yml or .toml")

    try:
        with open(filepath, 'rb') as f:
            raw = f.read()
    except FileNotFoundError:
        raise SourceUnavailable(
            f"Activities file ({os.path.basename(filepath)}) not found. Please create it.")
    except OSError as e:
        raise SourceUnavailable(f"Activities file could not be read: {e}")

    try:
        if filename.endswith('.toml'):
            data = tomllib.loads(raw.decode('utf-8'))
        else:
            data = yaml.safe_load(raw)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise SourceMalformed(
            f"Error parsing {os.path.basename(filepath)}. Please check its format. ({e})")

    # An empty YAML document loads as None
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SourceMalformed(
            f"Unexpected structure in {os.path.basename(filepath)}: "
            f"expected a mapping with an '{ACTIVITIES_KEY}' list")
    return data


def parse_activities(entries):
    """
    Split raw activity strings into (non_repeatable, repeatable) label lists.

    Both lists are deduplicated independently, keeping first-seen order.
    Non-string entries, labels that are blank once the marker is removed
    and labels reserved for the board layout are dropped without error.
    """
    non_repeatable = []
    repeatable = []

    if not isinstance(entries, list):
        return non_repeatable, repeatable

    for entry in entries:
        if not isinstance(entry, str):
            continue
        is_repeatable = REPEATABLE_MARKER.search(entry) is not None
        text = REPEATABLE_MARKER.sub('', entry).strip()
        if not text or text in RESERVED_LABELS:
            continue
        target = repeatable if is_repeatable else non_repeatable
        if text not in target:
            target.append(text)

    return non_repeatable, repeatable


def read_activity_pool(filepath):
    """Load a source file and return its (non_repeatable, repeatable) labels."""
    data = load_activities_file(filepath)
    return parse_activities(data.get(ACTIVITIES_KEY))
