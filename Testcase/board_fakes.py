"""
Test doubles shared by the Testcase modules.

MemoryPersistence / FailingPersistence stand in for JsonFilePersistence;
FlaskTransport lets BoardClient talk to an app through Flask's test client.
"""

import copy
import json
import os
import random
import sys
import tempfile

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from board_store import BoardStore
from session_handler import SessionHandler


class MemoryPersistence:
    def __init__(self, data=None):
        self.data = copy.deepcopy(data)
        self.writes = 0

    def read(self):
        return copy.deepcopy(self.data)

    def write(self, data):
        # Same serialisability check the JSON file gets
        json.dumps(data)
        self.data = copy.deepcopy(data)
        self.writes += 1

    def describe(self):
        return '<memory>'


class FailingPersistence(MemoryPersistence):
    """Writes fail while fail_writes is True."""

    def __init__(self, data=None):
        super().__init__(data)
        self.fail_writes = True

    def write(self, data):
        if self.fail_writes:
            raise OSError("disk full")
        super().write(data)


class FlaskTransport:
    def __init__(self, app):
        self.client = app.test_client()

    def get(self, path):
        resp = self.client.get(path)
        return resp.status_code, resp.get_json()

    def post(self, path, payload):
        resp = self.client.post(path, json=payload)
        return resp.status_code, resp.get_json()


def write_activities(directory, activities, filename='activities.yaml'):
    """Write an activities YAML file and return its path."""
    path = os.path.join(directory, filename)
    with open(path, 'w') as f:
        yaml.safe_dump({'activities': activities}, f)
    return path


def make_session(activities_path, persistence=None, seed=1234, trust_client_claim=False):
    store = BoardStore(persistence or MemoryPersistence())
    store.load()
    return SessionHandler(store, activities_path,
                          trust_client_claim=trust_client_claim,
                          rng=random.Random(seed))


def labels(count, prefix='Activity'):
    return [f"{prefix} {i}" for i in range(1, count + 1)]


class ActivitiesDir:
    """TemporaryDirectory holding an activities file; yields its path."""

    def __init__(self, activities, filename='activities.yaml'):
        self.activities = activities
        self.filename = filename
        self._tmp = None

    def __enter__(self):
        self._tmp = tempfile.TemporaryDirectory()
        return write_activities(self._tmp.name, self.activities, self.filename)

    def __exit__(self, *exc):
        self._tmp.cleanup()
        return False
