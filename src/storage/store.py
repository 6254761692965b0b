# store.py - Saved scenarios with best-effort persistence

import json
import logging
import os
import time
from dataclasses import replace

from config import STORE_CAPACITY, STORE_KEY
from models import SavedScenario

logger = logging.getLogger(__name__)


class JsonFileSlots:
    """Key-value slots kept in a single JSON file."""

    def __init__(self, path):
        self.path = path

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key):
        """Raw text stored under key, or None."""
        return self._read_all().get(key)

    def set(self, key, value):
        """Stores value under key; an unreadable file is overwritten."""
        try:
            data = self._read_all()
        except (ValueError, RecursionError) as e:
            logger.warning("Overwriting unreadable store file %s: %s", self.path, e)
            data = {}
        data[key] = value
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)


def now_ms():
    return int(time.time() * 1000)


class ScenarioStore:
    """
    Saved scenarios, most recently saved first, capped at STORE_CAPACITY.
    Every operation returns a new store; the receiver is never modified.
    """

    def __init__(self, entries=(), capacity=STORE_CAPACITY):
        self.capacity = capacity
        self._entries = tuple(entries)[:capacity]

    @property
    def entries(self):
        return self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other):
        if not isinstance(other, ScenarioStore):
            return NotImplemented
        return self._entries == other._entries and self.capacity == other.capacity

    def _with(self, entries):
        return ScenarioStore(entries, capacity=self.capacity)

    def _check_index(self, index):
        if not 0 <= index < len(self._entries):
            raise IndexError(f"no saved scenario at index {index}")

    def save(self, scenario, name=None, now=None):
        """
        Prepends scenario, stamped with now (epoch ms). A non-empty name
        replaces the scenario's own. The oldest entry falls off past capacity.
        """
        if name:
            scenario = replace(scenario, name=name)
        entry = SavedScenario(scenario, now_ms() if now is None else now)
        return self._with((entry,) + self._entries)

    def rename(self, index, new_name):
        self._check_index(index)
        entries = list(self._entries)
        old = entries[index]
        entries[index] = replace(old, scenario=replace(old.scenario, name=new_name))
        return self._with(entries)

    def entry(self, index):
        """Saved scenario at index; IndexError when there is none."""
        self._check_index(index)
        return self._entries[index]

    def delete(self, index):
        self._check_index(index)
        return self._with(self._entries[:index] + self._entries[index + 1:])

    def to_json(self):
        return json.dumps([e.to_dict() for e in self._entries], ensure_ascii=False)

    @classmethod
    def from_json(cls, raw, capacity=STORE_CAPACITY):
        """Parses a JSON array of saved scenarios; anything else is an empty store."""
        try:
            data = json.loads(raw) if raw else []
        except (TypeError, ValueError, RecursionError):
            logger.warning("Stored scenarios are not valid JSON, starting empty")
            return cls(capacity=capacity)
        if not isinstance(data, list):
            logger.warning("Stored scenarios are not a list, starting empty")
            return cls(capacity=capacity)

        entries = []
        for i, item in enumerate(data):
            try:
                entries.append(SavedScenario.from_dict(item))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping saved scenario #%d: %s", i, e)
        return cls(entries, capacity=capacity)

    @classmethod
    def load(cls, slots, key=STORE_KEY):
        """Reads the store from a key-value slot (empty on any failure)."""
        try:
            raw = slots.get(key)
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("Could not read saved scenarios: %s", e)
            return cls()
        return cls.from_json(raw)

    def persist(self, slots, key=STORE_KEY):
        """
        Writes the store to a key-value slot. Best-effort: a failure is
        logged and the in-memory store stays authoritative.
        Returns True when the write went through.
        """
        try:
            slots.set(key, self.to_json())
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist saved scenarios: %s", e)
            return False
        return True
