# store.py
"""
In-memory section store.

Stands in for the host's configuration store: an ordered list of typed
sections holding options. add/set/remove only stage changes; nothing is
visible to a fresh load() until commit() and save() have run.
"""

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class Section:
    section_id: str
    section_type: str
    options: Dict[str, Any] = field(default_factory=dict)


class SectionStore:

    def __init__(self, sections: Optional[List[Section]] = None):
        self._committed: Dict[str, Section] = {
            s.section_id: s for s in (sections or [])
        }
        self._sections: Dict[str, Section] = copy.deepcopy(self._committed)
        self._changes: List[Tuple[Any, ...]] = []
        self._counter = len(self._committed)

    # --- reads ---

    def __contains__(self, section_id: str) -> bool:
        return section_id in self._sections

    def get(self, section_id: str, option: Optional[str] = None) -> Any:
        section = self._section(section_id)
        if option is None:
            return copy.deepcopy(section.options)
        return copy.deepcopy(section.options.get(option))

    def sections(self, section_type: str) -> List[Section]:
        return [
            copy.deepcopy(s)
            for s in self._sections.values()
            if s.section_type == section_type
        ]

    @property
    def changes(self) -> List[Tuple[Any, ...]]:
        return list(self._changes)

    # --- staged writes ---

    def add(self, section_type: str, name: Optional[str] = None) -> str:
        if name is None:
            name = self._next_anonymous_id()
        elif name in self._sections:
            raise ValueError(f"Section '{name}' already exists")

        self._sections[name] = Section(section_id=name, section_type=section_type)
        self._changes.append(("add", name, section_type))
        logger.debug("staged add %s (%s)", name, section_type)
        return name

    def set(self, section_id: str, option: str, value: Any) -> None:
        section = self._section(section_id)

        if value is None:
            section.options.pop(option, None)
        else:
            section.options[option] = copy.deepcopy(value)

        self._changes.append(("set", section_id, option, value))

    def remove(self, section_id: str) -> None:
        self._section(section_id)
        del self._sections[section_id]
        self._changes.append(("remove", section_id))
        logger.debug("staged remove %s", section_id)

    def commit(self) -> int:
        count = len(self._changes)
        self._committed = copy.deepcopy(self._sections)
        self._changes = []
        logger.info("committed %d change(s)", count)
        return count

    def revert(self) -> None:
        self._sections = copy.deepcopy(self._committed)
        self._changes = []

    # --- persistence ---

    @classmethod
    def load(cls, path: str) -> "SectionStore":
        if not os.path.exists(path):
            return cls()

        with open(path, "r") as f:
            data = json.load(f)

        sections = [
            Section(
                section_id=item["id"],
                section_type=item["type"],
                options=item.get("options", {}),
            )
            for item in data.get("sections", [])
        ]
        logger.debug("loaded %d section(s) from %s", len(sections), path)
        return cls(sections)

    def save(self, path: str) -> None:
        data = {
            "sections": [
                {"id": s.section_id, "type": s.section_type, "options": s.options}
                for s in self._committed.values()
            ]
        }
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    # --- internals ---

    def _section(self, section_id: str) -> Section:
        if section_id not in self._sections:
            raise KeyError(f"Section '{section_id}' does not exist")
        return self._sections[section_id]

    def _next_anonymous_id(self) -> str:
        while True:
            self._counter += 1
            name = f"cfg{self._counter:06x}"
            if name not in self._sections:
                return name
