#!/usr/bin/env python3
"""
Archive traversal
Flattens nested FPAC containers into one ordered list of entries
"""

from typing import Callable, Optional

from . import pac_archive
from .models import Container, Entry

ChildLister = Callable[[Container], list[Entry]]
ScanCallback = Callable[[Container, int], None]


class ArchiveTraversal:
    """
    Recursive container expansion.

    Each container is expanded exactly once. A container's own children are
    listed first, in stored order; the descendants of nested containers are
    appended after all of them, so the container entry keeps its position.

    Attributes:
        active: Containers currently being expanded, outermost first. Only
            meaningful while expand() is running.
    """

    def __init__(self, list_children: ChildLister = pac_archive.list_children,
                 on_scan: Optional[ScanCallback] = None):
        self.list_children = list_children
        self.on_scan = on_scan
        self.active: list[Container] = []

    def expand(self, container: Container, depth: int = 0) -> list[Entry]:
        if self.on_scan is not None:
            self.on_scan(container, depth)

        self.active.append(container)
        try:
            entries = list(self.list_children(container))
            # Entries appended below come from nested expansions and are
            # already flattened
            count = len(entries)
            for i in range(count):
                child = entries[i]
                if isinstance(child, Container):
                    entries.extend(self.expand(child, depth + 1))
        finally:
            self.active.pop()

        return entries
