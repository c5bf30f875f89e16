# SPDX-License-Identifier: GPL-2.0-or-later
"""Named definitions with ids handed out in first-reference order."""
from collections import OrderedDict


class NameRegistry:
    """
    Ordered name -> item mapping (items carry an `id` attribute).

    Defining an item doesn't give it an id. reference() records the first
    reference to a name and returns the id the item will get; finalize()
    stamps those ids onto the items. Items nobody referenced keep id None.
    """

    def __init__(self, limit=None):
        self.items = OrderedDict()
        self.referenced = []
        self.limit = limit

    def add(self, name, item):
        self.items[name] = item
        return item

    def get(self, name):
        return self.items.get(name)

    def __contains__(self, name):
        return name in self.items

    def reference(self, name):
        """
        Records a reference to name and returns its id, or None if there is
        no such item or the id space is exhausted.
        """
        if name not in self.items:
            return None
        if name in self.referenced:
            return self.referenced.index(name)
        if self.limit is not None and len(self.referenced) >= self.limit:
            return None
        self.referenced.append(name)
        return len(self.referenced) - 1

    def finalize(self):
        for item in self.items.values():
            item.id = None
        for x, name in enumerate(self.referenced):
            self.items[name].id = x
        return OrderedDict(self.items)
