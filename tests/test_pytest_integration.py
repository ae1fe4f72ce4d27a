"""
Realized specifications collected as ordinary pytest cases.
"""

import pytest

from fluentspec import Settings, realize, subject


class Inventory:
    def __init__(self):
        self.items = {}

    def add(self, name, quantity=1):
        self.items[name] = self.items.get(name, 0) + quantity
        return self

    @property
    def total(self):
        return sum(self.items.values())


inventory = subject("an inventory", Inventory)
inventory.total.should.equal(0)
stocked = inventory.add("apple", 3).add("pear")
stocked.total.should.equal(4)
stocked.items.should.have.property("apple", 3)
stocked.should.have.property("items").that.include("apple")

RUNNER = realize(inventory, settings=Settings(max_retries=0))


@pytest.mark.parametrize("title,run_case", list(RUNNER.iter_cases()))
def test_inventory_spec(title, run_case):
    run_case()


def test_inventory_titles():
    assert [title for title, _ in RUNNER.iter_cases()] == [
        "when doing an inventory when doing total should equal 0",
        'when doing an inventory when doing add("apple",3) when doing add("pear") when doing total should equal 4',
        'when doing an inventory when doing add("apple",3) when doing add("pear") when doing items should have property "apple",3',
        'when doing an inventory when doing add("apple",3) when doing add("pear") should have property "items" that include "apple"',
    ]
