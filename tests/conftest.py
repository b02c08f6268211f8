"""
tests/conftest.py: shared fixtures.

`weak_hash` swaps the string hash for one that collides on purpose
(every string hashes to its length), so collision handling gets exercised
without hunting for real one-at-a-time collisions.
"""

import pytest

from inidict.dictionary import model, store


EXAMPLE_INI = """\
#
# This is an example of ini file
#

globval1  = "global value 1"
Table:cup = 3; This will create section Table with key cup
globval2  = "global value 2"
[Pizza]

Ham       = yes ;
Mushrooms = TRUE ;
Capres    = 0 ;
Cheese    = Non ;
Fish      = no
Parrots   = no
Monkeys   = no
Humans    = no
Something bad = no

[Wine]

Grape     = Cabernet Sauvignon ;
Year      = 1989 ;
Country   = Spain ;
Alcohol   = 12.5  ;

[Table]

Spoon     = 5
Fork      = 5
Knife     = 1
Plate     = 8

"""


def _length_hash(key):
    return 0 if key is None else len(key)


@pytest.fixture
def weak_hash(monkeypatch):
    monkeypatch.setattr(model, "dictionary_hash", _length_hash)
    monkeypatch.setattr(store, "dictionary_hash", _length_hash)
    return _length_hash


@pytest.fixture
def example_text():
    return EXAMPLE_INI
