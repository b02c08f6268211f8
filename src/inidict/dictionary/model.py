# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/11/02 22:06:31
# @Author : pyinidict developers

"""Pairs and sections, the two slot arrays `IniStore` is built from.

Both arrays work the same way: a list of `capacity` slots whose first
`count` ones are in use. Deleting never compacts the list, the slot just
becomes `None` (a tombstone) and is skipped by lookups and dumps.
"""

import logging
from collections.abc import Callable, Iterator, MutableMapping, Sequence
from operator import attrgetter
from typing import Protocol, TextIO, TypeVar

from .consts import ENTRY_MIN_SIZE, PAIR_FORMAT, SortState
from .errors import AllocationError, InvalidArgumentError

_MASK = 0xFFFFFFFF


def dictionary_hash(key: str | None) -> int:
    """Jenkins' one-at-a-time hash of the UTF-8 bytes of `key`, 32 bits.

    Not collision-free. The string is always kept next to its hash
    so a collision is settled by comparing the strings.
    """
    if key is None:
        return 0
    h = 0
    for byte in key.encode('utf-8'):
        h = (h + byte) & _MASK
        h = (h + (h << 10)) & _MASK
        h ^= h >> 6
    h = (h + (h << 3)) & _MASK
    h ^= h >> 11
    h = (h + (h << 15)) & _MASK
    return h


class _Hashed(Protocol):
    @property
    def hash(self) -> int: ...


T = TypeVar('T', bound=_Hashed)


def _hash_key(slot: _Hashed | None) -> int:
    # tombstones go before anything a real string hashes to.
    return -1 if slot is None else slot.hash


def _scan_run(
    slots: Sequence[T | None], count: int, start: int,
    ident: str, hash_: int, identify: Callable[[T], str | None]
) -> int:
    # walk the run of equal hashes around `start`, both directions.
    i = start
    while i >= 0 and _hash_key(slots[i]) == hash_:
        if identify(slots[i]) == ident:
            return i
        i -= 1
    i = start + 1
    while i < count and _hash_key(slots[i]) == hash_:
        if identify(slots[i]) == ident:
            return i
        i += 1
    return -1


def locate(
    slots: Sequence[T | None], count: int,
    ident: str, hash_: int, ordered: bool,
    identify: Callable[[T], str | None]
) -> int:
    """Index of the live slot whose identity string is `ident`, or -1.

    Binary search if the first `count` slots are hash ordered,
    a linear scan otherwise.
    """
    if not ordered:
        for i in range(count):
            slot = slots[i]
            if (slot is not None and slot.hash == hash_
                    and identify(slot) == ident):
                return i
        return -1

    down, up = 0, count - 1
    while down <= up:
        i = (down + up) // 2
        h = _hash_key(slots[i])
        if h < hash_:
            down = i + 1
        elif h > hash_:
            up = i - 1
        else:
            return _scan_run(slots, count, i, ident, hash_, identify)
    return -1


class KeyValue:
    """One pair. Only `value` may change, `hash` always follows `key`."""
    __slots__ = ('_key', '_hash', 'value')

    def __init__(self, key: str, value: str) -> None:
        self._key = key
        self._hash = dictionary_hash(key)
        self.value = value

    @property
    def key(self) -> str:
        return self._key

    @property
    def hash(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f'KeyValue({self._key!r}, {self.value!r})'


_pair_ident = attrgetter('key')


class IniSection(MutableMapping[str, str]):
    """Pairs of one INI section, or of the unnamed header when `name` is None.

    Mapping access only sees live pairs. `count` and `capacity` describe
    the slot array underneath, tombstones included.
    """

    def __init__(self, name: str | None = None, size: int = 0) -> None:
        self._name = name
        self._hash = dictionary_hash(name)
        self._slots: list[KeyValue | None] = [None] * size
        self._count = 0
        self.order = SortState.UNORDERED

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def hash(self) -> int:
        return self._hash

    @property
    def count(self) -> int:
        return self._count

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def _index(self, key: str) -> int:
        return locate(
            self._slots, self._count, key, dictionary_hash(key),
            self.order is SortState.HASH_ORDERED, _pair_ident)

    def find(self, key: str) -> KeyValue | None:
        i = self._index(key)
        return None if i < 0 else self._slots[i]

    def _grow(self) -> None:
        try:
            self._slots.extend([None] * ENTRY_MIN_SIZE)
        except MemoryError as e:
            raise AllocationError(
                f'{self}: unable to grow beyond {self.capacity} pairs.'
            ) from e
        logging.debug('%s grown to %d pairs', self, self.capacity)

    def put(self, key: str, value: str) -> KeyValue:
        """Replace the value of `key`, or append a new pair.

        Appending breaks hash order. Raises `AllocationError`
        with nothing appended if the array could not grow.
        """
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidArgumentError(
                f'{self}: pairs are str: str, got {key!r}: {value!r}.')
        if (kv := self.find(key)) is not None:
            kv.value = value
            return kv
        if self._count == len(self._slots):
            self._grow()
        kv = KeyValue(key, value)
        self._slots[self._count] = kv
        self._count += 1
        self.order = SortState.UNORDERED
        return kv

    def erase(self, key: str) -> bool:
        """Tombstone the pair of `key`. False if there was none."""
        i = self._index(key)
        if i < 0:
            return False
        self._slots[i] = None
        self.order = SortState.UNORDERED
        return True

    def pairs(self) -> Iterator[KeyValue]:
        """Live pairs in current array order."""
        for i in range(self._count):
            if (kv := self._slots[i]) is not None:
                yield kv

    def sort_by_hash(self) -> None:
        if not self._count or self.order is SortState.HASH_ORDERED:
            return
        self._slots[:self._count] = sorted(
            self._slots[:self._count], key=_hash_key)
        self.order = SortState.HASH_ORDERED

    def sort_by_name(self) -> None:
        # tombstones compare equal to each other and cluster in front.
        self.order = SortState.UNORDERED
        if not self._count:
            return
        self._slots[:self._count] = sorted(
            self._slots[:self._count],
            key=lambda kv: (0, '') if kv is None else (1, kv.key))

    def dump(self, out: TextIO) -> None:
        for kv in self.pairs():
            out.write(PAIR_FORMAT.format(key=kv.key, value=kv.value))

    def _release(self) -> None:
        """Drop every pair. The section is inert afterwards."""
        self._slots = []
        self._count = 0
        self.order = SortState.UNORDERED

    def __getitem__(self, key: str) -> str:
        if (kv := self.find(key)) is None:
            raise KeyError(key)
        return kv.value

    def __setitem__(self, key: str, value: str) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.erase(key):
            raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (kv.key for kv in self.pairs())

    def __len__(self) -> int:
        return sum(1 for _ in self.pairs())

    def __str__(self) -> str:
        return '<header>' if self._name is None else f'[{self._name}]'

    def __repr__(self) -> str:
        return '%s { .cnt = %d, .len = %d, .order = %s }' % (
            self, self._count, self.capacity, self.order.value)
