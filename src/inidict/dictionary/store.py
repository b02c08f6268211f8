# -*- encoding: utf-8 -*-
# @File   : store.py
# @Time   : 2024/11/03 00:14:57
# @Author : pyinidict developers

"""The whole INI document: header pairs plus an array of named sections.

Values are addressed by `section:key`, or a bare `key` for the header.
Only the first `:` separates, so `a:b:c` is key `b:c` of section `a`.

Lookups are linear until `sort_for_search()` orders everything by hash,
then binary. Any new section (or new pair in a section) drops that
order again for the array it was appended to.
"""

import logging
from collections.abc import Iterator, MutableMapping
from io import StringIO
from operator import attrgetter
from re import compile as regex
from typing import TextIO, TypeVar

from .consts import (
    DICT_MIN_SIZE,
    ENTRY_MIN_SIZE,
    KEY_DELIMITER,
    SECTION_FORMAT,
    SortState
)
from .errors import AllocationError, EmptyStoreError, InvalidArgumentError
from .model import IniSection, KeyValue, _hash_key, dictionary_hash, locate

T = TypeVar('T')

_section_ident = attrgetter('name')
_INT_PREFIX = regex(r'\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)')


class _SectionCache:
    """The section resolved last, tried before any search.

    Users tend to read a section key by key, so most lookups hit it.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._last: IniSection | None = None

    def lookup(self, name: str, hash_: int) -> IniSection | None:
        last = self._last
        if last is None or last.hash != hash_ or last.name != name:
            return None
        return last

    def remember(self, section: IniSection) -> None:
        if self.enabled:
            self._last = section

    def forget(self, section: IniSection | None = None) -> None:
        if section is None or self._last is section:
            self._last = None


class IniStore(MutableMapping[str, str]):
    """INI dictionary. Works as a `str: str` mapping over addresses:

        ```python
        ini = IniStore()
        ini['globval'] = 'global value'   # header pair
        ini['Pizza:Ham'] = 'yes'          # creates [Pizza]
        ini.get('pizza:ham', 'no')        # 'no', names are case-sensitive
        ini.set('Pizza', None)            # drops [Pizza] as a whole
        ```

    `set()` is the write path the INI reader uses. Deleting something absent
    through it is fine, unlike `del ini[address]` which raises `KeyError`.
    """

    def __init__(self, size: int = 0, *, cache: bool = True) -> None:
        """`size` is a hint of how many sections to expect, 0 if unknown.

        Pass `cache=False` to always search sections.
        """
        self._size_hint = size
        self._cache = _SectionCache(cache)
        self._reset()

    def _reset(self) -> None:
        self._header = IniSection(None, ENTRY_MIN_SIZE)
        self._slots: list[IniSection | None] = (
            [None] * max(self._size_hint, DICT_MIN_SIZE))
        self._count = 0
        self.order = SortState.UNORDERED
        self._cache.forget()

    @property
    def header(self) -> IniSection:
        """Pairs that do not belong to any section."""
        return self._header

    @property
    def count(self) -> int:
        """Section slots in use, deleted ones included."""
        return self._count

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @staticmethod
    def split_address(address: str) -> tuple[str | None, str]:
        name, sep, key = address.partition(KEY_DELIMITER)
        return (name, key) if sep else (None, address)

    def _section_index(self, name: str, hash_: int) -> int:
        return locate(
            self._slots, self._count, name, hash_,
            self.order is SortState.HASH_ORDERED, _section_ident)

    def find_section(self, name: str) -> IniSection | None:
        hash_ = dictionary_hash(name)
        if (section := self._cache.lookup(name, hash_)) is not None:
            return section
        i = self._section_index(name, hash_)
        if i < 0:
            return None
        section = self._slots[i]
        self._cache.remember(section)
        return section

    def sections(self) -> Iterator[IniSection]:
        """Live sections in current array order."""
        for i in range(self._count):
            if (section := self._slots[i]) is not None:
                yield section

    def _find_pair(self, address: str) -> KeyValue | None:
        if not isinstance(address, str):
            return None
        name, key = self.split_address(address)
        section = self._header if name is None else self.find_section(name)
        return None if section is None else section.find(key)

    def _grow(self) -> None:
        try:
            self._slots.extend([None] * DICT_MIN_SIZE)
        except MemoryError as e:
            raise AllocationError(
                f'unable to grow beyond {self.capacity} sections.') from e
        logging.debug('store grown to %d sections', self.capacity)

    def _add_section(self, name: str, key: str, value: str) -> IniSection:
        if self._count == len(self._slots):
            self._grow()
        # fill it before it gets a slot, so a failed put leaves no section.
        section = IniSection(name)
        section.put(key, value)
        self._slots[self._count] = section
        self._count += 1
        self.order = SortState.UNORDERED
        logging.debug('new section %s with hash %d', section, section.hash)
        return section

    def _delete_section(self, name: str) -> bool:
        i = self._section_index(name, dictionary_hash(name))
        if i < 0:
            return False
        section = self._slots[i]
        self._cache.forget(section)
        section._release()
        self._slots[i] = None
        self.order = SortState.UNORDERED
        logging.debug('section [%s] deleted', name)
        return True

    def set(self, address: str, value: str | None) -> None:
        """Set `address` to `value`, or erase it when `value` is None.

        Erasing a bare `name` drops section `name` as a whole if there is
        one, otherwise the header key `name`. `name:` always means the
        section.

        Raises:
            InvalidArgumentError: `address` or `value` is not a string.
            AllocationError: no room for a new pair or section. The store
                is left as it was.
        """
        if not isinstance(address, str):
            raise InvalidArgumentError(
                f'address should be str, got {address!r}.')
        if value is not None and not isinstance(value, str):
            raise InvalidArgumentError(
                f'value of "{address}" should be str or None, got {value!r}.')

        name, key = self.split_address(address)
        if name is None:
            if value is None and self._delete_section(key):
                return
            section = self._header
        elif value is None and not key:
            self._delete_section(name)
            return
        else:
            section = self.find_section(name)

        if value is None:
            if section is not None:
                section.erase(key)
            return
        if section is None:
            section = self._add_section(name, key, value)
        else:
            section.put(key, value)
        if section is not self._header:
            self._cache.remember(section)

    def get(self, address: str, default: T = None) -> str | T:
        """Value at `address`, or `default` itself when there is none."""
        kv = self._find_pair(address)
        return default if kv is None else kv.value

    def getstring(self, address: str, default: str | None = None) -> str | None:
        return self.get(address, default)

    def getboolean(
        self, address: str, default: bool | None = None
    ) -> bool | None:
        """`y`, `t`, `1` are true, `n`, `f`, `0` false, by first char."""
        value = self.get(address)
        if not value:
            return default
        if value[0] in 'yYtT1':
            return True
        if value[0] in 'nNfF0':
            return False
        return default

    def getint(self, address: str, default: int | None = None) -> int | None:
        """Leading integer of the value, read like C's `strtol(v, NULL, 0)`.

        `0x` means hex, any other leading `0` octal, so `010` is 8.
        Trailing text is ignored (`12abc` is 12, `12.5` is 12).
        `default` when the value does not start with a number.
        """
        value = self.get(address)
        if value is None:
            return default
        if (m := _INT_PREFIX.match(value)) is None:
            logging.debug('"%s" = %r is not an int', address, value)
            return default
        sign, digits = m.groups()
        if digits[:2] in ('0x', '0X'):
            n = int(digits, 16)
        elif digits[0] == '0':
            n = int(digits, 8)
        else:
            n = int(digits)
        return -n if sign == '-' else n

    def getfloat(
        self, address: str, default: float | None = None
    ) -> float | None:
        value = self.get(address)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logging.debug('"%s" = %r is not a float', address, value)
            return default

    def getlist(self, address: str, sep: str = ',') -> list[str] | tuple:
        value = self.get(address)
        return () if value is None else [i.strip() for i in value.split(sep)]

    def sort_for_search(self) -> None:
        """Order pairs and sections by hash, so lookups go binary."""
        self._header.sort_by_hash()
        for section in self.sections():
            section.sort_by_hash()
        self._slots[:self._count] = sorted(
            self._slots[:self._count], key=_hash_key)
        self.order = SortState.HASH_ORDERED

    def sort_for_display(self) -> None:
        """Order pairs and sections by name, for dumping.

        Lookups are linear again afterwards.
        """
        self._header.sort_by_name()
        for section in self.sections():
            section.sort_by_name()
        self._slots[:self._count] = sorted(
            self._slots[:self._count],
            key=lambda s: (0, '') if s is None else (1, s.name))
        self.order = SortState.UNORDERED

    def dump(self, out: TextIO) -> None:
        """Write as INI text, in current array order.

        Raises:
            EmptyStoreError: no section was ever added. Header pairs
                alone are not dumped.
        """
        if self._count < 1:
            raise EmptyStoreError('there is no section to dump.')
        self._header.dump(out)
        for section in self.sections():
            out.write(SECTION_FORMAT.format(name=section.name))
            section.dump(out)

    def dumps(self) -> str:
        buf = StringIO()
        self.dump(buf)
        return buf.getvalue()

    def clear(self) -> None:
        """Release every pair and section, as freshly constructed."""
        self._header._release()
        for section in self.sections():
            section._release()
        self._reset()

    def __getitem__(self, address: str) -> str:
        if (kv := self._find_pair(address)) is None:
            raise KeyError(address)
        return kv.value

    def __setitem__(self, address: str, value: str) -> None:
        self.set(address, value)

    def __delitem__(self, address: str) -> None:
        # a single pair only, never a whole section.
        if not isinstance(address, str):
            raise KeyError(address)
        name, key = self.split_address(address)
        section = self._header if name is None else self.find_section(name)
        if section is None or not section.erase(key):
            raise KeyError(address)

    def __iter__(self) -> Iterator[str]:
        yield from self._header
        for section in self.sections():
            for key in section:
                yield f'{section.name}{KEY_DELIMITER}{key}'

    def __len__(self) -> int:
        return len(self._header) + sum(len(s) for s in self.sections())

    def __repr__(self) -> str:
        return 'IniStore { .n = %d, .len = %d, .order = %s }' % (
            self._count, self.capacity, self.order.value)
