# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/11/02 21:40:12
# @Author : pyinidict developers

from enum import Enum


# minimal allocated number of pairs in a section, also its growth step.
ENTRY_MIN_SIZE = 10
# minimal allocated number of sections in a store, also its growth step.
DICT_MIN_SIZE = 5

KEY_DELIMITER = ':'

PAIR_FORMAT = '{key:<30} = {value}\n'
SECTION_FORMAT = '\n[{name}]\n'


class SortState(str, Enum):
    """Order of a slot array.

    Name order is never stored: it is the transient result of
    `sort_for_display()`, after which the array is just `UNORDERED`.
    """
    UNORDERED = 'unordered'
    HASH_ORDERED = 'hash'
