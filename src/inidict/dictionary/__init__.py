# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:38:05
# @Author : pyinidict developers

from .consts import SortState
from .errors import (
    AllocationError,
    EmptyStoreError,
    InvalidArgumentError,
    StoreError
)
from .model import IniSection, KeyValue, dictionary_hash
from .store import IniStore
