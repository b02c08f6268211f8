# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:35:47
# @Author : pyinidict developers

import logging

from .dictionary import (
    AllocationError,
    EmptyStoreError,
    IniSection,
    IniStore,
    InvalidArgumentError,
    StoreError,
    dictionary_hash
)
from .ini import IniParser

__all__ = [
    'IniStore', 'IniSection', 'IniParser', 'dictionary_hash',
    'StoreError', 'InvalidArgumentError', 'AllocationError', 'EmptyStoreError'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
