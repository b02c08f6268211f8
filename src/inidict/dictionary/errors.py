# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/11/02 21:52:40
# @Author : pyinidict developers


class StoreError(Exception):
    """Base of everything `IniStore` raises on purpose."""
    pass


class InvalidArgumentError(StoreError, ValueError):
    """Address or value of a write is not a string."""
    pass


class AllocationError(StoreError, MemoryError):
    """A slot array failed to grow. Nothing was added."""
    pass


class EmptyStoreError(StoreError):
    """`dump()` on a store that never held a named section."""
    pass
