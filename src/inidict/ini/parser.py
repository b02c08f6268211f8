# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/03 16:41:09
# @Author : pyinidict developers

"""INI text to `IniStore` calls, and back.

What the reader understands:

    ```ini
    # comment
    ; comment too
    globval = "global value"      ; quoted values are taken verbatim
    Table:cup = 3                 ; before any section: key of [Table]
    [Pizza]
    Ham = yes                     ; stored as `Pizza:Ham`
    Toppings = ham, \\
               cheese             ; trailing backslash joins lines
    ```

Everything is handed to `IniStore.set()`, so a later duplicate wins.
"""

import logging
from io import StringIO
from os import PathLike
from re import compile as regex
from typing import Iterator, TextIO
from warnings import warn

import chardet

from ..abstract import FileHandler
from ..dictionary import IniStore
from ..dictionary.consts import KEY_DELIMITER

_COMMENT = regex(r'[;#]')


def _logical_lines(buf: TextIO) -> Iterator[tuple[int, str]]:
    pending, lineno = '', 0
    while i := buf.readline():
        lineno += 1
        line = i.strip()
        if line.endswith('\\'):
            pending += line[:-1]
            continue
        yield lineno, pending + line
        pending = ''
    if pending:
        yield lineno, pending


def _parse_value(raw: str) -> str:
    raw = raw.strip()
    if raw and raw[0] in '"\'':
        end = raw.find(raw[0], 1)
        if end > 0:
            return raw[1:end]
    return _COMMENT.split(raw, maxsplit=1)[0].rstrip()


class IniParser(FileHandler[IniStore]):
    def __init__(
        self, filename: str | PathLike[str],
        encoding: str | None = None, *,
        lowercase: bool = False
    ) -> None:
        super().__init__(filename)
        self._codec = encoding
        self._lowercase = lowercase

    @staticmethod
    def readstream(
        buf: TextIO, ins: IniStore | None = None, *,
        lowercase: bool = False
    ) -> IniStore:
        """Read decoded INI text into `ins` (a new store if None).

        Just use `self.read()` unless the text is already in memory.
        `lowercase=True` folds section names and keys, since lookups
        are case-sensitive.
        """
        if ins is None:
            ins = IniStore()
        section: str | None = None
        for lineno, line in _logical_lines(buf):
            if not line or line[0] in ';#':
                continue
            if line[0] == '[':
                if (end := line.find(']')) < 0:
                    warn(f'line {lineno}: unclosed section "{line}".')
                    continue
                section = line[1:end].strip()
                if lowercase:
                    section = section.lower()
                continue
            if '=' not in line:
                warn(f'line {lineno}: neither section nor pair "{line}".')
                continue
            key, val = line.split('=', 1)
            if not (key := key.strip()):
                warn(f'line {lineno}: pair without key "{line}".')
                continue
            if lowercase:
                key = key.lower()
            ins.set(
                key if section is None
                else f'{section}{KEY_DELIMITER}{key}',
                _parse_value(val))
        return ins

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if (codec is None or codec['encoding'] is None
                or codec['confidence'] < 0.8):
            codec = {'encoding': 'utf-8'}

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
        except UnicodeDecodeError:
            buf = raw.decode('gbk')
        return StringIO(buf)

    def read(self) -> IniStore:
        try:
            # encoding None means the system default.
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return self.readstream(fp, lowercase=self._lowercase)
        except UnicodeDecodeError:
            logging.info('%s is not %s, guessing its encoding',
                         self._fn, self._codec or 'the default encoding')
            return self.readstream(
                self._decode_file(self._fn), lowercase=self._lowercase)

    def write(self, instance: IniStore, *, sort: bool = True) -> None:
        """Save to the file, sorted by names unless `sort=False`.

        Raises `EmptyStoreError` before touching the file
        if `instance` has no section.
        """
        if sort:
            instance.sort_for_display()
        text = instance.dumps()
        with open(self._fn, 'w', encoding=self._codec or 'utf-8') as fp:
            fp.write(text)

    def __str__(self) -> str:
        return "INI file: " + super().__str__() + f" ({self._codec})"
