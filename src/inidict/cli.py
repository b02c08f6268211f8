# -*- encoding: utf-8 -*-
# @File   : cli.py
# @Time   : 2024/11/04 20:33:51
# @Author : pyinidict developers

"""`inidict` command: load an INI file, edit it, dump it back.

    inidict rules.ini --set Pizza:pepper=yes --unset Table --get Wine:year
"""

import argparse
import logging
import sys
from typing import Sequence

from .dictionary import EmptyStoreError, StoreError
from .ini import IniParser


def _assignment(text: str) -> tuple[str, str]:
    address, sep, value = text.partition('=')
    if not sep or not address:
        raise argparse.ArgumentTypeError(
            f'expected ADDRESS=VALUE, got "{text}"')
    return address, value


def _erasure(text: str) -> tuple[str, None]:
    return text, None


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='inidict',
        description='Load an INI file, edit it and dump it back.')
    p.add_argument('file', help='INI file to load')
    p.add_argument('-e', '--encoding', default=None,
                   help='file encoding, guessed when decoding fails')
    p.add_argument('--lowercase', action='store_true',
                   help='fold section names and keys to lower case')
    # both go to `edits` so they apply in command line order.
    p.add_argument('--set', dest='edits', action='append',
                   type=_assignment, metavar='ADDRESS=VALUE',
                   help='set a value, e.g. Pizza:Ham=yes')
    p.add_argument('--unset', dest='edits', action='append',
                   type=_erasure, metavar='ADDRESS',
                   help='erase a key, or a whole section by its name')
    p.add_argument('--get', action='append', default=[], metavar='ADDRESS',
                   help='print a value, UNDEF if absent')
    p.add_argument('--sort', choices=('none', 'hash', 'name'),
                   default='name', help='order of the dump (default: name)')
    p.add_argument('-o', '--output', default=None,
                   help='write to this file instead of stdout')
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        ini = IniParser(args.file, args.encoding,
                        lowercase=args.lowercase).read()
        for address, value in args.edits or ():
            ini.set(address, value)
    except (OSError, UnicodeError, LookupError) as e:
        logging.error('cannot parse file %s: %s', args.file, e)
        return 1
    except StoreError as e:
        logging.error('%s: %s', args.file, e)
        return 1

    match args.sort:
        case 'hash':
            ini.sort_for_search()
        case 'name':
            ini.sort_for_display()

    for address in args.get:
        print(f'{address} = {ini.get(address, "UNDEF")}')

    try:
        if args.output is None:
            ini.dump(sys.stdout)
        else:
            IniParser(args.output, args.encoding).write(ini, sort=False)
    except EmptyStoreError as e:
        logging.warning('%s: %s', args.file, e)
        return 1
    except (OSError, UnicodeError, LookupError) as e:
        logging.error('cannot write %s: %s', args.output, e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
