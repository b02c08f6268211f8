# -*- encoding: utf-8 -*-
# @File   : __main__.py
# @Time   : 2024/11/04 21:02:16
# @Author : pyinidict developers

import sys

from .cli import main

sys.exit(main())
