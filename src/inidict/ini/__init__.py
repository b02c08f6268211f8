# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/03 16:40:22
# @Author : pyinidict developers

from .parser import IniParser
