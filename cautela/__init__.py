#!/usr/bin/env python

"""
    Cautela, a custody loan ("cautela") and equipment inventory
    management system.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

__version__ = '0.1.0'
