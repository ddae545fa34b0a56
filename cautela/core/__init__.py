#!/usr/bin/env python

"""
    Core module for Cautela: database, models and the services
    built on them.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from cautela.core import db as database
from cautela.core import models

database.init()

__all__ = ["database", "models"]
