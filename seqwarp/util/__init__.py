#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Utilities
=========

Input validation
----------------
.. autosummary::
    :toctree: generated/

    valid_sequence
    valid_cost
"""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach_stub(__name__, __file__)
