#!/usr/bin/env python
# -*- encoding: utf-8 -*-
"""Exception classes for seqwarp"""


class SeqwarpError(Exception):
    """The root seqwarp exception class"""

    pass


class ParameterError(SeqwarpError):
    """Exception class for mal-formed inputs"""

    pass


class InvalidInputError(ParameterError):
    """Exception class for empty or inconsistent feature sequences"""

    pass


class NotComputedError(SeqwarpError):
    """Exception class for results requested before an alignment was computed"""

    pass
