#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Function caching"""

import os
from typing import Any, Callable, TypeVar
from joblib import Memory
from decorator import FunctionMaker


def _decorator_apply(dec, func):
    return FunctionMaker.create(
        func,
        "return decfunc(%(shortsignature)s)",
        dict(decfunc=dec(func)),
        __wrapped__=func,
    )


_F = TypeVar("_F", bound=Callable[..., Any])


class CacheManager(object):
    """The seqwarp cache manager wraps joblib.Memory with a __call__
    attribute, so that it may act as a decorator.

    Each decorated function declares a level; it is cached only when the
    manager's level is at least that high. With no cache location, every
    decoration is a no-op.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        level = kwargs.pop("level", 10)

        self.memory: Memory = Memory(*args, **kwargs)
        # smaller levels mean less caching
        self.level: int = level

    def __call__(self, level: int) -> Callable[[_F], _F]:
        """
        Cache with an explicitly defined level.

        Example usage:

        @cache(level=20)
        def expensive_alignment(some_arguments):
            ...
        """

        def wrapper(function):
            """Add an input/output cache to the specified function."""
            if self.memory.location is not None and self.level >= level:
                return _decorator_apply(self.memory.cache, function)

            else:
                return function

        return wrapper

    def clear(self, *args: Any, **kwargs: Any) -> None:
        """Clear the cache"""
        self.memory.clear(*args, **kwargs)


# Instantiate the cache from the environment
cache: CacheManager = CacheManager(
    os.environ.get("SEQWARP_CACHE_DIR", None),
    mmap_mode=os.environ.get("SEQWARP_CACHE_MMAP", None),
    compress=int(os.environ.get("SEQWARP_CACHE_COMPRESS", 0)),
    verbose=int(os.environ.get("SEQWARP_CACHE_VERBOSE", 0)),
    level=int(os.environ.get("SEQWARP_CACHE_LEVEL", 10)),
)
