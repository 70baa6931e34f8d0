"""
"There are only two hard things in Computer Science: cache invalidation and naming things." Here are some notes about
one of those (caching).

The memoizer in this module makes the question of cache invalidation a small one, by keeping exactly one entry around:
the arguments and the result of the most recent call. A cache entry is valid as long as the arguments of the present
call are "unchanged" with respect to it (what counts as unchanged is decided by the equality test); any change simply
replaces it.

This fits the way derived values are typically asked for: over and over again for the current state of some context,
with that state moving forward over time but rarely going back to an earlier point. Going back is allowed, but it costs
a recomputation:

>>> def double(x):
...     print("COMPUTING", x)
...     return x * 2
...
>>> memoized = memoize(double)
>>> memoized(1)
COMPUTING 1
2
>>> memoized(1)
2
>>> memoized(2)
COMPUTING 2
4
>>> memoized(1)
COMPUTING 1
2

Assuming that we don't have infinite storage space for our caches, other cache replacement policies may be plugged in
where the memoizer is used (see `selectors.create_selector_creator`). A single slot is what we ship.

If the wrapped function raises, the previous entry remains:
>>> def fragile(x):
...     if x < 0:
...         raise ValueError("negative")
...     return x
...
>>> memoized = memoize(fragile)
>>> memoized(3)
3
>>> memoized(-1)
Traceback (most recent call last):
ValueError: negative
>>> memoized.cache_slot
CacheSlot((3,) -> 3)
"""

import logging
from functools import wraps

from memoselect.equality import DEFAULT_EQUALITY_TEST
from memoselect.utils import pmts, pmts_callable, describe

logger = logging.getLogger(__name__)


class CacheSlot(object):
    """Holds at most one (arguments, result) pair: the most recent one."""

    def __init__(self):
        self.filled = False
        self.args = None
        self.result = None

    def __repr__(self):
        if not self.filled:
            return "CacheSlot(empty)"
        return "CacheSlot(%r -> %r)" % (self.args, self.result)

    def matches(self, args, equality_test):
        if not self.filled:
            return False  # the first call is always a miss

        if len(args) != len(self.args):
            return False

        return all(equality_test(new, old) for new, old in zip(args, self.args))

    def fill(self, args, result):
        # overwritten wholesale; never merged with the previous entry
        pmts(args, tuple)
        self.args = args
        self.result = result
        self.filled = True


def memoize(fn, equality_test=DEFAULT_EQUALITY_TEST):
    """
    Returns a memoized version of `fn`, which only calls `fn` if the positional arguments differ from those of the
    previous call according to `equality_test` (a predicate on 2 values of the same position).

    `fn` is expected to be pure with respect to its arguments; this is not checked.
    """
    pmts_callable(fn, "the function to memoize")
    pmts_callable(equality_test, "the equality test")

    slot = CacheSlot()

    @wraps(fn)
    def memoized(*args):
        if slot.matches(args, equality_test):
            return slot.result

        logger.debug("cache miss for %s", describe(fn))

        # the slot is only touched once `fn` returns; if it raises the previous entry remains
        result = fn(*args)
        slot.fill(args, result)
        return result

    memoized.cache_slot = slot
    return memoized


DEFAULT_MEMOIZE = memoize
