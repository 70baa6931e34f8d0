"""
Utils for testing.
"""


class Recorded:
    """When (doc)testing memoization, what we're interested in is not just the returned values but also how often the
    underlying function was actually called. Counting by hand inside each test function is cumbersome; hence we created
    the below.

    >>> def double(x):
    ...     return x * 2
    ...
    >>> recorded = Recorded(double)
    >>> recorded(2), recorded(3)
    (4, 6)
    >>> recorded.calls
    [(2,), (3,)]
    >>> recorded.call_count
    2
    """

    def __init__(self, f):
        self.f = f
        self.calls = []
        self.__name__ = getattr(f, '__name__', 'recorded')

    def __call__(self, *args):
        self.calls.append(args)
        return self.f(*args)

    @property
    def call_count(self):
        return len(self.calls)


def unbounded_memoize(f):
    """Naive unbounded memoization, keyed on the arguments tuple; an alternative memoizer to plug into
    `create_selector_creator`. Arguments must be hashable."""
    cache = {}

    def memo(*args):
        if args not in cache:
            cache[args] = f(*args)
        return cache[args]

    memo.cache = cache
    return memo
