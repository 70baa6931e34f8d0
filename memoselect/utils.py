"""
Poor man's type system, used to check the arguments that memoized functions are constructed from.

>>> pmts(3, int)
>>> pmts("3", int)
Traceback (most recent call last):
AssertionError: Expected value of type 'int' but is type 'str'

>>> pmts_callable(len)
>>> pmts_callable(None, "the equality test")
Traceback (most recent call last):
AssertionError: Expected a callable but got 'NoneType'; the equality test
"""


def pmts(v, type_, extra_information=""):
    """Poor man's type system"""
    assert isinstance(v, type_), "Expected value of type '%s' but is type '%s'%s" % (
        type_.__name__,
        type(v).__name__,
        "" if not extra_information else "; %s" % extra_information
        )


def pmts_callable(v, extra_information=""):
    """Poor man's type system; for functions (and anything else you can call)"""
    assert callable(v), "Expected a callable but got '%s'%s" % (
        type(v).__name__,
        "" if not extra_information else "; %s" % extra_information
        )


def describe(f):
    # a short name for a function, for use in messages and logs
    return getattr(f, '__qualname__', None) or getattr(f, '__name__', None) or repr(f)
