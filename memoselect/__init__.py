"""
memoselect: memoized selectors, i.e. functions that derive values from some external context (typically: the state of
an application) and that only recompute when the parts of the context they depend on have changed.

The main design question is: how do we know that "the parts of the context they depend on" have changed, without
keeping a whole history of contexts around? The answer is: we split each selector into input selectors, which are cheap
and simply pick some parts out of the context, and a combiner, which may be expensive and derives the actual value from
those parts. Only the most recent values of the input selectors (and the most recent result) are kept; if the values of
the present call are unchanged with respect to those, the combiner is not called at all.

Another question is: what is "unchanged"? By default: the very same object (reference equality). This assumes contexts
are replaced rather than mutated in place; other equality tests (and indeed: other memoizers) may be plugged in through
`create_selector_creator`.
"""

from memoselect.equality import reference_equality, structural_equality
from memoselect.memoization import memoize
from memoselect.selectors import (
    SelectorConstructionError,
    create_selector,
    create_selector_creator,
    create_structured_selector,
)

__all__ = [
    'SelectorConstructionError',
    'create_selector',
    'create_selector_creator',
    'create_structured_selector',
    'memoize',
    'reference_equality',
    'structural_equality',
]
