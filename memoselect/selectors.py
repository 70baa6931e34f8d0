"""
Selectors are functions that derive a value from some external context: `selector(context, *aux_params) => value`.

Plain selectors are just that; they are written by the user and are not memoized. Composite selectors are constructed
out of one or more input selectors and a "combiner", using `create_selector`. Calling a composite selector evaluates all
input selectors (in order), and calls the combiner on their values; but only if at least one of those values changed
since the previous call:

>>> def combine(x, y):
...     print("COMBINING", x, y)
...     return x + y
...
>>> select_sum = create_selector(lambda context: context['x'], lambda context: context['y'], combine)
>>> context = {'x': 1, 'y': 2}
>>> select_sum(context)
COMBINING 1 2
3
>>> select_sum(dict(context))
3
>>> select_sum({'x': 1, 'y': 5})
COMBINING 1 5
6
>>> select_sum.recomputations()
2

Because composite selectors have the same shape as plain ones, they can be used as input selectors themselves; this
yields a (directed, acyclic) graph of derived values, evaluated lazily whenever the top of the graph is asked for.

## Auxiliary parameters

Any arguments after the context are passed on to each of the input selectors, and are appended to the arguments of the
combiner. They are not considered when deciding whether to recompute: aux params are typically built anew at every call
site, which would make any comparison fail. If you want them to be considered after all, use a selector creator with
`aux_params_in_key=True`.

>>> select_x = create_selector(lambda context, *aux: context['x'], lambda x, *aux: (x, aux))
>>> select_x(context, 100)
(1, (100,))
>>> select_x(context, 200)
(1, (100,))
>>> select_x({'x': 2}, 200)
(2, (200,))

## Construction

Selectors are typically constructed once (at module load) and used often; mistakes in their construction are
programming errors, and are reported at construction time:

>>> create_selector(combine)
Traceback (most recent call last):
memoselect.selectors.SelectorConstructionError: Expected at least one input selector and a combiner (programming error)
"""

import logging
from collections.abc import Mapping

from memoselect.memoization import DEFAULT_MEMOIZE
from memoselect.utils import describe

logger = logging.getLogger(__name__)


class SelectorConstructionError(TypeError):
    pass


def normalize_input_selectors(args):
    """Splits the arguments of create_selector into the input selectors and the combiner; the input selectors may be
    given separately or as a single list or tuple. Returns (tuple_of_input_selectors, combiner)."""

    if len(args) < 2:
        raise SelectorConstructionError("Expected at least one input selector and a combiner (programming error)")

    input_selectors, combiner = args[:-1], args[-1]

    if len(input_selectors) == 1 and isinstance(input_selectors[0], (list, tuple)):
        input_selectors = tuple(input_selectors[0])

    if len(input_selectors) == 0:
        raise SelectorConstructionError("Expected at least one input selector (programming error)")

    for index, input_selector in enumerate(input_selectors):
        if not callable(input_selector):
            raise SelectorConstructionError("Input selector %s is not callable but a '%s' (programming error)" % (
                index, type(input_selector).__name__))

    if not callable(combiner):
        raise SelectorConstructionError("The combiner is not callable but a '%s' (programming error)" % (
            type(combiner).__name__))

    return input_selectors, combiner


def create_selector_creator(memoize_impl, *memoize_config, aux_params_in_key=False):
    """
    Creates a version of `create_selector` that memoizes using `memoize_impl(fn, *memoize_config)` rather than using the
    default memoizer. `memoize_impl` may implement any caching policy; all we assume is that calling the result with
    the same logical arguments may skip calling `fn`.

    `aux_params_in_key` decides whether aux params are part of the arguments that the memoizer sees (after the values of
    the input selectors), or are just passed through to the combiner (the default).
    """

    if not callable(memoize_impl):
        raise SelectorConstructionError("The memoize implementation is not callable but a '%s' (programming error)" % (
            type(memoize_impl).__name__))

    def create_selector_variant(*args):
        input_selectors, combiner = normalize_input_selectors(args)

        recomputations = 0
        pending_aux_params = ()  # only meaningful during a call to `selector`

        def compute(*values):
            nonlocal recomputations

            logger.debug("recomputing %s", describe(combiner))
            if aux_params_in_key:
                result = combiner(*values)  # i.e. the aux params are already part of `values`
            else:
                result = combiner(*values, *pending_aux_params)

            recomputations += 1
            return result

        compute.__name__ = compute.__qualname__ = describe(combiner)
        memoized_compute = memoize_impl(compute, *memoize_config)

        def selector(context, *aux_params):
            nonlocal pending_aux_params

            values = tuple(input_selector(context, *aux_params) for input_selector in input_selectors)

            if aux_params_in_key:
                return memoized_compute(*values, *aux_params)

            pending_aux_params = aux_params
            try:
                return memoized_compute(*values)
            finally:
                pending_aux_params = ()

        def get_recomputations():
            return recomputations

        def reset_recomputations():
            nonlocal recomputations
            recomputations = 0

        selector.result_func = combiner
        selector.dependencies = input_selectors
        selector.recomputations = get_recomputations
        selector.reset_recomputations = reset_recomputations
        return selector

    return create_selector_variant


create_selector = create_selector_creator(DEFAULT_MEMOIZE)


def create_structured_selector(selectors_by_key, selector_creator=create_selector):
    """
    Combines a mapping of input selectors into a single selector, which returns a dict with the same keys mapped to the
    values of those selectors.

    >>> select_point = create_structured_selector({
    ...     'x': lambda context: context['x'],
    ...     'y': lambda context: context['y'],
    ... })
    >>> context = {'x': 1, 'y': 2, 'z': 3}
    >>> select_point(context)
    {'x': 1, 'y': 2}
    >>> select_point(context) is select_point(dict(context, z=4))
    True
    """

    if not isinstance(selectors_by_key, Mapping):
        raise SelectorConstructionError("Expected a mapping of input selectors but got a '%s' (programming error)" % (
            type(selectors_by_key).__name__))

    keys = tuple(selectors_by_key.keys())

    def combine_into_dict(*values):
        # zip() drops any aux params that trail the values
        return dict(zip(keys, values))

    return selector_creator([selectors_by_key[key] for key in keys], combine_into_dict)
