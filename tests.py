import unittest
import doctest

import test_utils

from memoselect import equality
from memoselect import memoization
from memoselect import selectors
from memoselect import utils

from memoselect import (
    SelectorConstructionError,
    create_selector,
    create_selector_creator,
    create_structured_selector,
    memoize,
    reference_equality,
    structural_equality,
)

from test_utils import Recorded, unbounded_memoize


def load_tests(loader, tests, ignore):
    # Test the docstrings inside our actual codebase
    tests.addTests(doctest.DocTestSuite(utils))
    tests.addTests(doctest.DocTestSuite(equality))
    tests.addTests(doctest.DocTestSuite(memoization))
    tests.addTests(doctest.DocTestSuite(selectors))
    tests.addTests(doctest.DocTestSuite(test_utils))

    # Some tests in the doctests style are too large to nicely fit into a docstring; better to keep them separate:
    tests.addTests(doctest.DocFileSuite("doctests/composition.txt"))
    tests.addTests(doctest.DocFileSuite("doctests/pluggable_memoization.txt"))

    return tests


class MemoizeTestCase(unittest.TestCase):

    def test_equal_arguments_call_once(self):
        f = Recorded(lambda x, y: (x, y))
        memoized = memoize(f)
        a, b = object(), object()

        self.assertEqual((a, b), memoized(a, b))
        self.assertEqual((a, b), memoized(a, b))
        self.assertEqual(1, f.call_count)

    def test_any_changed_argument_calls_again_with_all_arguments(self):
        f = Recorded(lambda x, y: (x, y))
        memoized = memoize(f)
        a, b, c = object(), object(), object()

        memoized(a, b)
        memoized(a, c)
        self.assertEqual([(a, b), (a, c)], f.calls)

    def test_cache_holds_a_single_entry(self):
        f = Recorded(lambda x: x)
        memoized = memoize(f)
        a, b = object(), object()

        memoized(a)
        memoized(b)
        memoized(a)
        self.assertEqual(3, f.call_count)

    def test_changed_argument_count_is_a_miss(self):
        f = Recorded(lambda *args: len(args))
        memoized = memoize(f)
        a = object()

        self.assertEqual(1, memoized(a))
        self.assertEqual(2, memoized(a, a))
        self.assertEqual(2, f.call_count)

    def test_calls_without_arguments_are_memoized(self):
        f = Recorded(lambda: [])
        memoized = memoize(f)

        self.assertIs(memoized(), memoized())
        self.assertEqual(1, f.call_count)

    def test_reference_equality_is_the_default(self):
        f = Recorded(lambda x: x)
        memoized = memoize(f)

        memoized([1])
        memoized([1])
        self.assertEqual(2, f.call_count)

    def test_pluggable_equality(self):
        f = Recorded(lambda x: sum(x))
        memoized = memoize(f, structural_equality)

        memoized([1, 2])
        self.assertEqual(3, memoized([1, 2]))
        self.assertEqual(1, f.call_count)

    def test_failing_call_leaves_cache_untouched(self):
        outcomes = [ValueError("first"), "second", "third"]

        def f(x):
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        memoized = memoize(f)
        key = object()

        with self.assertRaises(ValueError):
            memoized(key)
        self.assertFalse(memoized.cache_slot.filled)

        # nothing was cached, so the computation is retried rather than some stale value returned
        self.assertEqual("second", memoized(key))
        self.assertEqual("second", memoized(key))

    def test_failing_call_keeps_previous_entry(self):
        def f(x):
            if x is None:
                raise ValueError("None")
            return [x]

        memoized = memoize(f)
        first = memoized(1)

        with self.assertRaises(ValueError):
            memoized(None)

        self.assertIs(first, memoized(1))

    def test_wraps_the_memoized_function(self):
        def some_function(x):
            """Some docstring"""
            return x

        memoized = memoize(some_function)
        self.assertEqual('some_function', memoized.__name__)
        self.assertEqual('Some docstring', memoized.__doc__)


class EqualityTestCase(unittest.TestCase):

    def test_reference_equality(self):
        a = [1]
        self.assertTrue(reference_equality(a, a))
        self.assertFalse(reference_equality(a, [1]))

    def test_structural_equality(self):
        self.assertTrue(structural_equality([1], [1]))
        self.assertFalse(structural_equality([1], [2]))


class CreateSelectorTestCase(unittest.TestCase):

    def test_combines_the_input_selector_values(self):
        select = create_selector(
            lambda context: context['a'],
            lambda context: context['b'],
            lambda a, b: a * b)

        self.assertEqual(6, select({'a': 2, 'b': 3}))

    def test_unchanged_inputs_do_not_recompute(self):
        combiner = Recorded(lambda a: [a])
        select = create_selector(lambda context: context['a'], combiner)

        result = select({'a': 1})
        self.assertIs(result, select({'a': 1, 'b': 2}))
        self.assertEqual(1, combiner.call_count)
        self.assertEqual(1, select.recomputations())

    def test_aux_params_do_not_cause_recomputation(self):
        combiner = Recorded(lambda a, *aux: a * 10)
        select = create_selector(lambda context, *aux: context['a'], combiner)

        self.assertEqual(10, select({'a': 1}, 100))
        self.assertEqual(10, select({'a': 1}, 200))
        self.assertEqual(1, combiner.call_count)

        self.assertEqual(20, select({'a': 2}, 200))
        self.assertEqual(2, combiner.call_count)

    def test_aux_params_are_passed_to_input_selectors_and_combiner(self):
        seen = []

        def input_selector(context, *aux):
            seen.append(aux)
            return context

        select = create_selector(input_selector, lambda context, *aux: (context, aux))
        context = object()

        self.assertEqual((context, ('x', 'y')), select(context, 'x', 'y'))
        self.assertEqual([('x', 'y')], seen)

    def test_no_aux_params_means_the_combiner_gets_only_the_values(self):
        select = create_selector(lambda context: context, lambda a: a)
        self.assertEqual(4, select(4))

    def test_input_selectors_are_evaluated_in_order(self):
        order = []

        def recording_selector(name):
            def selector(context):
                order.append(name)
                return name
            return selector

        select = create_selector(
            recording_selector('first'),
            recording_selector('second'),
            recording_selector('third'),
            lambda *values: values)

        self.assertEqual(('first', 'second', 'third'), select(None))
        self.assertEqual(['first', 'second', 'third'], order)

    def test_list_and_separate_arguments_are_equivalent(self):
        def select_a(context):
            return context['a']

        def select_b(context):
            return context['b']

        def combiner(a, b):
            return a - b

        separately = create_selector(select_a, select_b, combiner)
        as_list = create_selector([select_a, select_b], combiner)
        as_tuple = create_selector((select_a, select_b), combiner)

        for context in [{'a': 5, 'b': 3}, {'a': 0, 'b': 7}]:
            self.assertEqual(separately(context), as_list(context))
            self.assertEqual(separately(context), as_tuple(context))

        self.assertEqual(separately.dependencies, as_list.dependencies)

    def test_composite_selectors_compose(self):
        select_a_combiner = Recorded(lambda a: a + 1)
        select_d_combiner = Recorded(lambda d: d + 1)

        select_a = create_selector(lambda context: context['a'], select_a_combiner)
        select_c = create_selector(select_a, lambda context: context['b'], lambda a, b: a + b)
        select_d = create_selector(lambda context: context['d'], select_d_combiner)

        context = {'a': 1, 'b': 10, 'd': 100}
        self.assertEqual(12, select_c(context))
        self.assertEqual(101, select_d(context))

        context = dict(context, a=2)
        self.assertEqual(13, select_c(context))
        self.assertEqual(101, select_d(context))

        self.assertEqual(2, select_a_combiner.call_count)
        self.assertEqual(2, select_c.recomputations())
        self.assertEqual(1, select_d_combiner.call_count)

    def test_failing_combiner_is_retried(self):
        outcomes = [ValueError("first"), "second"]

        def combiner(a):
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        select = create_selector(lambda context: context['a'], combiner)
        context = {'a': 1}

        with self.assertRaises(ValueError):
            select(context)
        self.assertEqual(0, select.recomputations())

        self.assertEqual("second", select(context))
        self.assertEqual(1, select.recomputations())

    def test_failing_input_selector_propagates(self):
        combiner = Recorded(lambda a: a)
        select = create_selector(lambda context: context['a'], combiner)

        select({'a': 1})
        with self.assertRaises(KeyError):
            select({})

        self.assertEqual(1, select({'a': 1}))
        self.assertEqual(1, combiner.call_count)

    def test_result_func_and_reset_recomputations(self):
        def combiner(a):
            return a

        select = create_selector(lambda context: context, combiner)
        self.assertIs(combiner, select.result_func)

        select(1)
        select(2)
        self.assertEqual(2, select.recomputations())
        select.reset_recomputations()
        self.assertEqual(0, select.recomputations())

    def test_selectors_have_independent_caches(self):
        combiner = Recorded(lambda a: a)
        select_0 = create_selector(lambda context: context, combiner)
        select_1 = create_selector(lambda context: context, combiner)

        select_0(1)
        select_1(1)
        self.assertEqual(2, combiner.call_count)


class ConstructionErrorTestCase(unittest.TestCase):

    def test_no_arguments(self):
        with self.assertRaises(SelectorConstructionError):
            create_selector()

    def test_combiner_only(self):
        with self.assertRaises(SelectorConstructionError):
            create_selector(lambda a: a)

    def test_empty_list_of_input_selectors(self):
        with self.assertRaises(SelectorConstructionError):
            create_selector([], lambda a: a)

    def test_input_selector_not_callable(self):
        with self.assertRaises(SelectorConstructionError) as cm:
            create_selector(lambda context: context, 'a', lambda a, b: a)
        self.assertIn("Input selector 1", str(cm.exception))

    def test_combiner_not_callable(self):
        with self.assertRaises(SelectorConstructionError):
            create_selector(lambda context: context, None)

    def test_is_a_type_error(self):
        with self.assertRaises(TypeError):
            create_selector([lambda context: context, 3], lambda a, b: a)

    def test_memoize_impl_not_callable(self):
        with self.assertRaises(SelectorConstructionError):
            create_selector_creator(None)


class CreateSelectorCreatorTestCase(unittest.TestCase):

    def test_memoize_impl_receives_config(self):
        received = []

        def recording_memoize(fn, *config):
            received.append(config)
            return memoize(fn, *config)

        create = create_selector_creator(recording_memoize, structural_equality)
        create(lambda context: context, lambda a: a)
        self.assertEqual([(structural_equality,)], received)

    def test_structural_equality(self):
        combiner = Recorded(lambda values: sum(values))
        create = create_selector_creator(memoize, structural_equality)
        select = create(lambda context: list(context['values']), combiner)

        self.assertEqual(3, select({'values': (1, 2)}))
        self.assertEqual(3, select({'values': (1, 2)}))
        self.assertEqual(1, combiner.call_count)

    def test_unbounded_memoize(self):
        combiner = Recorded(lambda a: a * 2)
        create = create_selector_creator(unbounded_memoize)
        select = create(lambda context: context, combiner)

        for context in [1, 2, 1, 2, 3]:
            select(context)
        self.assertEqual(3, combiner.call_count)

    def test_aux_params_in_key(self):
        combiner = Recorded(lambda a, *aux: (a, aux))
        create = create_selector_creator(memoize, structural_equality, aux_params_in_key=True)
        select = create(lambda context, *aux: context['a'], combiner)

        self.assertEqual((1, (100,)), select({'a': 1}, 100))
        self.assertEqual((1, (100,)), select({'a': 1}, 100))
        self.assertEqual((1, (200,)), select({'a': 1}, 200))
        self.assertEqual(2, combiner.call_count)

    def test_default_creator_uses_memoize(self):
        combiner = Recorded(lambda a: a)
        select = create_selector_creator(memoize)(lambda context: context, combiner)
        a, b = object(), object()

        select(a)
        select(b)
        select(a)
        self.assertEqual(3, combiner.call_count)


class CreateStructuredSelectorTestCase(unittest.TestCase):

    def test_structure(self):
        select = create_structured_selector({
            'sum': create_selector(lambda context: context['values'], lambda values: sum(values)),
            'count': lambda context: len(context['values']),
        })

        self.assertEqual({'sum': 6, 'count': 3}, select({'values': (1, 2, 3)}))

    def test_result_is_reused(self):
        select = create_structured_selector({'a': lambda context: context['a']})
        a = object()

        self.assertIs(select({'a': a}), select({'a': a, 'b': 1}))

    def test_aux_params_are_not_part_of_the_result(self):
        select = create_structured_selector({'a': lambda context, *aux: aux})
        self.assertEqual({'a': ('x',)}, select(None, 'x'))

    def test_custom_selector_creator(self):
        create = create_selector_creator(memoize, structural_equality)
        select = create_structured_selector({'ids': lambda context: list(context)}, selector_creator=create)

        self.assertIs(select((1, 2)), select((1, 2)))

    def test_not_a_mapping(self):
        with self.assertRaises(SelectorConstructionError):
            create_structured_selector([lambda context: context])

    def test_empty_mapping(self):
        with self.assertRaises(SelectorConstructionError):
            create_structured_selector({})

    def test_value_not_callable(self):
        with self.assertRaises(SelectorConstructionError):
            create_structured_selector({'a': 1})


if __name__ == '__main__':
    unittest.main()
