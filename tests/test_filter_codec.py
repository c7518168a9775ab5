import unittest

from starlette.datastructures import QueryParams

from rentboard.schemas.filters import FilterState
from rentboard.services.filter_codec import (
    build_query_string,
    parse_filters,
    parse_query_params,
    serialize_filters,
    split_multi,
    to_rpc_params,
)


class SplitMultiTests(unittest.TestCase):
    def test_trims_and_drops_empty_tokens(self):
        self.assertEqual(split_multi(' a, ,b '), ('a', 'b'))

    def test_sequence_is_joined_before_splitting(self):
        self.assertEqual(split_multi(['a,b', ' c ']), ('a', 'b', 'c'))

    def test_empty_results_are_absent(self):
        self.assertIsNone(split_multi(None))
        self.assertIsNone(split_multi(''))
        self.assertIsNone(split_multi(' , ,'))
        self.assertIsNone(split_multi([]))


class ParseFiltersTests(unittest.TestCase):
    def test_parse_all_dimensions(self):
        f = parse_filters({'fund': 'F1,F2', 'entity': ['E1'], 'country': 'DE', 'city': 'Berlin, Hamburg', 'q': 'acme'})
        self.assertEqual(f.fund, ('F1', 'F2'))
        self.assertEqual(f.entity, ('E1',))
        self.assertEqual(f.country, ('DE',))
        self.assertEqual(f.city, ('Berlin', 'Hamburg'))
        self.assertEqual(f.search, 'acme')
        self.assertFalse(f.indexable_only)

    def test_missing_dimensions_mean_unrestricted(self):
        f = parse_filters({})
        self.assertEqual(f, FilterState())
        self.assertIsNone(f.fund)
        self.assertIsNone(f.search)

    def test_indexable_only_requires_literal_one(self):
        self.assertTrue(parse_filters({'indexable': '1'}).indexable_only)
        for raw in ('true', '0', '', 'yes', ' 1', ['1']):
            self.assertFalse(parse_filters({'indexable': raw}).indexable_only, raw)
        self.assertFalse(parse_filters({}).indexable_only)

    def test_search_only_from_single_string(self):
        self.assertEqual(parse_filters({'q': '  spaced  '}).search, '  spaced  ')
        self.assertIsNone(parse_filters({'q': ['a', 'b']}).search)

    def test_query_params_with_repeated_keys(self):
        qp = QueryParams('fund=A&fund=B&city=X,Y&q=shop&indexable=1')
        f = parse_query_params(qp)
        self.assertEqual(f.fund, ('A', 'B'))
        self.assertEqual(f.city, ('X', 'Y'))
        self.assertEqual(f.search, 'shop')
        self.assertTrue(f.indexable_only)


class SerializeFiltersTests(unittest.TestCase):
    def test_omits_inactive_dimensions(self):
        f = FilterState(fund=('A', 'B'), search='')
        self.assertEqual(serialize_filters(f), {'fund': 'A,B'})
        self.assertEqual(serialize_filters(FilterState()), {})

    def test_round_trip(self):
        states = [
            FilterState(),
            FilterState(fund=('A',), entity=('E 1', 'E2'), country=('DE',), city=('Berlin',)),
            FilterState(indexable_only=True, search='acme gmbh'),
            FilterState(city=('São Paulo',), search='x,y'),
        ]
        for state in states:
            self.assertEqual(parse_filters(serialize_filters(state)), state)

    def test_empty_search_is_absent_after_round_trip(self):
        self.assertIsNone(parse_filters(serialize_filters(FilterState(search=''))).search)

    def test_build_query_string_with_extra_params(self):
        f = FilterState(fund=('A', 'B'), search='a b')
        self.assertEqual(build_query_string(f, view='line'), 'fund=A%2CB&q=a+b&view=line')
        self.assertEqual(build_query_string(FilterState(), view=None), '')


class RpcParamsTests(unittest.TestCase):
    def test_absent_dimensions_are_null_not_empty(self):
        params = to_rpc_params(FilterState(city=('Berlin',)))
        self.assertEqual(params['p_city'], ['Berlin'])
        self.assertIsNone(params['p_fund'])
        self.assertIsNone(params['p_entity'])
        self.assertIsNone(params['p_country'])
        self.assertIsNone(params['p_search'])
        self.assertIs(params['p_indexable_only'], False)

    def test_indexable_flag_is_optional(self):
        params = to_rpc_params(FilterState(indexable_only=True), include_indexable=False)
        self.assertNotIn('p_indexable_only', params)
        self.assertTrue(to_rpc_params(FilterState(indexable_only=True))['p_indexable_only'])


if __name__ == '__main__':
    unittest.main()
