from erp.services.duplicates import (
    DuplicateGroup, ScanTarget, candidate_pairs, detect_candidates, group_duplicates, normalize,
)


def test_case_insensitive_name_grouping():
    records = [{'id': 'a', 'name': 'Acme'}, {'id': 'b', 'name': 'ACME'}, {'id': 'c', 'name': 'Other'}]
    groups = group_duplicates(records, 'name', case_insensitive=True)
    assert len(groups) == 1
    assert groups[0].ids == ['a', 'b']
    assert candidate_pairs(groups[0]) == [('a', 'b')]


def test_group_keeps_first_seen_original_value():
    records = [{'id': 'x', 'name': '  Acme Ltd '}, {'id': 'y', 'name': 'acme ltd'}]
    groups = group_duplicates(records, 'name', case_insensitive=True)
    assert groups[0].value == 'Acme Ltd'


def test_null_and_blank_values_never_group():
    records = [
        {'id': '1', 'phone': None},
        {'id': '2', 'phone': ''},
        {'id': '3', 'phone': '   '},
        {'id': '4', 'phone': None},
        {'id': '5', 'phone': ''},
        {'id': '6'},
    ]
    assert group_duplicates(records, 'phone', case_insensitive=False) == []


def test_exact_match_is_case_sensitive():
    records = [{'id': '1', 'code': 'ab-1'}, {'id': '2', 'code': 'AB-1'}, {'id': '3', 'code': 'ab-1'}]
    groups = group_duplicates(records, 'code', case_insensitive=False)
    assert [g.ids for g in groups] == [['1', '3']]


def test_exact_match_ignores_surrounding_whitespace():
    records = [{'id': '1', 'phone': '+968 9000 0000'}, {'id': '2', 'phone': '+968 9000 0000 '}]
    assert len(group_duplicates(records, 'phone', case_insensitive=False)) == 1


def test_casefold_normalization():
    assert normalize('STRASSE', True) == normalize('straße', True)
    assert normalize('Mixed', False) == 'Mixed'
    assert normalize(None, True) is None
    assert normalize(' \t', True) is None


def test_pairs_are_sorted_and_unordered():
    group = DuplicateGroup(field='email', value='x@y.com', ids=['c', 'a', 'b'])
    assert candidate_pairs(group) == [('a', 'c'), ('b', 'c'), ('a', 'b')]


def test_repeated_id_does_not_pair_with_itself():
    records = [{'id': 'a', 'name': 'Acme'}, {'id': 'a', 'name': 'ACME'}]
    assert group_duplicates(records, 'name', case_insensitive=True) == []


def test_detect_candidates_across_entity_types():
    snapshots = {
        'Client': [
            {'id': 'c1', 'name': 'Acme', 'phone': '111', 'email': None},
            {'id': 'c2', 'name': 'Beta', 'phone': '111', 'email': ''},
        ],
        'Staff': [
            {'id': 's1', 'name': 'Ann', 'email': 'ANN@x.com', 'phone': None},
            {'id': 's2', 'name': 'Anne', 'email': 'ann@x.com', 'phone': None},
        ],
        'InventoryItem': [],
    }
    keys = {c.key: c.value for c in detect_candidates(snapshots)}
    assert keys == {
        ('Client', 'phone', 'c1', 'c2'): '111',
        ('Staff', 'email', 's1', 's2'): 'ANN@x.com',
    }


def test_detect_candidates_with_custom_targets():
    snapshots = {'Client': [{'id': 'c1', 'name': 'Acme'}, {'id': 'c2', 'name': 'acme'}]}
    targets = [ScanTarget('Client', 'name', False)]
    assert detect_candidates(snapshots, targets) == []
