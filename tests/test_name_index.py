from services.name_index import NameIndex


def test_lifecycle():
    index = NameIndex()
    assert not index.ready
    index.init({'ピカチュウ': 25, 'ピチュー': '172'}, {'pikachu': 25})
    assert index.ready
    assert index.lookup('ぴかちゅう') == '25'
    assert index.lookup('PIKACHU') == '25'
    index.insert('ライチュウ', 26, aliases=('raichu',))
    assert index.name_for(26) == 'ライチュウ'
    assert 26 in index and '26' in index
    assert len(index) == 3
    index.clear()
    assert len(index) == 0
    assert not index.ready
    assert index.lookup('ピカチュウ') is None


def test_search_is_substring_and_sorted_by_id():
    index = NameIndex()
    index.init({'ピチュー': 172, 'ピカチュウ': 25, 'ライチュウ': 26, 'ヒトカゲ': 4})
    assert index.search('チュ') == ['25', '26', '172']
    assert index.search('ぴ') == ['25', '172']
    assert index.search('') == []
    assert index.search('リザードン') == []


def test_insert_is_idempotent_last_write_wins():
    index = NameIndex()
    index.insert('ピカチュウ', 25)
    index.insert('ピカチュウ', 25)
    assert index.search('ピカ') == ['25']
    index.insert('ピカチュウ', '10080')
    assert index.lookup('ピカチュウ') == '10080'


def test_has_id_covers_alias_only_entries():
    index = NameIndex()
    index.insert(None, 12, aliases=('porygon2',))
    assert index.has_id('12')
    assert 12 not in index
    assert not index.has_id(2)


def test_round_trip_through_dict():
    index = NameIndex()
    index.insert('ゼニガメ', 7, aliases=('squirtle',))
    copy = NameIndex()
    copy.init(**index.to_dict())
    assert copy.lookup('squirtle') == '7'
    assert copy.name_for(7) == 'ゼニガメ'
