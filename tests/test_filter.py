from clean_mapping import Filter


def test_filter_for_id():
    actual = Filter.for_id("507f")
    assert actual.field == "_id"
    assert actual.values == ["507f"]


def test_filter_for_id_custom_key():
    actual = Filter.for_id(2, identity_key="pk")
    assert actual.field == "pk"
    assert actual.values == [2]
