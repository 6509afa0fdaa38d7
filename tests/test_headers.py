from mocktail.headers import Headers


def test_empty_by_default():
    headers = Headers()
    assert len(headers) == 0
    assert not headers


def test_insert_skips_exact_duplicates():
    headers = Headers()
    headers.insert("header1", "value1")
    headers.insert("header1", "value1")
    headers.insert("header1", "value2")
    assert list(headers) == [("header1", "value1"), ("header1", "value2")]


def test_constructor_keeps_duplicates_in_order():
    headers = Headers([("a", "1"), ("a", "1")])
    assert len(headers) == 2


def test_get_returns_first_value():
    headers = Headers([("header1", "value1"), ("header1", "value2")])
    assert headers.get("header1") == "value1"
    assert headers.get("missing") is None


def test_remove_drops_all_values_for_name():
    headers = Headers([("a", "1"), ("b", "2"), ("a", "3")])
    headers.remove("a")
    assert list(headers) == [("b", "2")]


def test_clear():
    headers = Headers([("a", "1")])
    headers.clear()
    assert len(headers) == 0


def test_contains_and_contains_name():
    headers = Headers([("header1", "value1")])
    assert headers.contains("header1", "value1")
    assert not headers.contains("header1", "some_other_value")
    assert headers.contains_name("header1")
    assert not headers.contains_name("header2")


def test_subset_and_superset_with_extra_header():
    expected = Headers([("header1", "value1"), ("header2", "value2")])
    actual = Headers(
        [("header1", "value1"), ("header2", "value2"), ("header3", "value3")]
    )
    assert expected.is_subset(actual)
    assert actual.is_superset(expected)
    assert not actual.is_subset(expected)
    assert not expected.is_superset(actual)


def test_empty_is_subset_of_anything():
    assert Headers().is_subset(Headers([("a", "1")]))


def test_equality_is_order_sensitive():
    assert Headers([("a", "1"), ("b", "2")]) == Headers([("a", "1"), ("b", "2")])
    assert not Headers([("a", "1"), ("b", "2")]) == Headers([("b", "2"), ("a", "1")])


def test_ordering_is_lexicographic_over_pairs():
    assert Headers([("a", "1")]) < Headers([("b", "1")])
    assert Headers([("a", "1")]) < Headers([("a", "1"), ("a", "2")])


def test_copy_is_independent():
    original = Headers([("a", "1")])
    duplicate = original.copy()
    duplicate.insert("b", "2")
    assert len(original) == 1
    assert len(duplicate) == 2