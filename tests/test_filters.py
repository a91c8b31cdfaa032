import unittest

from pathsoup.errors import InvalidFilterCombination
from pathsoup.filters import (
    ABSENT,
    ANY,
    PRESENT,
    Exact,
    FilterSpec,
    OneOf,
    WildcardValues,
    normalize,
)


class TestNormalizeName(unittest.TestCase):
    def test_omitted_name_without_text_matches_any_tag(self) -> None:
        spec = normalize()
        self.assertEqual(spec, FilterSpec(name=ANY, attrs={}, text=None, recursive=True, limit=0))

    def test_false_name_without_text_matches_any_tag(self) -> None:
        assert normalize(False).name is ANY

    def test_missing_name_with_text_is_text_search(self) -> None:
        assert normalize(None, text="foo").name is None
        assert normalize(False, text=True).name is None

    def test_true_name_is_any(self) -> None:
        assert normalize(True, text="foo").name is ANY

    def test_string_name(self) -> None:
        self.assertEqual(normalize("a").name, OneOf(("a",)))

    def test_list_name_keeps_order_and_drops_duplicates(self) -> None:
        self.assertEqual(normalize(["b", "a", "b"]).name, OneOf(("b", "a")))

    def test_set_name_is_sorted(self) -> None:
        self.assertEqual(normalize({"span", "a", "div"}).name, OneOf(("a", "div", "span")))

    def test_empty_name_list_is_empty_one_of(self) -> None:
        self.assertEqual(normalize([]).name, OneOf(()))

    def test_unsupported_name_shapes_raise(self) -> None:
        with self.assertRaises(InvalidFilterCombination):
            normalize({"a": 1})
        with self.assertRaises(InvalidFilterCombination):
            normalize(len)
        with self.assertRaises(InvalidFilterCombination):
            normalize(["a", 1])


class TestNormalizeText(unittest.TestCase):
    def test_text_variants(self) -> None:
        assert normalize(text=None).text is None
        assert normalize(text=False).text is None
        assert normalize(text=True).text is ANY
        self.assertEqual(normalize(text="x").text, OneOf(("x",)))
        self.assertEqual(normalize(text=["x", "y"]).text, OneOf(("x", "y")))

    def test_unsupported_text_raises(self) -> None:
        with self.assertRaises(InvalidFilterCombination):
            normalize(text=3)


class TestNormalizeAttrs(unittest.TestCase):
    def test_attribute_value_variants(self) -> None:
        spec = normalize(attrs={"a": None, "b": False, "c": True, "d": "x", "e": 1, "f": ["1", 2]})
        self.assertEqual(
            spec.attrs,
            {
                "a": ABSENT,
                "b": ABSENT,
                "c": PRESENT,
                "d": Exact("x"),
                "e": Exact("1"),
                "f": OneOf(("1", "2")),
            },
        )

    def test_true_inside_value_list_widens_to_present(self) -> None:
        assert normalize(id=["x", True]).attrs["id"] is PRESENT

    def test_none_inside_value_list_raises(self) -> None:
        with self.assertRaises(InvalidFilterCombination):
            normalize(id=["x", None])

    def test_string_attrs_is_wildcard(self) -> None:
        self.assertEqual(normalize("a", "foo bar").attrs, WildcardValues(("foo bar",)))

    def test_list_attrs_is_wildcard(self) -> None:
        self.assertEqual(normalize("div", ["a b", "a d"]).attrs, WildcardValues(("a b", "a d")))

    def test_empty_list_attrs_is_no_constraint(self) -> None:
        self.assertEqual(normalize("div", []).attrs, {})

    def test_keyword_filters_override_positional_mapping(self) -> None:
        spec = normalize("a", {"id": "1", "title": "t"}, id="2")
        self.assertEqual(spec.attrs, {"id": Exact("2"), "title": Exact("t")})

    def test_trailing_underscore_keyword_names(self) -> None:
        self.assertEqual(normalize(class_="x").attrs, {"class": Exact("x")})

    def test_keyword_filters_replace_wildcard_with_warning(self) -> None:
        with self.assertLogs("pathsoup.filters", level="WARNING") as logs:
            spec = normalize("a", "foo", id="1")
        self.assertEqual(spec.attrs, {"id": Exact("1")})
        assert "foo" in logs.output[0]

    def test_unsupported_attrs_raise(self) -> None:
        with self.assertRaises(InvalidFilterCombination):
            normalize(attrs=42)
        with self.assertRaises(InvalidFilterCombination):
            normalize(attrs={1: "x"})
        with self.assertRaises(InvalidFilterCombination):
            normalize(id=object())

    def test_caller_arguments_are_not_mutated(self) -> None:
        attrs = {"id": ["1", "2"]}
        names = ["a", "a", "b"]
        normalize(names, attrs, title="t")
        self.assertEqual(attrs, {"id": ["1", "2"]})
        self.assertEqual(names, ["a", "a", "b"])


class TestNormalizeScopeAndLimit(unittest.TestCase):
    def test_recursive_and_limit_are_kept(self) -> None:
        spec = normalize("a", recursive=False, limit=3)
        assert spec.recursive is False
        assert spec.limit == 3

    def test_bad_limits_raise(self) -> None:
        for limit in (-1, True, "2", 1.5):
            with self.subTest(limit=limit), self.assertRaises(InvalidFilterCombination):
                normalize("a", limit=limit)


if __name__ == "__main__":
    unittest.main()
