from __future__ import annotations

import unittest

from blog_query.paginate import page_count, page_of, paginate


class TestPaginate(unittest.TestCase):
    def test_limit_and_skip(self) -> None:
        items = ["a", "b", "c"]
        self.assertEqual(paginate(items, 2, 2), ["c"])
        self.assertEqual(paginate(items, 2), ["a", "b"])
        self.assertEqual(paginate(items, 10, 1), ["b", "c"])

    def test_skip_past_end_is_empty(self) -> None:
        self.assertEqual(paginate(["a"], 5, 3), [])

    def test_non_positive_limit_is_empty(self) -> None:
        self.assertEqual(paginate(["a", "b"], 0), [])
        self.assertEqual(paginate(["a", "b"], -1), [])

    def test_negative_skip_counts_as_zero(self) -> None:
        self.assertEqual(paginate(["a", "b"], 1, -4), ["a"])

    def test_pages_do_not_overlap(self) -> None:
        items = list(range(5))
        first = paginate(items, 2, 0)
        second = paginate(items, 2, 2)
        self.assertEqual(set(first) & set(second), set())

    def test_page_helpers(self) -> None:
        items = list(range(7))
        self.assertEqual(page_count(len(items), 3), 3)
        self.assertEqual(page_count(0, 3), 0)
        self.assertEqual(page_of(items, 3, 3), [6])
        self.assertEqual(page_of(items, 4, 3), [])
        self.assertEqual(page_of(items, 0, 3), [])
        with self.assertRaises(ValueError):
            page_count(3, 0)


if __name__ == "__main__":
    unittest.main()
