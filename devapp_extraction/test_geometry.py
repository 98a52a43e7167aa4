import math
import sys
import unittest
from pathlib import Path


# Allow `import devapp_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from devapp_extraction import geometry  # noqa: E402
from devapp_extraction.geometry import Rectangle, TextFragment  # noqa: E402


def _frag(text: str, x: float, y: float, w: float = 10.0, h: float = 10.0) -> TextFragment:
    return TextFragment(x=x, y=y, width=w, height=h, text=text)


class TestIntersect(unittest.TestCase):
    def test_overlapping_rectangles(self) -> None:
        r = geometry.intersect(Rectangle(0, 0, 10, 10), Rectangle(5, 5, 10, 10))
        self.assertEqual(r, Rectangle(5, 5, 5, 5))
        self.assertEqual(geometry.get_area(r), 25)

    def test_area_is_symmetric(self) -> None:
        pairs = [
            (Rectangle(0, 0, 10, 4), Rectangle(3, 1, 2, 8)),
            (Rectangle(-5, 2, 7, 3), Rectangle(0, 0, 1, 1)),
            (Rectangle(0, 0, 5, 5), Rectangle(20, 20, 5, 5)),
        ]
        for a, b in pairs:
            self.assertEqual(
                geometry.get_area(geometry.intersect(a, b)),
                geometry.get_area(geometry.intersect(b, a)),
            )

    def test_disjoint_on_either_axis_is_empty(self) -> None:
        self.assertEqual(geometry.intersect(Rectangle(0, 0, 5, 5), Rectangle(10, 0, 5, 5)),
                         geometry.EMPTY_RECTANGLE)
        self.assertEqual(geometry.intersect(Rectangle(0, 0, 5, 5), Rectangle(0, 10, 5, 5)),
                         geometry.EMPTY_RECTANGLE)

    def test_touching_edges_is_zero_area(self) -> None:
        r = geometry.intersect(Rectangle(0, 0, 5, 5), Rectangle(5, 0, 5, 5))
        self.assertEqual(geometry.get_area(r), 0)


class TestVerticalOverlap(unittest.TestCase):
    def test_fully_inside_is_100(self) -> None:
        a = Rectangle(0, 0, 10, 20)
        b = Rectangle(50, 5, 10, 10)
        self.assertEqual(geometry.vertical_overlap_percentage(a, b), 100.0)

    def test_asymmetric(self) -> None:
        a = Rectangle(0, 0, 10, 20)
        b = Rectangle(0, 5, 10, 10)
        self.assertEqual(geometry.vertical_overlap_percentage(a, b), 100.0)
        self.assertEqual(geometry.vertical_overlap_percentage(b, a), 50.0)

    def test_partial_and_disjoint(self) -> None:
        a = Rectangle(0, 0, 10, 10)
        self.assertAlmostEqual(geometry.vertical_overlap_percentage(a, Rectangle(0, 6, 10, 10)), 40.0)
        self.assertEqual(geometry.vertical_overlap_percentage(a, Rectangle(0, 30, 10, 10)), 0.0)

    def test_range(self) -> None:
        a = Rectangle(0, 3, 10, 7)
        for y in range(-20, 20, 3):
            for h in (1, 4, 9, 30):
                pct = geometry.vertical_overlap_percentage(a, Rectangle(0, y, 5, h))
                self.assertGreaterEqual(pct, 0.0)
                self.assertLessEqual(pct, 100.0)

    def test_zero_height_never_overlaps(self) -> None:
        self.assertEqual(geometry.vertical_overlap_percentage(Rectangle(0, 0, 5, 5), Rectangle(0, 2, 5, 0)), 0.0)

    def test_is_vertical_overlap(self) -> None:
        a = Rectangle(0, 0, 10, 10)
        self.assertTrue(geometry.is_vertical_overlap(a, Rectangle(50, 9, 5, 5)))
        self.assertFalse(geometry.is_vertical_overlap(a, Rectangle(50, 10, 5, 5)))


class TestDistanceRightward(unittest.TestCase):
    def test_squared_distance_between_edges(self) -> None:
        a = _frag("a", 0, 0, w=10, h=10)
        b = _frag("b", 13, 4, w=10, h=10)
        self.assertEqual(geometry.distance_rightward(a, b), 3 * 3 + 4 * 4)

    def test_small_overlap_is_tolerated(self) -> None:
        a = _frag("a", 0, 0, w=10, h=10)
        b = _frag("b", 9, 0, w=10, h=10)
        self.assertEqual(geometry.distance_rightward(a, b), 1)

    def test_stacked_fragment_is_excluded(self) -> None:
        a = _frag("a", 0, 0, w=10, h=10)
        b = _frag("b", 7, 0, w=10, h=10)
        self.assertTrue(math.isinf(geometry.distance_rightward(a, b)))


class TestReadingOrder(unittest.TestCase):
    def test_sort_by_y_then_x(self) -> None:
        frags = [_frag("c", 5, 20), _frag("b", 30, 0), _frag("a", 2, 0)]
        ordered = geometry.sort_reading_order(frags)
        self.assertEqual([f.text for f in ordered], ["a", "b", "c"])
        self.assertTrue(geometry.is_reading_order(ordered))
        self.assertFalse(geometry.is_reading_order(frags))

    def test_raise_fragment(self) -> None:
        raised = geometry.raise_fragment(_frag("Lodgement", 0, 100, h=10))
        self.assertEqual(raised.y, 95)
        self.assertEqual(raised.text, "Lodgement")

    def test_text_matrix_height(self) -> None:
        self.assertAlmostEqual(geometry.text_matrix_height((9, 0, 0, 9, 100, 200)), 9.0)
        self.assertAlmostEqual(geometry.text_matrix_height((0, 3, -3, 4, 0, 0)), 5.0)


if __name__ == "__main__":
    unittest.main()
