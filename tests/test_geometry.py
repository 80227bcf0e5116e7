import math

from da_register_extraction.geometry import (
    EMPTY_RECTANGLE,
    Rectangle,
    distance_squared,
    find_right_neighbour,
    intersect,
    vertical_overlap_percentage,
)

from conftest import frag


def test_intersect_disjoint_is_empty() -> None:
    a = Rectangle(0, 0, 10, 10)
    b = Rectangle(20, 20, 5, 5)
    assert intersect(a, b) == EMPTY_RECTANGLE
    assert intersect(b, a) == EMPTY_RECTANGLE


def test_intersect_is_symmetric_and_non_negative() -> None:
    pairs = [
        (Rectangle(0, 0, 10, 10), Rectangle(5, 5, 10, 10)),
        (Rectangle(0, 0, 100, 5), Rectangle(40, -10, 10, 100)),
        (Rectangle(3, 3, 1, 1), Rectangle(0, 0, 10, 10)),
        (Rectangle(0, 0, math.inf, math.inf), Rectangle(2, 2, 4, 4)),
    ]
    for a, b in pairs:
        region = intersect(a, b)
        assert region.width >= 0 and region.height >= 0
        assert region == intersect(b, a)
    assert intersect(*pairs[0]) == Rectangle(5, 5, 5, 5)
    assert intersect(*pairs[3]) == Rectangle(2, 2, 4, 4)


def test_rectangle_clamps_negative_extent() -> None:
    rectangle = Rectangle(10, 10, -5, -1)
    assert rectangle.width == 0
    assert rectangle.height == 0


def test_vertical_overlap_percentage_bounds() -> None:
    a = Rectangle(0, 0, 10, 10)
    assert vertical_overlap_percentage(a, Rectangle(0, 20, 10, 10)) == 0
    assert vertical_overlap_percentage(a, Rectangle(50, 2, 10, 5)) == 100


def test_vertical_overlap_percentage_is_relative_to_second_argument() -> None:
    tall = Rectangle(0, 0, 10, 100)
    short = Rectangle(0, 10, 10, 10)
    assert vertical_overlap_percentage(tall, short) == 100
    assert vertical_overlap_percentage(short, tall) == 10


def test_distance_squared_rejects_overlapping_candidates() -> None:
    a = Rectangle(0, 0, 100, 10)
    assert distance_squared(a, Rectangle(70, 0, 10, 10)) == math.inf
    assert distance_squared(a, Rectangle(85, 0, 10, 10)) == 225
    assert distance_squared(a, Rectangle(110, 4, 10, 10)) == 100 + 16


def test_find_right_neighbour_picks_closest_in_row() -> None:
    label = frag("Property", 0, 0)
    near = frag("House", 60, 0)
    far = frag("No", 75, 0)
    below = frag("Lot", 55, 30)
    assert find_right_neighbour([far, below, near, label], label) == near


def test_find_right_neighbour_ignores_large_gap_and_tall_elements() -> None:
    label = frag("Lot", 0, 0)
    distant = frag("12", 18 + 30, 0)
    tall = frag("|", 25, -50, width=2, height=200)
    assert find_right_neighbour([label, distant, tall], label) is None
