from __future__ import annotations

import pytest

from schemaview.core.constants import ELLIPSIS
from schemaview.core.pagination import sequence


def test_short_ranges_are_returned_verbatim() -> None:
    assert sequence(1, 1) == [1]
    assert sequence(3, 5) == [1, 2, 3, 4, 5]


def test_middle_page_has_one_ellipsis_per_side() -> None:
    out = sequence(5, 20, 5)
    assert out == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 20]
    assert out.count(ELLIPSIS) == 2
    assert len([m for m in out if m != ELLIPSIS]) <= 5


def test_first_and_last_pages() -> None:
    assert sequence(1, 10) == [1, 2, 3, 4, ELLIPSIS, 10]
    assert sequence(10, 10) == [1, ELLIPSIS, 7, 8, 9, 10]


def test_single_skipped_page_is_shown_as_number() -> None:
    assert sequence(4, 10) == [1, 2, 3, 4, 5, ELLIPSIS, 10]
    assert sequence(7, 10) == [1, ELLIPSIS, 6, 7, 8, 9, 10]


@pytest.mark.parametrize("total", [6, 7, 10, 20, 57])
def test_strip_invariants(total: int) -> None:
    for current in range(1, total + 1):
        out = sequence(current, total, 5)
        numbers = [m for m in out if m != ELLIPSIS]
        assert numbers[0] == 1 and numbers[-1] == total
        assert current in numbers
        assert numbers == sorted(set(numbers))
        assert len(numbers) <= 5 + 2
        for a, b in zip(out, out[1:]):
            assert not (a == ELLIPSIS and b == ELLIPSIS)
        for i, marker in enumerate(out):
            if marker == ELLIPSIS:
                # an ellipsis always stands for at least two pages
                assert out[i + 1] - out[i - 1] >= 3


def test_out_of_range_inputs_are_clamped() -> None:
    assert sequence(0, 3) == [1, 2, 3]
    assert sequence(99, 20) == sequence(20, 20)
    assert sequence(1, 0) == [1]


def test_max_visible_below_one_raises() -> None:
    with pytest.raises(ValueError):
        sequence(1, 10, 0)
