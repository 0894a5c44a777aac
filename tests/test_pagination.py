# tests/test_pagination.py
import pytest

from pagination import ELLIPSIS, generate_pagination


@pytest.mark.parametrize("current, total, expected", [
  (1, 0, []),
  (1, 1, [1]),
  (3, 5, [1, 2, 3, 4, 5]),
  (4, 7, [1, 2, 3, 4, 5, 6, 7]),
  (1, 10, [1, 2, 3, ELLIPSIS, 9, 10]),
  (3, 10, [1, 2, 3, ELLIPSIS, 9, 10]),
  (8, 10, [1, 2, ELLIPSIS, 8, 9, 10]),
  (10, 10, [1, 2, ELLIPSIS, 8, 9, 10]),
  (5, 10, [1, 2, ELLIPSIS, 4, 5, 6, ELLIPSIS, 9, 10]),
  (50, 100, [1, 2, ELLIPSIS, 49, 50, 51, ELLIPSIS, 99, 100]),
])
def test_generate_pagination(current, total, expected):
  assert generate_pagination(current, total) == expected


def test_window_is_bounded():
  for total in range(0, 40):
    for current in range(1, total + 1):
      assert len(generate_pagination(current, total)) <= 9
