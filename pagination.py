# pagination.py
from typing import List, Union

ELLIPSIS = "..."

PageLabel = Union[int, str]


def generate_pagination(current_page: int, total_pages: int) -> List[PageLabel]:
  # short enough to show every page
  if total_pages <= 7:
    return list(range(1, total_pages + 1))

  if current_page <= 3:
    return [1, 2, 3, ELLIPSIS, total_pages - 1, total_pages]

  if current_page >= total_pages - 2:
    return [1, 2, ELLIPSIS, total_pages - 2, total_pages - 1, total_pages]

  return [
    1,
    2,
    ELLIPSIS,
    current_page - 1,
    current_page,
    current_page + 1,
    ELLIPSIS,
    total_pages - 1,
    total_pages,
  ]
