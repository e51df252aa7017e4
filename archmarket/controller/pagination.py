"""
Page-number pagination.

Query params: ``?page=2&limit=20``

Envelope, shared by every list endpoint::

    {
        "currentPage": 2,
        "totalPages": 7,
        "totalItems": 131,
        "itemsPerPage": 20
    }
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Tuple

from ..faults import ValidationFault


class PageNumberPagination:
    """
    Classic page-number pagination.

    With ``strict=True`` an out-of-range ``page`` or ``limit`` is a
    validation error; otherwise values are clamped into range.

    Class-level config::

        class DesignPagination(PageNumberPagination):
            page_size = 12
            max_page_size = 50
            strict = True
    """

    page_size: int = 10
    max_page_size: int = 100
    page_param: str = "page"
    page_size_param: str = "limit"
    strict: bool = False

    def __init__(
        self,
        page_size: Optional[int] = None,
        max_page_size: Optional[int] = None,
        strict: Optional[bool] = None,
    ):
        if page_size is not None:
            self.page_size = page_size
        if max_page_size is not None:
            self.max_page_size = max_page_size
        if strict is not None:
            self.strict = strict

    def parse(self, params: Dict[str, str]) -> Tuple[int, int]:
        """Return (page_number, page_size) from query params."""
        errors: Dict[str, list] = {}

        page = self._parse_int(params.get(self.page_param), 1)
        if page is None or page < 1:
            if self.strict:
                errors[self.page_param] = ["Page must be a positive integer"]
            page = 1

        size = self._parse_int(params.get(self.page_size_param), self.page_size)
        if size is None or not 1 <= size <= self.max_page_size:
            if self.strict:
                errors[self.page_size_param] = [
                    f"Limit must be between 1 and {self.max_page_size}"
                ]
            size = self.page_size if size is None else max(1, min(size, self.max_page_size))

        if errors:
            raise ValidationFault(errors)
        return page, size

    @staticmethod
    def _parse_int(raw: Any, default: int) -> Optional[int]:
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def offset(page: int, size: int) -> int:
        return (page - 1) * size

    @staticmethod
    def envelope(page: int, size: int, total: int) -> Dict[str, int]:
        return {
            "currentPage": page,
            "totalPages": math.ceil(total / size),
            "totalItems": total,
            "itemsPerPage": size,
        }
