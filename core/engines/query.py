"""
Filtering, sorting and pagination over job and candidate records.

Records are any objects exposing the relevant attributes (ORM rows in the
service layer, simple namespaces in tests).
"""

import math
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Mapping, Optional, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

SORTABLE_FIELDS = ("order", "title", "id")

SORT_ALIASES: dict[str, tuple[str, str]] = {
    "orderasc": ("order", "asc"),
    "orderdesc": ("order", "desc"),
    "titleasc": ("title", "asc"),
    "titledesc": ("title", "desc"),
}

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


@dataclass(frozen=True)
class JobQuery:
    """Normalised job listing parameters."""

    search: str = ""
    status: str = ""
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    sort_field: str = "order"
    sort_dir: str = "asc"

    @classmethod
    def from_params(
        cls,
        search: Optional[str] = None,
        status: Optional[str] = None,
        page: Any = None,
        page_size: Any = None,
        sort: Optional[str] = None,
    ) -> "JobQuery":
        """Build a query from raw request parameters, never raising."""
        field, direction = parse_sort(sort)
        return cls(
            search=search or "",
            status=status or "",
            page=parse_positive_int(page, DEFAULT_PAGE),
            page_size=parse_positive_int(page_size, DEFAULT_PAGE_SIZE),
            sort_field=field,
            sort_dir=direction,
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the filtered total."""

    data: list[T]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def parse_positive_int(value: Any, default: int) -> int:
    """
    Parse a page-style integer leniently.

    Leading digits are honoured (``"3abc"`` is 3), unparseable or zero values
    fall back to ``default``, and the result is clamped to at least 1.
    """
    if isinstance(value, bool):
        value = None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and math.isfinite(value):
        parsed = int(value)
    else:
        match = _LEADING_INT.match(str(value)) if value is not None else None
        parsed = int(match.group(1)) if match else 0
    return max(1, parsed or default)


def parse_sort(value: Optional[str]) -> tuple[str, str]:
    """
    Parse a sort parameter into ``(field, direction)``.

    Accepts the aliases ``orderAsc``, ``orderDesc``, ``titleAsc``, ``titleDesc``
    (case-insensitive) and the ``field:dir`` form. Unknown values sort by
    order ascending.
    """
    text = str(value or "").lower()
    if ":" in text:
        field, _, direction = text.partition(":")
        if field not in SORTABLE_FIELDS:
            field = "order"
        return field, "desc" if direction == "desc" else "asc"
    return SORT_ALIASES.get(text, ("order", "asc"))


def title_sort_key(title: Optional[str]) -> str:
    """Collation key ignoring case and accents."""
    decomposed = unicodedata.normalize("NFKD", title or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def numeric_sort_key(value: Any) -> float:
    """Numeric key; missing or non-finite values sort as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value if math.isfinite(value) else 0


def _matches_search(job: Any, needle: str) -> bool:
    title = (getattr(job, "title", None) or "").lower()
    slug = (getattr(job, "slug", None) or "").lower()
    return needle in title or needle in slug


def query_jobs(jobs: Iterable[T], query: JobQuery) -> Page[T]:
    """
    Filter, sort and paginate jobs.

    Args:
        jobs: All job records
        query: Normalised listing parameters

    Returns:
        Page with the requested slice and the filtered total
    """
    items = list(jobs)

    if query.search:
        needle = query.search.lower()
        items = [job for job in items if _matches_search(job, needle)]

    if query.status:
        items = [job for job in items if getattr(job, "status", None) == query.status]

    reverse = query.sort_dir == "desc"
    if query.sort_field == "title":
        items.sort(key=lambda job: title_sort_key(getattr(job, "title", None)), reverse=reverse)
    else:
        items.sort(
            key=lambda job: numeric_sort_key(getattr(job, query.sort_field, None)),
            reverse=reverse,
        )

    start = (query.page - 1) * query.page_size
    return Page(
        data=items[start:start + query.page_size],
        page=query.page,
        page_size=query.page_size,
        total=len(items),
    )


def job_title_for(job_titles: Mapping[int, str], job_id: Any) -> str:
    """Title of the referenced job, or ``Job #<id>`` when it is missing."""
    return job_titles.get(job_id) or f"Job #{job_id}"


def filter_candidates(candidates: Iterable[T], stage: Optional[str] = None) -> list[T]:
    """Candidates in ``stage``; an empty stage keeps everyone."""
    if not stage:
        return list(candidates)
    return [c for c in candidates if getattr(c, "stage", None) == stage]
