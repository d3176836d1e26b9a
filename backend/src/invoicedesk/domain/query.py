"""
Filter, sort and paginate a collection of invoices for display.

The pipeline always runs in the same order:
1. Status filter (All / Pending / Overdue / Paid, on derived status)
2. Free-text filter (case-insensitive substring of id or customer name)
3. Stable sort by the requested key
4. Slice to the requested page

Design Decisions:
- Pure functions over an immutable input sequence; the caller's
  collection is never mutated
- Python's sorted() is stable in both directions, so ties keep the
  collection's order (newest-added-first)
- DashboardView holds the user's filter/sort/page/selection choices and
  resets page and selection whenever a filter or sort choice changes
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .dates import compute_status
from .models import Invoice, InvoiceStatus
from .selection import (
    EMPTY_SELECTION,
    Selection,
    all_unpaid_selected,
    toggle_invoice,
    toggle_select_all,
)


DEFAULT_PAGE_SIZE = 15


class StatusFilter(Enum):
    """Status filter choices offered on the dashboard."""
    ALL = "All"
    PENDING = "Pending"
    OVERDUE = "Overdue"
    PAID = "Paid"

    @property
    def status(self) -> InvoiceStatus | None:
        """The status this filter keeps, or None for All."""
        if self is StatusFilter.ALL:
            return None
        return InvoiceStatus(self.value)


class SortKey(Enum):
    """Sort choices; NONE keeps the collection's existing order."""
    NONE = ""
    AMOUNT_ASC = "amount-asc"
    AMOUNT_DESC = "amount-desc"
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    DUE_ASC = "due-asc"
    DUE_DESC = "due-desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortKey":
        """Accept "", "none" and None as no sort."""
        if value is None or value.strip().lower() in ("", "none"):
            return cls.NONE
        return cls(value.strip().lower())


_SORT_FIELDS = {
    "amount": lambda inv: inv.amount,
    "date": lambda inv: inv.invoice_date,
    "due": lambda inv: inv.due_date,
}


@dataclass(frozen=True)
class InvoiceQuery:
    """User-supplied filter, sort and page parameters."""
    status: StatusFilter = StatusFilter.ALL
    search: str = ""
    sort: SortKey = SortKey.NONE
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class InvoicePage:
    """One page of the filtered and sorted result."""
    items: list[Invoice]
    page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    @property
    def start_item(self) -> int:
        """1-based index of the first item shown ("Showing X to Y of N")."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_item(self) -> int:
        if not self.items:
            return 0
        return min(self.page * self.page_size, self.total_items)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def filter_by_status(
    invoices: Sequence[Invoice],
    status_filter: StatusFilter,
    today: date,
) -> list[Invoice]:
    """Keep invoices whose derived status matches; All keeps everything."""
    wanted = status_filter.status
    if wanted is None:
        return list(invoices)
    return [inv for inv in invoices if compute_status(inv, today) is wanted]


def filter_by_search(invoices: Sequence[Invoice], query: str) -> list[Invoice]:
    """
    Case-insensitive substring match on id or customer name.

    An empty or whitespace-only query keeps everything.
    """
    if not query or not query.strip():
        return list(invoices)
    needle = query.lower()
    return [
        inv for inv in invoices
        if needle in inv.id.lower() or needle in inv.customer_name.lower()
    ]


def sort_invoices(invoices: Sequence[Invoice], sort_key: SortKey) -> list[Invoice]:
    """Stable sort by amount, invoice date or due date."""
    if sort_key is SortKey.NONE:
        return list(invoices)
    field_name, direction = sort_key.value.split("-")
    return sorted(
        invoices,
        key=_SORT_FIELDS[field_name],
        reverse=(direction == "desc"),
    )


def paginate(invoices: Sequence[Invoice], page: int, page_size: int) -> InvoicePage:
    """
    Slice [(page-1)*page_size, page*page_size).

    Pages before the first are treated as page 1; pages past the last
    yield an empty item list.
    """
    if page_size < 1:
        raise ValueError(f"Page size must be positive, got {page_size}")
    page = max(page, 1)
    start = (page - 1) * page_size
    return InvoicePage(
        items=list(invoices[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=len(invoices),
    )


def filter_invoices(
    invoices: Sequence[Invoice],
    query: InvoiceQuery,
    today: date,
) -> list[Invoice]:
    """Apply status then text filter (unsorted, unpaginated)."""
    result = filter_by_status(invoices, query.status, today)
    return filter_by_search(result, query.search)


def run_query(
    invoices: Sequence[Invoice],
    query: InvoiceQuery,
    today: date,
) -> InvoicePage:
    """Full pipeline: filter, then sort, then paginate."""
    filtered = filter_invoices(invoices, query, today)
    ordered = sort_invoices(filtered, query.sort)
    return paginate(ordered, query.page, query.page_size)


def page_window(current: int, total: int) -> list[int | None]:
    """
    Page numbers for pagination controls.

    Shows the first page, the last page and current +/- 1; a None
    marks each gap. For example page 5 of 10 gives
    [1, None, 4, 5, 6, None, 10].
    """
    window: list[int | None] = []
    for page in range(1, total + 1):
        if page == 1 or page == total or current - 1 <= page <= current + 1:
            window.append(page)
        elif window and window[-1] is not None:
            window.append(None)
    return window


@dataclass
class DashboardView:
    """
    Filter, sort, page and selection state of the invoice table.

    Changing the status filter, search text or sort key sends the user
    back to page 1 and clears the selection.
    """
    status: StatusFilter = StatusFilter.ALL
    search: str = ""
    sort: SortKey = SortKey.NONE
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    selection: Selection = field(default=EMPTY_SELECTION)

    @property
    def query(self) -> InvoiceQuery:
        return InvoiceQuery(
            status=self.status,
            search=self.search,
            sort=self.sort,
            page=self.page,
            page_size=self.page_size,
        )

    def _reset(self) -> None:
        self.page = 1
        self.selection = EMPTY_SELECTION

    def set_status(self, status: StatusFilter) -> None:
        if status != self.status:
            self.status = status
            self._reset()

    def set_search(self, search: str) -> None:
        if search != self.search:
            self.search = search
            self._reset()

    def set_sort(self, sort: SortKey) -> None:
        if sort != self.sort:
            self.sort = sort
            self._reset()

    def go_to_page(self, page: int) -> None:
        self.page = max(page, 1)

    def render(self, invoices: Sequence[Invoice], today: date) -> InvoicePage:
        """Run the pipeline with the current choices."""
        return run_query(invoices, self.query, today)

    def toggle_invoice(self, invoice: Invoice) -> None:
        self.selection = toggle_invoice(self.selection, invoice)

    def toggle_select_all(self, page_invoices: Sequence[Invoice]) -> None:
        self.selection = toggle_select_all(self.selection, page_invoices)

    def all_selected(self, page_invoices: Sequence[Invoice]) -> bool:
        return all_unpaid_selected(self.selection, page_invoices)

    def clear_selection(self) -> None:
        self.selection = EMPTY_SELECTION

    def consume_selection(self) -> list[str]:
        """Return the selected ids (sorted) and clear the selection."""
        ids = sorted(self.selection)
        self.selection = EMPTY_SELECTION
        return ids

