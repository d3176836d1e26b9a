"""
Multi-select semantics for bulk actions.

A selection is a frozenset of invoice ids. Only unpaid invoices can be
selected, and "select all" only ever looks at the invoices on the page
currently shown, never at other pages of the filtered result.
"""

from collections.abc import Sequence

from .models import Invoice


Selection = frozenset[str]

EMPTY_SELECTION: Selection = frozenset()


def selectable_ids(page_invoices: Sequence[Invoice]) -> list[str]:
    """Ids of the unpaid invoices on a page, in display order."""
    return [inv.id for inv in page_invoices if not inv.is_paid]


def toggle_invoice(selection: Selection, invoice: Invoice) -> Selection:
    """Add or remove one invoice. Paid invoices are never selectable."""
    if invoice.is_paid:
        return selection - {invoice.id}
    if invoice.id in selection:
        return selection - {invoice.id}
    return selection | {invoice.id}


def all_unpaid_selected(selection: Selection, page_invoices: Sequence[Invoice]) -> bool:
    """
    True if the page has unpaid invoices and every one is selected.

    A partially selected page counts as "not all selected".
    """
    unpaid = selectable_ids(page_invoices)
    return bool(unpaid) and all(inv_id in selection for inv_id in unpaid)


def toggle_select_all(selection: Selection, page_invoices: Sequence[Invoice]) -> Selection:
    """
    Flip the page-level "select all" toggle.

    If every unpaid invoice on the page is already selected, those ids
    are removed (ids selected elsewhere are kept). Otherwise the missing
    unpaid ids on the page are added.
    """
    unpaid = set(selectable_ids(page_invoices))
    if unpaid and unpaid <= selection:
        return selection - unpaid
    return selection | unpaid
