"""
Invoice endpoints.

Lists, summarizes, exports, adds and marks invoices as paid. Status and
day-deltas are derived per request from the stored dates and today.
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from invoicedesk.api.dependencies import get_store, get_today
from invoicedesk.api.schemas import (
    BulkMarkPaidRequest,
    BulkMarkPaidResponse,
    CreateInvoiceRequest,
    ErrorResponse,
    InvoicePageResponse,
    InvoiceResponse,
    MarkPaidRequest,
    SummaryResponse,
)
from invoicedesk.config import get_settings
from invoicedesk.domain.aggregation import summarize
from invoicedesk.domain.models import InvoiceDraft
from invoicedesk.domain.query import (
    InvoiceQuery,
    SortKey,
    StatusFilter,
    filter_invoices,
    page_window,
    run_query,
)
from invoicedesk.services.export import CSV_CONTENT_TYPE, export_csv, export_filename
from invoicedesk.services.store import InvoiceStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])

StoreDep = Annotated[InvoiceStore, Depends(get_store)]
TodayDep = Annotated[date, Depends(get_today)]


def build_query(
    status_filter: Annotated[
        StatusFilter, Query(alias="status", description="All, Pending, Overdue or Paid")
    ] = StatusFilter.ALL,
    search: Annotated[str, Query(description="Matches invoice id or customer name")] = "",
    sort: Annotated[
        str | None, Query(description="amount-asc, amount-desc, date-asc, date-desc, due-asc, due-desc")
    ] = None,
    page: Annotated[int, Query(ge=1)] = 1,
) -> InvoiceQuery:
    """Turn query string parameters into an InvoiceQuery."""
    try:
        sort_key = SortKey.parse(sort)
    except ValueError:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown sort key: {sort}",
        )
    return InvoiceQuery(
        status=status_filter,
        search=search,
        sort=sort_key,
        page=page,
        page_size=get_settings().page_size,
    )


QueryDep = Annotated[InvoiceQuery, Depends(build_query)]


@router.get("", response_model=InvoicePageResponse)
async def list_invoices(store: StoreDep, today: TodayDep, query: QueryDep) -> InvoicePageResponse:
    """
    List one page of invoices.

    Filters by status and search text, sorts, then paginates. The
    summary is computed over the filtered result, across all pages.
    """
    invoices = store.invoices
    page = run_query(invoices, query, today)
    filtered = filter_invoices(invoices, query, today)

    return InvoicePageResponse(
        items=[InvoiceResponse.build(inv, today) for inv in page.items],
        page=page.page,
        page_size=page.page_size,
        total_items=page.total_items,
        total_pages=page.total_pages,
        start_item=page.start_item,
        end_item=page.end_item,
        page_numbers=page_window(page.page, page.total_pages),
        summary=SummaryResponse.build(summarize(filtered, today)),
    )


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(store: StoreDep, today: TodayDep) -> SummaryResponse:
    """Summary cards and status breakdown over every invoice."""
    return SummaryResponse.build(summarize(store.invoices, today))


@router.get(
    "/export",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}, "description": "CSV download"}},
)
async def export_invoices(store: StoreDep, today: TodayDep, query: QueryDep) -> Response:
    """
    Download the filtered invoices as CSV.

    Uses the same filters as the list endpoint but ignores paging, so
    every matching invoice is included.
    """
    filtered = filter_invoices(store.invoices, query, today)
    logger.info(f"Exporting {len(filtered)} invoices")
    return Response(
        content=export_csv(filtered, today),
        media_type=CSV_CONTENT_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(today)}"',
        },
    )


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse, "description": "One or more form fields are invalid"}},
)
async def create_invoice(
    request: CreateInvoiceRequest,
    store: StoreDep,
    today: TodayDep,
) -> InvoiceResponse | JSONResponse:
    """Add a new unpaid invoice with the next sequential id."""
    result = store.add(InvoiceDraft(
        customer_name=request.customer_name,
        amount=request.amount,
        invoice_date=request.invoice_date,
        payment_terms=request.payment_terms,
    ))
    if not result.ok:
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error="Validation Error",
                detail="Invoice is invalid",
                fields=result.errors,
            ).model_dump(),
        )
    return InvoiceResponse.build(result.invoice, today)


@router.post(
    "/bulk-pay",
    response_model=BulkMarkPaidResponse,
)
async def bulk_mark_paid(
    request: BulkMarkPaidRequest,
    store: StoreDep,
    today: TodayDep,
) -> BulkMarkPaidResponse:
    """Mark every selected invoice as paid; unknown ids are ignored."""
    updated = store.bulk_mark_paid(request.ids, request.payment_date or today)
    return BulkMarkPaidResponse(
        updated=[inv.id for inv in updated],
        invoices=[InvoiceResponse.build(inv, today) for inv in updated],
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice(invoice_id: str, store: StoreDep, today: TodayDep) -> InvoiceResponse:
    """Get one invoice with its derived status."""
    invoice = store.get(invoice_id)
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice {invoice_id} not found",
        )
    return InvoiceResponse.build(invoice, today)


@router.post(
    "/{invoice_id}/pay",
    response_model=InvoiceResponse,
    responses={404: {"description": "Invoice not found"}},
)
async def mark_paid(
    invoice_id: str,
    store: StoreDep,
    today: TodayDep,
    request: MarkPaidRequest | None = None,
) -> InvoiceResponse:
    """Mark one invoice as paid (re-marking overwrites the payment date)."""
    payment_date = (request.payment_date if request else None) or today
    invoice = store.mark_paid(invoice_id, payment_date)
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice {invoice_id} not found",
        )
    return InvoiceResponse.build(invoice, today)
