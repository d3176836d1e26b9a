"""Tests for the invoice HTTP API."""

import pytest
from fastapi import HTTPException

from invoicedesk.api.dependencies import get_store, set_store


class TestListInvoices:
    @pytest.mark.asyncio
    async def test_list_with_derived_fields(self, async_client):
        resp = await async_client.get("/api/v1/invoices")

        assert resp.status_code == 200
        body = resp.json()
        assert body["total_items"] == 5
        assert body["total_pages"] == 1
        assert body["page_numbers"] == [1]
        overdue = next(i for i in body["items"] if i["id"] == "INV-10001")
        assert overdue["status"] == "Overdue"
        assert overdue["days_info"] == {"text": "Overdue by 5 days", "category": "overdue", "days": 5}
        assert overdue["amount"] == "1000.00"

    @pytest.mark.asyncio
    async def test_summary_follows_filters(self, async_client):
        resp = await async_client.get("/api/v1/invoices", params={"status": "Pending"})

        body = resp.json()
        assert [i["id"] for i in body["items"]] == ["INV-10005", "INV-10002"]
        assert body["summary"]["total_outstanding"] == "6700.50"
        assert body["summary"]["total_overdue"] == "0.00"

    @pytest.mark.asyncio
    async def test_search_and_sort(self, async_client):
        resp = await async_client.get(
            "/api/v1/invoices", params={"search": "inv-1000", "sort": "amount-asc"},
        )
        assert [i["id"] for i in resp.json()["items"]] == [
            "INV-10004", "INV-10003", "INV-10001", "INV-10002", "INV-10005",
        ]

    @pytest.mark.asyncio
    async def test_unknown_sort_is_rejected(self, async_client):
        resp = await async_client.get("/api/v1/invoices", params={"sort": "name-asc"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, async_client):
        resp = await async_client.get("/api/v1/invoices", params={"status": "Draft"})
        assert resp.status_code == 422


class TestSummaryAndExport:
    @pytest.mark.asyncio
    async def test_summary(self, async_client):
        body = (await async_client.get("/api/v1/invoices/summary")).json()

        assert body["total_outstanding"] == "7700.50"
        assert body["total_paid_this_month"] == "300.00"
        assert body["average_payment_delay"] == 4
        assert [b["count"] for b in body["breakdown"]] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_export_filtered_csv(self, async_client):
        resp = await async_client.get("/api/v1/invoices/export", params={"status": "Paid"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert 'filename="invoices_2024-02-05.csv"' in resp.headers["content-disposition"]
        lines = resp.text.split("\n")
        assert len(lines) == 3
        assert lines[1].startswith('"INV-10004"')


class TestCreateInvoice:
    @pytest.mark.asyncio
    async def test_create(self, async_client, store):
        resp = await async_client.post("/api/v1/invoices", json={
            "customer_name": "Apex Ventures",
            "amount": "2500",
            "invoice_date": "2024-02-05",
            "payment_terms": 15,
        })

        assert resp.status_code == 201
        body = resp.json()
        assert body["id"] == "INV-10006"
        assert body["amount"] == "2500.00"
        assert body["due_date"] == "2024-02-20"
        assert body["days_info"]["text"] == "Due in 15 days"
        assert store.invoices[0].id == "INV-10006"

    @pytest.mark.asyncio
    async def test_numeric_amount(self, async_client):
        resp = await async_client.post("/api/v1/invoices", json={
            "customer_name": "Apex Ventures",
            "amount": 99.5,
            "invoice_date": "2024-02-05",
        })
        assert resp.status_code == 201
        assert resp.json()["amount"] == "99.50"
        assert resp.json()["payment_terms"] == 30

    @pytest.mark.asyncio
    async def test_field_errors(self, async_client, store):
        resp = await async_client.post("/api/v1/invoices", json={
            "customer_name": "",
            "amount": "0",
        })

        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "Validation Error"
        assert body["detail"] == "Invoice is invalid"
        assert set(body["fields"]) == {"customer_name", "amount", "invoice_date"}
        assert len(store) == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0.001", "1e30"])
    async def test_unstorable_amount_is_a_field_error(self, async_client, store, amount):
        resp = await async_client.post("/api/v1/invoices", json={
            "customer_name": "Acme Corp",
            "amount": amount,
            "invoice_date": "2024-02-05",
        })

        assert resp.status_code == 422
        assert resp.json()["fields"] == {"amount": "Amount must be greater than 0"}
        assert len(store) == 5


class TestMarkPaid:
    @pytest.mark.asyncio
    async def test_mark_paid_defaults_to_today(self, async_client):
        resp = await async_client.post("/api/v1/invoices/INV-10001/pay")

        assert resp.status_code == 200
        body = resp.json()
        assert body["payment_date"] == "2024-02-05"
        assert body["status"] == "Paid"
        assert body["days_info"]["text"] == "Paid 5 days late"

    @pytest.mark.asyncio
    async def test_mark_paid_with_date(self, async_client):
        resp = await async_client.post(
            "/api/v1/invoices/INV-10002/pay", json={"payment_date": "2024-02-10"},
        )
        assert resp.json()["days_info"]["text"] == "Paid 9 days early"

    @pytest.mark.asyncio
    async def test_unknown_invoice(self, async_client):
        resp = await async_client.post("/api/v1/invoices/INV-99999/pay")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_pay(self, async_client, store):
        resp = await async_client.post("/api/v1/invoices/bulk-pay", json={
            "ids": ["INV-10001", "INV-10002", "INV-10005", "INV-99999"],
            "payment_date": "2024-03-01",
        })

        assert resp.status_code == 200
        assert sorted(resp.json()["updated"]) == ["INV-10001", "INV-10002", "INV-10005"]
        assert all(inv.is_paid for inv in store.invoices)

    @pytest.mark.asyncio
    async def test_bulk_pay_requires_ids(self, async_client):
        resp = await async_client.post("/api/v1/invoices/bulk-pay", json={"ids": []})
        assert resp.status_code == 422


class TestGetInvoiceAndHealth:
    @pytest.mark.asyncio
    async def test_get_invoice(self, async_client):
        resp = await async_client.get("/api/v1/invoices/INV-10003")
        assert resp.status_code == 200
        assert resp.json()["days_info"]["text"] == "Paid 6 days early"

    @pytest.mark.asyncio
    async def test_get_unknown_invoice(self, async_client):
        resp = await async_client.get("/api/v1/invoices/INV-00000")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_health(self, async_client):
        body = (await async_client.get("/health")).json()
        assert body["status"] == "healthy"
        assert body["invoice_count"] == 5


def test_store_not_initialized():
    set_store(None)
    with pytest.raises(HTTPException) as exc_info:
        get_store()
    assert exc_info.value.status_code == 503
