"""
Sample invoices for a first start with an empty store.

The generator takes its random source and today's date as arguments so
tests can reproduce a seed set exactly.
"""

import random
from datetime import date, timedelta
from decimal import Decimal

from .dates import calculate_due_date
from .models import PAYMENT_TERMS, Invoice
from .sequence import FIRST_INVOICE_NUMBER, format_invoice_id


SAMPLE_CUSTOMERS = (
    "Acme Corp",
    "TechStart Inc",
    "Global Traders",
    "Swift Solutions",
    "Prime Industries",
    "Digital Dynamics",
    "Metro Supplies",
    "Apex Ventures",
    "BlueSky Ltd",
    "Quantum Systems",
)

MAX_INVOICE_AGE_DAYS = 60
MIN_AMOUNT = Decimal("5000")
AMOUNT_SPREAD = 50000
# Paid samples settle between 5 days early and 14 days late
PAYMENT_DELAY_RANGE = (-5, 14)


def generate_sample_invoices(
    today: date,
    count: int = 10,
    paid_ratio: float = 0.4,
    rng: random.Random | None = None,
) -> list[Invoice]:
    """
    Generate `count` sample invoices with randomized dates and amounts.

    Ids run from INV-10001 upwards. Customers cycle through
    SAMPLE_CUSTOMERS. Roughly `paid_ratio` of them are already paid.
    """
    rng = rng or random.Random()
    invoices: list[Invoice] = []

    for i in range(count):
        invoice_date = today - timedelta(days=rng.randrange(MAX_INVOICE_AGE_DAYS))
        terms = rng.choice(PAYMENT_TERMS)
        due_date = calculate_due_date(invoice_date, terms)
        amount = (MIN_AMOUNT + Decimal(str(rng.random() * AMOUNT_SPREAD))).quantize(
            Decimal("0.01")
        )

        payment_date = None
        if rng.random() < paid_ratio:
            payment_date = due_date + timedelta(days=rng.randint(*PAYMENT_DELAY_RANGE))

        invoices.append(Invoice(
            id=format_invoice_id(FIRST_INVOICE_NUMBER + i),
            customer_name=SAMPLE_CUSTOMERS[i % len(SAMPLE_CUSTOMERS)],
            amount=amount,
            invoice_date=invoice_date,
            due_date=due_date,
            payment_terms=terms,
            payment_date=payment_date,
        ))

    return invoices
