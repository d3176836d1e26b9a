"""
Validation rules for the add-invoice form.

Pure functions, no side effects. Validation collects one message per
failing field so the form can show every problem at once; a draft with
any error is rejected wholesale and never becomes an Invoice.
"""

from decimal import Decimal, InvalidOperation

from .models import CENT, PAYMENT_TERMS, InvoiceDraft


FieldErrors = dict[str, str]


def parse_amount(raw: str | Decimal | int | float | None) -> Decimal | None:
    """
    Parse a user-entered amount into a Decimal.

    Floats are converted through str() so 0.1 stays 0.1.
    Returns None when the value is missing or not a finite number.
    """
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip().replace(",", "")
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    return value


def round_to_cents(value: Decimal) -> Decimal | None:
    """
    Round an amount to cents the way Invoice.create stores it.

    Returns None when the value has more digits than the decimal context
    can hold at cent precision.
    """
    try:
        return value.quantize(CENT)
    except InvalidOperation:
        return None


def validate_draft(draft: InvoiceDraft) -> FieldErrors:
    """
    Validate add-invoice form fields.

    Rules:
    - customer_name must contain non-whitespace characters
    - amount must parse as a number that is still greater than 0 once
      rounded to cents
    - invoice_date must be present
    - payment_terms must be one of the supported terms

    Returns:
        Mapping of field name to message; empty when the draft is valid
    """
    errors: FieldErrors = {}

    if not draft.customer_name or not draft.customer_name.strip():
        errors["customer_name"] = "Customer name is required"

    amount = parse_amount(draft.amount)
    cents = round_to_cents(amount) if amount is not None else None
    if cents is None or cents <= 0:
        errors["amount"] = "Amount must be greater than 0"

    if draft.invoice_date is None:
        errors["invoice_date"] = "Invoice date is required"

    if draft.payment_terms not in PAYMENT_TERMS:
        allowed = ", ".join(str(t) for t in PAYMENT_TERMS)
        errors["payment_terms"] = f"Payment terms must be one of {allowed} days"

    return errors
