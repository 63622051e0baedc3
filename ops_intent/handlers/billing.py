"""
Billing handlers: quote drafting, invoice issuance and overdue summary.
"""

import logging
from datetime import timedelta
from typing import List

from ..domain import Invoice, InvoiceStatus, LineItem, Quote, QuoteStatus
from ..formatter import INVOICES_PATH, QUOTES_PATH, format_date, format_money, link
from ..lookup import find_client
from ..models import IntentCategory
from ..ports import new_id
from ..router import HandlerContext, register

logger = logging.getLogger("ops-intent.handlers.billing")

QUOTE_TAX_RATE = 0.08
QUOTE_VALIDITY = timedelta(days=14)
QUOTE_ITEM_DESCRIPTION = "Service Estimate (AI Generated)"

# Invoices issued from chat are a fixed single service visit
INVOICE_ITEM_DESCRIPTION = "Service Visit"
INVOICE_SUBTOTAL = 250.0
INVOICE_TAX = 20.0
INVOICE_TOTAL = 270.0
INVOICE_TERMS = timedelta(days=14)

OVERDUE_LISTED = 3


def handle_quote_draft(ctx: HandlerContext) -> List[str]:
    client_name = ctx.params.get("client", "")
    amount = ctx.params.get("amount")
    client = find_client(ctx.snapshot, client_name)
    if client is None or amount is None:
        return [
            f'❓ I couldn\'t find a client named "{client_name}". '
            "Please specify a valid client name and amount."
        ]

    quote = Quote(
        id=new_id("quote"),
        client_id=client.id,
        property_id=client.properties[0].id,
        items=[
            LineItem(
                id=new_id("item"),
                description=QUOTE_ITEM_DESCRIPTION,
                quantity=1,
                unit_price=amount,
                total=amount,
            )
        ],
        subtotal=amount,
        tax=round(amount * QUOTE_TAX_RATE, 2),
        total=round(amount * (1 + QUOTE_TAX_RATE), 2),
        status=QuoteStatus.DRAFT,
        issued_date=ctx.now,
        expiry_date=ctx.now + QUOTE_VALIDITY,
    )
    ctx.ports.create_quote(quote)
    logger.info(f"Drafted quote {quote.id} for client {client.id}: {quote.total}")

    return [
        "📄 **Quote Drafted**",
        f"I've created a draft quote for **{client.first_name}** for **{format_money(amount)}**.",
        "You can review and send it from the quotes tab.",
        link("View Quote", QUOTES_PATH),
    ]


def handle_invoice_send(ctx: HandlerContext) -> List[str]:
    client_name = ctx.params.get("client", "")
    client = find_client(ctx.snapshot, client_name)
    if client is None:
        return [f'❓ Client "{client_name}" not found.']

    invoice = Invoice(
        id=new_id("inv"),
        client_id=client.id,
        items=[
            LineItem(
                id=new_id("item"),
                description=INVOICE_ITEM_DESCRIPTION,
                quantity=1,
                unit_price=INVOICE_SUBTOTAL,
                total=INVOICE_SUBTOTAL,
            )
        ],
        subtotal=INVOICE_SUBTOTAL,
        tax=INVOICE_TAX,
        total=INVOICE_TOTAL,
        balance_due=INVOICE_TOTAL,
        status=InvoiceStatus.SENT,
        due_date=ctx.now + INVOICE_TERMS,
        issued_date=ctx.now,
    )
    ctx.ports.create_invoice(invoice)
    logger.info(f"Issued invoice {invoice.id} to client {client.id}")

    return [
        "📨 **Invoice Sent**",
        f"I've generated and sent Invoice #{invoice.id} to **{client.email}**.",
        f"Total Amount: **${INVOICE_TOTAL:,.2f}**",
        link("View Invoice", INVOICES_PATH),
    ]


def handle_overdue_summary(ctx: HandlerContext) -> List[str]:
    overdue = [i for i in ctx.snapshot.invoices if i.status == InvoiceStatus.OVERDUE]
    if not overdue:
        return [
            "✅ **No overdue invoices!**",
            "Everyone is paid up. Great job!",
        ]

    total_due = sum(i.balance_due for i in overdue)
    lines = [
        "⚠️ **Overdue Payment Summary**",
        f"We have **{len(overdue)} overdue invoices** totaling **{format_money(total_due)}**.",
        "\n**Oldest Unpaid:**",
    ]
    for invoice in sorted(overdue, key=lambda i: i.due_date)[:OVERDUE_LISTED]:
        client = ctx.snapshot.client_by_id(invoice.client_id)
        who = client.last_name if client else "Unknown client"
        lines.append(f"• {who}: {format_money(invoice.balance_due)} (Due {format_date(invoice.due_date)})")
    lines.append("\n" + link("Manage Invoices", INVOICES_PATH))
    return lines


def register_handlers() -> None:
    register(IntentCategory.QUOTE_DRAFT, handle_quote_draft)
    register(IntentCategory.INVOICE_SEND, handle_invoice_send)
    register(IntentCategory.INVOICE_OVERDUE, handle_overdue_summary)
