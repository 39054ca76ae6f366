"""Transaction history. There is no ledger: every user sees the same fixed sample entries."""

from app.schemas.transactions import Transaction

SAMPLE_TRANSACTIONS: tuple[Transaction, ...] = (
    Transaction(
        transaction_id="TXN-1718000000000-101",
        type="deposit",
        status="completed",
        amount_cwt=150.0,
        amount_cws=0,
        description="Deposit via bank transfer",
        created_at="2024-06-10T14:13:20.000Z",
        completed_at="2024-06-10T14:20:02.000Z",
    ),
    Transaction(
        transaction_id="TXN-1717400000000-482",
        type="withdrawal",
        status="completed",
        amount_cwt=40.5,
        amount_cws=0,
        description="Withdrawal to wallet",
        created_at="2024-06-03T07:33:20.000Z",
        completed_at="2024-06-03T08:01:45.000Z",
    ),
    Transaction(
        transaction_id="TXN-1716900000000-077",
        type="transfer",
        status="pending",
        amount_cwt=0.0,
        amount_cws=250,
        description="CWS transfer",
        created_at="2024-05-28T12:40:00.000Z",
    ),
    Transaction(
        transaction_id="ADMIN-1716500000000",
        type="admin_add",
        status="completed",
        amount_cwt=25.0,
        amount_cws=100,
        description="Welcome bonus",
        created_at="2024-05-23T21:33:20.000Z",
        completed_at="2024-05-23T21:33:20.000Z",
    ),
    Transaction(
        transaction_id="TXN-1716000000000-913",
        type="deposit",
        status="failed",
        amount_cwt=80.0,
        amount_cws=0,
        description="Card deposit declined",
        created_at="2024-05-18T02:40:00.000Z",
    ),
    Transaction(
        transaction_id="TXN-1715500000000-356",
        type="deposit",
        status="completed",
        amount_cwt=60.0,
        amount_cws=0,
        description="Deposit via bank transfer",
        created_at="2024-05-12T07:46:40.000Z",
        completed_at="2024-05-12T08:10:12.000Z",
    ),
)

def list_transactions(
    type_filter: str | None = None,
    status_filter: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[Transaction]:
    """
    Sample history, newest first, optionally filtered by exact type and status.

    start_date/end_date are inclusive bounds compared as ISO-8601 strings against
    created_at, so a bare date like "2024-06-03" works as a lower bound.
    """
    items = sorted(SAMPLE_TRANSACTIONS, key=lambda t: t.created_at, reverse=True)
    if type_filter:
        items = [t for t in items if t.type == type_filter]
    if status_filter:
        items = [t for t in items if t.status == status_filter]
    if start_date:
        items = [t for t in items if t.created_at >= start_date]
    if end_date:
        items = [t for t in items if t.created_at <= end_date]
    return items


def recent_transactions(limit: int = 5) -> list[Transaction]:
    return list_transactions()[:limit]

