def format_usd(amount: float) -> str:
    """Format amount in dollars for listings: $12, $12.50, $1,250."""
    if amount == int(amount):
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def format_amount(amount: float) -> str:
    """Amount exactly as extracted: $1250, $12.5, $0.125."""
    if amount == int(amount):
        return f"${int(amount)}"
    return f"${amount!r}"
