from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
GRAM = Decimal("0.001")


def to_money(amount) -> Decimal:
    """Coerce a DB value (Decimal, float, int or None) to a 2-place Decimal."""
    if amount is None:
        return Decimal("0.00")
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_weight(weight) -> Decimal:
    """Round a weight in kg to the 3 places the line item column stores."""
    if not isinstance(weight, Decimal):
        weight = Decimal(str(weight))
    return weight.quantize(GRAM, rounding=ROUND_HALF_UP)


def format_indian_currency(amount: Decimal) -> str:
    """Format with Indian digit grouping, e.g. ₹ 12,34,567.80."""
    amount = to_money(amount)
    sign = "-" if amount < 0 else ""
    integer_part, decimal_part = f"{abs(amount):.2f}".split(".")

    if len(integer_part) > 3:
        head, last_three = integer_part[:-3], integer_part[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        integer_part = ",".join(groups + [last_three])

    return f"₹ {sign}{integer_part}.{decimal_part}"
