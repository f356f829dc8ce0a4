"""Reshape flat report rows into period-keyed series for charting"""

from decimal import Decimal, InvalidOperation, Overflow, getcontext
from typing import Any, Dict, Iterable, List, Mapping


def parse_amount(value: Any) -> Decimal:
    """
    Parse a report value as a decimal.

    Report rows carry amounts as strings (JSON) or Decimals (in process).
    Anything that does not parse to a finite number within the decimal
    context's exponent range counts as zero.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not amount.is_finite() or amount.adjusted() > getcontext().Emax:
        return Decimal(0)
    return amount


def pivot_by_period_and_key(
    rows: Iterable[Mapping[str, Any]],
    period_field: str,
    key_field: str,
    value_field: str,
    period_label: str = "period",
    sort: bool = False,
) -> List[Dict[str, Any]]:
    """
    Pivot rows into one record per period with one summed slot per key.

    Example:
        [{"dates": "2025-01", "category": "Food", "amount": "10"},
         {"dates": "2025-01", "category": "Food", "amount": "5"}]
        → [{"period": "2025-01", "Food": Decimal("15")}]

    Rules:
    - Values for a repeated (period, key) pair are summed
    - Periods appear in first-seen order, or sorted when sort=True
    - Rows without a period are skipped; rows without a key open their
      period but add no slot
    - Input rows are never modified
    - Never raises on malformed or out-of-range values
    """
    buckets: Dict[str, Dict[str, Any]] = {}

    for row in rows:
        period = row.get(period_field)
        if period is None:
            continue
        period = str(period)

        bucket = buckets.get(period)
        if bucket is None:
            bucket = {period_label: period}
            buckets[period] = bucket

        key = row.get(key_field)
        if key is None:
            continue
        key = str(key)
        if key == period_label:
            # Never let a data key overwrite the period column
            continue

        current = bucket.get(key, Decimal(0))
        try:
            bucket[key] = current + parse_amount(row.get(value_field))
        except Overflow:
            # Sum left the decimal range; keep the last representable total
            bucket[key] = current

    pivoted = list(buckets.values())
    if sort:
        pivoted.sort(key=lambda item: item[period_label])
    return pivoted
