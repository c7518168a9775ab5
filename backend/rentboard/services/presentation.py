"""Display formatting and derived ratios shared by the dashboard pages."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable

from rentboard.schemas.common import to_float

CURRENCY_SYMBOL = '€'
_COMPACT_UNITS = ((1e12, 'T'), (1e9, 'B'), (1e6, 'M'), (1e3, 'K'))
_NEXT_UNIT = {'': 'K', 'K': 'M', 'M': 'B', 'B': 'T'}


def _round_half_up(value: float, digits: int) -> Decimal:
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        # quantize needs every integer digit plus the kept fraction digits
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        return exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def _grouped(value: float, max_digits: int) -> str:
    """Thousands separators with at most ``max_digits`` fraction digits, trailing zeros dropped."""
    rounded = _round_half_up(abs(value), max_digits)
    text = f'{rounded:,.{max_digits}f}'
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if rounded != 0 and value < 0:
        text = '-' + text
    return text


def fmt_eur(value: object) -> str:
    v = to_float(value)
    amount = _grouped(abs(v), 0)
    if v < 0 and amount != '0':
        return f'-{CURRENCY_SYMBOL}{amount}'
    return f'{CURRENCY_SYMBOL}{amount}'


def fmt_eur_or_dash(value: object) -> str:
    v = to_float(value)
    return fmt_eur(v) if v else '-'


def fmt_num(value: object) -> str:
    return _grouped(to_float(value), 1)


def fmt_pct(ratio: object) -> str:
    return f'{_grouped(to_float(ratio) * 100, 1)}%'


def fmt_compact(value: object) -> str:
    v = to_float(value)
    magnitude = abs(v)
    scaled, suffix = magnitude, ''
    for threshold, unit in _COMPACT_UNITS:
        if magnitude >= threshold:
            scaled, suffix = magnitude / threshold, unit
            break
    rounded = _round_half_up(scaled, 1 if scaled < 10 else 0)
    if rounded >= 1000 and suffix in _NEXT_UNIT:
        # 999.95K is shown as 1M
        rounded, suffix = Decimal(1), _NEXT_UNIT[suffix]
    text = f'{rounded:f}'
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    sign = '-' if v < 0 and text != '0' else ''
    return f'{sign}{text}{suffix}'


def safe_ratio(numerator: object, denominator: object) -> float:
    den = to_float(denominator)
    if den <= 0:
        return 0.0
    return to_float(numerator) / den


def vacancy_rate_by_area(vacant_area: object, total_area: object) -> float:
    return safe_ratio(vacant_area, total_area)


def vacancy_rate_by_units(vacant_units: object, total_units: object) -> float:
    return safe_ratio(vacant_units, total_units)


def debt_risk_ratio(risk_debt: object, total_debt: object) -> float:
    return safe_ratio(risk_debt, total_debt)


def _parse_date(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raw = str(value or '').strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def days_until(target: object, now: datetime | None = None) -> int | None:
    parsed = _parse_date(target)
    if parsed is None:
        return None
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.ceil((parsed - now).total_seconds() / 86400)


def expiry_urgency(target: object, now: datetime | None = None) -> str:
    """Colour tier of a lease end date badge: critical (<30d), high (<60d), elevated.

    A missing or unparseable date gets the last tier.
    """
    days = days_until(target, now)
    if days is None:
        return 'elevated'
    if days < 30:
        return 'critical'
    if days < 60:
        return 'high'
    return 'elevated'


def initials(name: object) -> str:
    text = str(name or '').strip()
    return text[:2].upper() if text else '??'


def truncate_label(label: object, limit: int = 30, keep: int = 24) -> str:
    text = str(label or '')
    return text[:keep] + '...' if len(text) > limit else text


# KPI card variants

def vacancy_variant(rate: float) -> str:
    return 'danger' if rate > 0.10 else 'default'


def walt_variant(years: float) -> str:
    return 'warning' if years < 3 else 'default'


def concentration_variant(share: float) -> str:
    return 'warning' if share > 0.5 else 'default'


def expiry_risk_variant(amount: float) -> str:
    return 'danger' if amount > 0 else 'default'


def debt_risk_variant(ratio: float) -> str:
    if ratio > 0.15:
        return 'danger'
    if ratio > 0.05:
        return 'warning'
    return 'default'


# chart series

def bar_series(items: Iterable[Any], label_attr: str, value_attr: str) -> list[dict[str, Any]]:
    rows = [(getattr(item, label_attr), to_float(getattr(item, value_attr))) for item in items]
    peak = max((value for _, value in rows), default=0.0)
    out = []
    for label, value in rows:
        out.append(
            {
                'label': label,
                'short_label': truncate_label(label),
                'value': value,
                'display': fmt_compact(value),
                'width_pct': round(safe_ratio(max(value, 0.0), peak) * 100, 1),
            }
        )
    return out


def expiry_tone(expiry_year: int, current_year: int | None = None) -> str:
    current_year = current_year or date.today().year
    return 'severe' if expiry_year <= current_year + 1 else 'normal'


def aging_tone(index: int) -> str:
    if index > 2:
        return 'severe'
    if index == 2:
        return 'watch'
    return 'fresh'
