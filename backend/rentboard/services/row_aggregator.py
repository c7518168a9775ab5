from __future__ import annotations

import csv
import io
from enum import Enum
from typing import Sequence

from rentboard.schemas.receivables import BUCKET_FIELDS, DetailRow, GroupSummary


class ViewMode(str, Enum):
    GROUP = 'group'
    LINE = 'line'


def parse_view_mode(raw: str | None) -> ViewMode:
    try:
        return ViewMode(str(raw or '').strip().lower())
    except ValueError:
        return ViewMode.GROUP


def group_rows(rows: Sequence[DetailRow]) -> list[GroupSummary]:
    """Consolidate invoice lines per debtor group, largest exposure first."""
    groups: dict[str, GroupSummary] = {}
    for row in rows:
        key = row.group_key
        summary = groups.get(key)
        if summary is None:
            summary = GroupSummary(display_name=key, city=row.city)
            groups[key] = summary
        for name in BUCKET_FIELDS:
            setattr(summary, name, getattr(summary, name) + getattr(row, name))
        summary.total += row.total
        summary.count += 1
    # sorted() is stable, so equal totals keep first-seen order
    return sorted(groups.values(), key=lambda g: g.total, reverse=True)


def aggregate(rows: Sequence[DetailRow], mode: ViewMode) -> Sequence[DetailRow] | list[GroupSummary]:
    if mode == ViewMode.LINE:
        return rows
    return group_rows(rows)


_CSV_COLUMNS = {
    ViewMode.GROUP: ('display_name', 'city', 'count') + BUCKET_FIELDS + ('total',),
    ViewMode.LINE: ('tenant', 'contact_name', 'unit_id', 'city', 'invoice_date') + BUCKET_FIELDS + ('total',),
}


class ArrearsTable:
    """Arrears detail table state: input rows plus the group/line toggle.

    The displayed rows are only recomputed when the row sequence (by identity)
    or the view mode changes.
    """

    def __init__(self, rows: Sequence[DetailRow], mode: ViewMode = ViewMode.GROUP) -> None:
        self._rows = rows
        self._mode = mode
        self._cache: tuple[Sequence[DetailRow], ViewMode, Sequence] | None = None

    @property
    def mode(self) -> ViewMode:
        return self._mode

    @property
    def rows(self) -> Sequence[DetailRow]:
        return self._rows

    def set_mode(self, mode: ViewMode) -> None:
        self._mode = mode

    def set_rows(self, rows: Sequence[DetailRow]) -> None:
        self._rows = rows

    @property
    def displayed(self) -> Sequence[DetailRow] | list[GroupSummary]:
        cached = self._cache
        if cached is not None and cached[0] is self._rows and cached[1] == self._mode:
            return cached[2]
        result = aggregate(self._rows, self._mode)
        self._cache = (self._rows, self._mode, result)
        return result

    @property
    def is_grouped(self) -> bool:
        return self._mode == ViewMode.GROUP

    @property
    def headers(self) -> tuple[str, str]:
        if self.is_grouped:
            return ('Debtor Group', 'Open Items')
        return ('Tenant', 'Unit / Invoice')

    @property
    def description(self) -> str:
        if self.is_grouped:
            return 'Consolidated view by Debtor Group'
        return 'Detailed view by Invoice'

    def to_csv(self) -> str:
        columns = _CSV_COLUMNS[self._mode]
        out = io.StringIO()
        w = csv.writer(out)
        w.writerow(columns)
        for item in self.displayed:
            w.writerow(['' if getattr(item, c) is None else getattr(item, c) for c in columns])
        return out.getvalue()
