"""
Filter state <-> query string.

Inbound keys: fund, entity, country, city (comma-joined lists, or repeated keys
from multi-selects), indexable ("1" enables indexable-only) and q (free text).
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import urlencode

from starlette.datastructures import QueryParams

from rentboard.schemas.filters import FILTER_DIMENSIONS, FilterState

RawValue = str | Sequence[str] | None


def split_multi(value: RawValue) -> tuple[str, ...] | None:
    if not value:
        return None
    joined = value if isinstance(value, str) else ','.join(str(v) for v in value)
    out = tuple(part.strip() for part in joined.split(',') if part.strip())
    return out or None


def parse_filters(raw: Mapping[str, RawValue]) -> FilterState:
    search = raw.get('q')
    return FilterState(
        **{dim: split_multi(raw.get(dim)) for dim in FILTER_DIMENSIONS},
        indexable_only=raw.get('indexable') == '1',
        search=search if isinstance(search, str) else None,
    )


def parse_query_params(query_params: QueryParams) -> FilterState:
    raw: dict[str, RawValue] = {}
    for key in query_params.keys():
        values = query_params.getlist(key)
        raw[key] = values[0] if len(values) == 1 else values
    return parse_filters(raw)


def serialize_filters(state: FilterState) -> dict[str, str]:
    out: dict[str, str] = {}
    for dim in FILTER_DIMENSIONS:
        values = state.selected(dim)
        if values:
            out[dim] = ','.join(values)
    if state.indexable_only:
        out['indexable'] = '1'
    if state.search:
        out['q'] = state.search
    return out


def build_query_string(state: FilterState, **extra: str | None) -> str:
    params = serialize_filters(state)
    for key, value in extra.items():
        if value:
            params[key] = str(value)
    return urlencode(params)


def to_rpc_params(state: FilterState, include_indexable: bool = True) -> dict[str, object]:
    """Backend-facing parameters; absent dimensions are sent as null, never as []."""
    params: dict[str, object] = {
        f'p_{dim}': list(state.selected(dim)) or None for dim in FILTER_DIMENSIONS
    }
    if include_indexable:
        params['p_indexable_only'] = bool(state.indexable_only)
    params['p_search'] = state.search
    return params
