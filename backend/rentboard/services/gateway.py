"""
Typed boundary to the remote aggregation procedures.

Every page issues one batch of named RPC calls sharing the same filter
parameters. The batch succeeds as a whole or fails as a whole.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from rentboard.core.config import settings
from rentboard.core.logging_config import log_rpc, structured_log
from rentboard.core.request_metrics import observe_rpc
from rentboard.schemas.common import to_float
from rentboard.schemas.filters import FilterOptions

__all__ = [
    'AggregationError',
    'AggregationGateway',
    'RpcCallError',
    'RpcRequest',
    'as_records',
    'decode_filter_options',
    'first_record',
    'to_float',
]


class RpcCallError(Exception):
    def __init__(self, name: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f'{name}: {message}')
        self.name = name
        self.message = message
        self.status_code = status_code

    def as_dict(self) -> dict[str, Any]:
        return {'rpc': self.name, 'message': self.message, 'status_code': self.status_code}


class AggregationError(Exception):
    """At least one call of a batch failed; the batch has no usable result."""

    def __init__(self, failures: list[RpcCallError]) -> None:
        names = ', '.join(f.name for f in failures)
        super().__init__(f'aggregation batch failed: {names}')
        self.failures = failures

    def as_dict(self) -> dict[str, Any]:
        return {'failures': [f.as_dict() for f in self.failures]}


@dataclass(frozen=True)
class RpcRequest:
    name: str
    params: dict[str, Any] = field(default_factory=dict)


class AggregationGateway:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.rpc_base_url).rstrip('/')
        self.api_key = api_key if api_key is not None else settings.rpc_api_key
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {'Content-Type': 'application/json', 'Accept': 'application/json'}
        if self.api_key:
            headers['apikey'] = self.api_key
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def rpc_url(self, name: str) -> str:
        return f'{self.base_url}/rest/v1/rpc/{name}'

    async def call(self, client: httpx.AsyncClient, name: str, params: dict[str, Any]) -> Any:
        if not self.base_url:
            raise RpcCallError(name, 'RPC backend is not configured')
        start = time.perf_counter()
        try:
            res = await client.post(self.rpc_url(name), json=params)
            res.raise_for_status()
            payload = res.json() if res.content else None
        except httpx.HTTPStatusError as exc:
            err = RpcCallError(name, exc.response.text[:300] or str(exc), exc.response.status_code)
        except httpx.HTTPError as exc:
            err = RpcCallError(name, str(exc) or exc.__class__.__name__)
        except ValueError as exc:
            err = RpcCallError(name, f'invalid JSON response: {exc}')
        else:
            latency = (time.perf_counter() - start) * 1000
            observe_rpc(name, latency, ok=True)
            log_rpc(name, latency, ok=True)
            return payload
        latency = (time.perf_counter() - start) * 1000
        observe_rpc(name, latency, ok=False)
        log_rpc(name, latency, ok=False, error=err.message)
        raise err

    async def fetch_batch(self, common: dict[str, Any], requests: list[RpcRequest]) -> dict[str, Any]:
        """Run every request concurrently with the same ``common`` filter parameters."""
        async with httpx.AsyncClient(transport=self._transport, headers=self._headers()) as client:
            results = await asyncio.gather(
                *(self.call(client, req.name, {**common, **req.params}) for req in requests),
                return_exceptions=True,
            )
        failures: list[RpcCallError] = []
        out: dict[str, Any] = {}
        for req, result in zip(requests, results):
            if isinstance(result, RpcCallError):
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                out[req.name] = result
        if failures:
            structured_log(
                'error', 'aggregation_batch_failed',
                failed=[f.name for f in failures],
                batch=[req.name for req in requests],
            )
            raise AggregationError(failures)
        return out


def first_record(payload: Any) -> dict[str, Any]:
    if isinstance(payload, list):
        return payload[0] if payload and isinstance(payload[0], dict) else {}
    if isinstance(payload, dict):
        return payload
    return {}


def as_records(payload: Any) -> list[dict[str, Any]]:
    if not isinstance(payload, list):
        return []
    return [r for r in payload if isinstance(r, dict)]


def decode_filter_options(payload: Any) -> FilterOptions:
    """The options procedure answers with a bare record or a list whose first record counts."""
    if isinstance(payload, list):
        payload = payload[0] if payload else None
    if payload is None:
        return FilterOptions()
    try:
        return FilterOptions.model_validate(payload)
    except ValidationError as exc:
        structured_log('warning', 'filter_options_malformed', error=str(exc)[:300])
        return FilterOptions()
