"""GET each dashboard page and JSON endpoint a few times and check p95 against a budget."""
import json
import os
import statistics
import time
import urllib.request
from urllib.error import HTTPError, URLError


BASE = os.getenv('PERF_BASE', 'http://localhost:8000').rstrip('/')
SAMPLES = int(os.getenv('PERF_SAMPLES', '9'))
PAGE_BUDGET_MS = float(os.getenv('PERF_PAGE_P95_BUDGET_MS', '1500'))
WARMUP_CALLS = int(os.getenv('PERF_WARMUP_CALLS', '2'))
HTTP_TIMEOUT_SECONDS = float(os.getenv('PERF_HTTP_TIMEOUT_SECONDS', '60'))
HTTP_RETRIES = int(os.getenv('PERF_HTTP_RETRIES', '3'))
HTTP_RETRY_SLEEP_SECONDS = float(os.getenv('PERF_HTTP_RETRY_SLEEP_SECONDS', '2'))


def http_get(path: str):
    last_error = None

    for attempt in range(max(1, HTTP_RETRIES)):
        start = time.perf_counter()
        try:
            with urllib.request.urlopen(f'{BASE}{path}', timeout=HTTP_TIMEOUT_SECONDS) as res:
                body = res.read()
            return (time.perf_counter() - start) * 1000, body
        except HTTPError as exc:
            # 502 is the aggregation backend failing; retry those only
            if exc.code >= 500:
                last_error = exc
            else:
                raise
        except (URLError, TimeoutError) as exc:
            last_error = exc

        if attempt < HTTP_RETRIES - 1:
            time.sleep(max(0.0, HTTP_RETRY_SLEEP_SECONDS))

    raise RuntimeError(f'HTTP GET failed after {max(1, HTTP_RETRIES)} attempts for {path}: {last_error}')


def p95(values):
    if not values:
        return 0.0
    sorted_vals = sorted(values)
    idx = int(round((len(sorted_vals) - 1) * 0.95))
    idx = max(0, min(idx, len(sorted_vals) - 1))
    return float(sorted_vals[idx])


def main():
    paths = [
        '/',
        '/receivables',
        '/receivables?view=line',
        '/api/v1/portfolio/overview',
        '/api/v1/receivables/summary',
    ]

    report = {'base': BASE, 'endpoints': []}
    for path in paths:
        for _ in range(max(0, WARMUP_CALLS)):
            http_get(path)

        samples = [http_get(path)[0] for _ in range(SAMPLES)]
        endpoint_p95 = p95(samples)
        ok = endpoint_p95 <= PAGE_BUDGET_MS
        report['endpoints'].append(
            {
                'path': path,
                'samples_ms': [round(v, 2) for v in samples],
                'avg_ms': round(statistics.mean(samples), 2),
                'p95_ms': round(endpoint_p95, 2),
                'budget_ms': PAGE_BUDGET_MS,
                'ok': ok,
            }
        )
        if not ok:
            raise RuntimeError(f'Perf smoke FAIL {path}: p95={endpoint_p95:.2f} budget={PAGE_BUDGET_MS}')

    print(json.dumps(report, ensure_ascii=False, indent=2))


if __name__ == '__main__':
    main()
