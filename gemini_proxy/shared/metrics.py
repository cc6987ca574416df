#!/usr/bin/env python3
"""
Metrics definitions for Gemini API Proxy.
"""

import prometheus_client

UPSTREAM_REQUESTS = prometheus_client.Counter(
    'gemini_upstream_requests', 'Requests sent to the Gemini API', ['model']
)
UPSTREAM_ERRORS = prometheus_client.Counter(
    'gemini_upstream_errors', 'Failed requests to the Gemini API', ['model', 'reason']
)
UPSTREAM_LATENCY = prometheus_client.Histogram(
    'gemini_upstream_latency_seconds', 'Gemini API response time', ['model']
)
