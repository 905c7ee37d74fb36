"""Shared failure code constants surfaced in API error bodies."""

# Caller-side problems (HTTP 400).
MISSING_COUNTRIES = "missing_countries"
UNKNOWN_COUNTRY = "unknown_country"
INVALID_UPLOAD = "invalid_upload"

# Indicator source problems (HTTP 502).
UPSTREAM_UNAVAILABLE = "upstream_unavailable"
