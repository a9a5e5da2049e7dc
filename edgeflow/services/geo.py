"""Geo hints from edge proxy request headers."""

from __future__ import annotations

from typing import Any, Mapping

# Header name -> geo field; first header present wins.
GEO_HEADERS: dict[str, tuple[str, ...]] = {
    "country": ("cf-ipcountry", "x-vercel-ip-country", "x-country"),
    "city": ("cf-ipcity", "x-vercel-ip-city", "x-city"),
    "continent": ("cf-ipcontinent", "x-continent"),
    "latitude": ("cf-iplatitude", "x-vercel-ip-latitude", "x-latitude"),
    "longitude": ("cf-iplongitude", "x-vercel-ip-longitude", "x-longitude"),
    "colo": ("cf-ray-colo", "x-edge-location"),
}

# Cloudflare sends XX for unknown countries and T1 for Tor exits.
_UNKNOWN_COUNTRIES = {"", "XX", "T1"}


def geo_from_headers(headers: Mapping[str, str]) -> dict[str, Any]:
    """Extract geo fields from request headers.

    Header lookup is case-insensitive. Missing fields are omitted.
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    geo: dict[str, Any] = {}

    for field, names in GEO_HEADERS.items():
        for name in names:
            value = lowered.get(name)
            if value:
                geo[field] = value
                break

    country = str(geo.get("country", "")).upper()
    if country in _UNKNOWN_COUNTRIES:
        geo.pop("country", None)
    else:
        geo["country"] = country

    for field in ("latitude", "longitude"):
        if field in geo:
            try:
                geo[field] = float(geo[field])
            except ValueError:
                del geo[field]

    return geo
