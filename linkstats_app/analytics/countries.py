"""
Country code to display name lookup.

Injected into the analytics service so that the table can be swapped
(e.g. for a full ISO 3166 dataset) without touching the aggregation code.
"""

from typing import Dict, Optional

DEFAULT_COUNTRY_NAMES: Dict[str, str] = {
    "US": "United States",
    "GB": "United Kingdom",
    "DE": "Germany",
    "FR": "France",
    "ES": "Spain",
    "IT": "Italy",
    "NL": "Netherlands",
    "BE": "Belgium",
    "AT": "Austria",
    "CH": "Switzerland",
    "CA": "Canada",
    "AU": "Australia",
    "JP": "Japan",
    "CN": "China",
    "KR": "South Korea",
    "IN": "India",
    "BR": "Brazil",
    "MX": "Mexico",
    "AR": "Argentina",
    "RU": "Russia",
    "PL": "Poland",
    "SE": "Sweden",
    "NO": "Norway",
    "DK": "Denmark",
    "FI": "Finland",
    "PT": "Portugal",
    "IE": "Ireland",
    "NZ": "New Zealand",
    "SG": "Singapore",
    "HK": "Hong Kong",
    "Unknown": "Unknown",
}


class CountryLookup:
    """Maps country codes to names; unknown codes pass through unchanged."""

    def __init__(self, names: Optional[Dict[str, str]] = None):
        self._names = dict(DEFAULT_COUNTRY_NAMES if names is None else names)

    def name_for(self, code: str) -> str:
        return self._names.get(code) or code
