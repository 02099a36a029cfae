"""
Click analytics: request classification and event aggregation.
"""

from .classifier import UserAgentInfo, parse_user_agent, referrer_domain
from .countries import CountryLookup
from .aggregation import aggregate_by_field, aggregate_timeline, top_cities

__all__ = [
    "UserAgentInfo",
    "parse_user_agent",
    "referrer_domain",
    "CountryLookup",
    "aggregate_by_field",
    "aggregate_timeline",
    "top_cities",
]
