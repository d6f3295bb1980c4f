"""
Public-holiday feed client (Nager.Date).

GET {HOLIDAY_API_URL}/{year}/{country} returns a JSON list of
{"date": "YYYY-MM-DD", "localName": ..., "name": ..., ...}.
"""
import logging

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class HolidayFeedError(Exception):
    """The feed could not be reached or answered with something unusable."""
    pass


def _session() -> requests.Session:
    session = requests.Session()
    retry = Retry(total=3, backoff_factor=1, status_forcelist=[502, 503, 504], allowed_methods=['GET'])
    session.mount('https://', HTTPAdapter(max_retries=retry))
    session.mount('http://', HTTPAdapter(max_retries=retry))
    return session


def fetch_public_holidays(year: int, country: str) -> list:
    url = f"{settings.HOLIDAY_API_URL.rstrip('/')}/{year}/{country.upper()}"
    logger.info('Fetching public holidays: %s', url)
    try:
        response = _session().get(url, timeout=settings.HOLIDAY_API_TIMEOUT)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        raise HolidayFeedError(f"Holiday API request failed: {e}") from e
    except ValueError as e:
        raise HolidayFeedError('Holiday API returned invalid JSON') from e

    if not isinstance(payload, list):
        raise HolidayFeedError('Holiday API returned an unexpected payload')
    return payload
