"""
HTTP session for outbound calls made by the contact relay (connection pooling, no retry).

Nothing is retried: a failed reCAPTCHA or Mailjet call fails the submission.
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_outbound_session() -> requests.Session:
    """Create a requests session for reCAPTCHA and Mailjet calls."""
    session = requests.Session()

    retry_strategy = Retry(total=0, connect=0, read=0, redirect=0, status=0, raise_on_status=False)

    adapter = HTTPAdapter(pool_connections=2, pool_maxsize=10, max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


_SESSION = create_outbound_session()


def get_session() -> requests.Session:
    return _SESSION
