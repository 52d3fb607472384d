"""
Client for the record lookup API.

Usage:
    client = RecordClient("https://localhost:8443", verify="server.crt")
    record = client.get_record(1)

    python -m api.client 1 2 --url https://localhost:8443 --insecure
"""

import argparse
import sys
from typing import Dict, Optional, Union

import requests

from utils import log


class RecordClient:
    """
    Client for the record lookup API.

    Usage:
        client = RecordClient("https://localhost:8443", verify=False)
        client.get_record(1)   # {'id': 1, 'value': 'test value'}
        client.get_simple()    # 'This is a simple page!'
    """

    def __init__(
        self,
        api_url: str = "https://localhost:8443",
        verify: Union[bool, str] = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize API client.

        Args:
            api_url: Base URL of the API server
            verify: requests' TLS verification; a CA/cert path for a
                self-signed server certificate, or False to skip checks
            session: Optional pre-built session
        """
        self.api_url = api_url.rstrip('/')
        self.session = session or requests.Session()
        self.session.verify = verify

    def _get(self, endpoint: str) -> requests.Response:
        """Make GET request to API; raises requests.HTTPError on non-2xx."""
        response = self.session.get(f"{self.api_url}{endpoint}")
        response.raise_for_status()
        return response

    def get_record(self, record_id: int) -> Dict:
        """Fetch a record by id."""
        return self._get(f"/data/{record_id}").json()

    def get_simple(self) -> str:
        """Fetch the static page."""
        return self._get("/simple").text


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch records from the record lookup API")
    parser.add_argument("ids", nargs="+", type=int, help="Record ids to fetch")
    parser.add_argument("--url", default="https://localhost:8443", help="API base URL")
    parser.add_argument("--cert", default=None, help="Certificate to trust (e.g. server.crt)")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    args = parser.parse_args(argv)

    verify: Union[bool, str] = True
    if args.insecure:
        verify = False
    elif args.cert:
        verify = args.cert

    client = RecordClient(args.url, verify=verify)
    failures = 0
    for record_id in args.ids:
        try:
            record = client.get_record(record_id)
        except requests.RequestException as e:
            log.err(f"{record_id}: {e}")
            failures += 1
            continue
        log.ok(f"{record['id']}: {record['value']}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
