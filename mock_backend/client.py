#!/usr/bin/env python3
"""
Control API client for test runners (Maestro flows, CI scripts)
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional
import httpx
from .services.session_service import SESSION_HEADER

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_PREFIX = "/api/test-scenarios"
TRACKERS = ("camera-performance", "rotation-test", "remove-listing-test")


class ScenarioClientError(Exception):
    """Raised when the control API answers with an error status"""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Control API returned {status_code}: {body}")


class ScenarioClient:
    """Thin wrapper over the test scenario control API"""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        prefix: str = DEFAULT_PREFIX,
        timeout: float = 30,
        http: Optional[httpx.Client] = None
    ):
        self.prefix = prefix.rstrip("/")
        self.http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self.session_id: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.session_id:
            headers[SESSION_HEADER] = self.session_id

        response = self.http.request(method, f"{self.prefix}{path}", headers=headers, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.status_code >= 400:
            logger.error(f"{method} {path} failed with status {response.status_code}: {body}")
            raise ScenarioClientError(response.status_code, body)
        return body

    def activate(self, scenario: str = "default", **metadata) -> Dict[str, Any]:
        """Open a session; later calls on this client carry its id"""
        result = self._request("POST", "/activate", json={"scenario": scenario, "metadata": metadata})
        self.session_id = result["session_id"]
        logger.info(f"Activated scenario '{result['scenario']}' - session_id: {self.session_id}")
        return result

    def current(self) -> Dict[str, Any]:
        return self._request("GET", "/current")

    def switch(self, scenario: str) -> Dict[str, Any]:
        return self._request("POST", "/switch", json={"scenario": scenario})

    def reset(self) -> Dict[str, Any]:
        result = self._request("POST", "/reset")
        self.session_id = None
        return result

    def available(self) -> Dict[str, Any]:
        return self._request("GET", "/available")

    def metrics(self) -> Dict[str, Any]:
        return self._request("GET", "/metrics")

    def analysis(self, tracker: str) -> Dict[str, Any]:
        if tracker not in TRACKERS:
            raise ValueError(f"Unknown tracker: {tracker}")
        return self._request("GET", f"/{tracker}/analysis")

    def clear(self, tracker: str) -> Dict[str, Any]:
        if tracker not in TRACKERS:
            raise ValueError(f"Unknown tracker: {tracker}")
        return self._request("POST", f"/{tracker}/clear")

    def close(self):
        self.http.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Drive the test scenario control API")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--session-id", help="Existing session id for current/switch/reset/analysis")
    subparsers = parser.add_subparsers(dest="command", required=True)

    activate = subparsers.add_parser("activate")
    activate.add_argument("scenario", nargs="?", default="default")
    activate.add_argument("--test-name")

    subparsers.add_parser("current")
    switch = subparsers.add_parser("switch")
    switch.add_argument("scenario")
    subparsers.add_parser("reset")
    subparsers.add_parser("available")
    subparsers.add_parser("metrics")
    analysis = subparsers.add_parser("analysis")
    analysis.add_argument("tracker", choices=TRACKERS)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    client = ScenarioClient(base_url=args.base_url)
    client.session_id = args.session_id
    try:
        if args.command == "activate":
            metadata = {"test_name": args.test_name} if args.test_name else {}
            result = client.activate(args.scenario, **metadata)
        elif args.command == "switch":
            result = client.switch(args.scenario)
        elif args.command == "analysis":
            result = client.analysis(args.tracker)
        else:
            result = getattr(client, args.command)()
    except ScenarioClientError as e:
        print(json.dumps(e.body, indent=2), file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
