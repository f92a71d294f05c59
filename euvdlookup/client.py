"""HTTP client for the EUVD vulnerability API with a shared rate limit."""

from __future__ import annotations

import http.client
import json
import time
import urllib.error
import urllib.request
from http import HTTPStatus
from urllib.parse import urlencode

from .models import (
    AdvisoryByID,
    CriticalVulnerability,
    ENISAVulnerabilityByID,
    ExploitedVulnerability,
    LatestVulnerability,
    VulnerabilityByID,
    VulnerabilityQueryResponse,
)

BASE_URL = "https://euvdservices.enisa.europa.eu/api"
DEFAULT_INTERVAL = 6.0
DEFAULT_TIMEOUT = 10.0


class EuvdError(Exception):
    """Base class for every failure talking to the API."""


class HttpError(EuvdError):
    """The request could not be sent or no response was received."""

    def __init__(self, reason):
        super().__init__(f"http error: {reason}")
        self.reason = reason


class BadResponseError(EuvdError):
    """The server answered with a status other than 200 OK."""

    def __init__(self, status, reason=""):
        if not reason and status in HTTPStatus._value2member_map_:
            reason = HTTPStatus(status).phrase
        self.status = status
        self.reason = reason
        super().__init__(f"bad response: {status} {reason}".rstrip())


class DecodeError(EuvdError):
    """The response body was not the JSON that was expected."""

    def __init__(self, reason):
        super().__init__(f"json decode error: {reason}")
        self.reason = reason


class RateLimiter:
    """Allows one event per ``interval`` seconds, with a burst of one."""

    def __init__(self, interval=DEFAULT_INTERVAL, clock=time.monotonic, sleep=time.sleep):
        if interval < 0:
            raise ValueError("interval must not be negative")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._next = None

    def wait(self):
        """Block until the next event may happen; return the time slept."""
        now = self._clock()
        start = now if self._next is None else max(now, self._next)
        self._next = start + self.interval
        delay = start - now
        if delay > 0:
            self._sleep(delay)
            return delay
        return 0.0


class EuvdClient:
    """Fetches and decodes records from the EUVD API."""

    def __init__(self, base_url=BASE_URL, timeout=DEFAULT_TIMEOUT, limiter=None, opener=None):
        self.base_url = base_url
        self.timeout = timeout
        self.limiter = limiter or RateLimiter()
        self._opener = opener or urllib.request.urlopen

    def request(self, endpoint):
        """GET ``endpoint`` below the base URL and return the decoded JSON."""
        self.limiter.wait()
        try:
            with self._opener(f"{self.base_url}{endpoint}", timeout=self.timeout) as response:
                if response.status != HTTPStatus.OK:
                    raise BadResponseError(response.status, getattr(response, "reason", "") or "")
                body = response.read()
        except urllib.error.HTTPError as exc:
            raise BadResponseError(exc.code, str(exc.reason or "")) from exc
        except (OSError, http.client.HTTPException, ValueError) as exc:
            raise HttpError(exc) from exc
        try:
            return json.loads(body)
        except ValueError as exc:
            raise DecodeError(exc) from exc

    def _fetch(self, endpoint, model, many=False):
        data = self.request(endpoint)
        try:
            if not many:
                return model.from_dict(data)
            if data is None:
                return []
            if not isinstance(data, list):
                raise TypeError(f"cannot decode {type(data).__name__} into array")
            return [model.from_dict(item) for item in data]
        except TypeError as exc:
            raise DecodeError(exc) from exc

    def latest_vulnerabilities(self):
        return self._fetch("/lastvulnerabilities", LatestVulnerability, many=True)

    def exploited_vulnerabilities(self):
        return self._fetch("/exploitedvulnerabilities", ExploitedVulnerability, many=True)

    def critical_vulnerabilities(self):
        return self._fetch("/criticalvulnerabilities", CriticalVulnerability, many=True)

    def vulnerability(self, cve_id):
        return self._fetch(f"/vulnerability?{urlencode({'id': cve_id})}", VulnerabilityByID)

    def enisa_vulnerability(self, enisa_id):
        return self._fetch(f"/enisaid?{urlencode({'id': enisa_id})}", ENISAVulnerabilityByID)

    def advisory(self, advisory_id):
        return self._fetch(f"/advisory?{urlencode({'id': advisory_id})}", AdvisoryByID)

    def search(self, text):
        return self._fetch(f"/vulnerabilities?{urlencode({'text': text})}", VulnerabilityQueryResponse)