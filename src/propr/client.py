"""HTTP client for the /reviews API, as used by the review UI."""

from __future__ import annotations

import time

import httpx

from propr.models.enums import JobStatus
from propr.models.review import ReviewRequest


class ReviewClientError(Exception):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class ReviewClient:
    """Sync client for submitting review jobs and polling their status."""

    def __init__(
        self,
        backend_url: str,
        client_key: str,
        timeout: float = 30.0,
        verify: bool | str = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = backend_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={"X-Client-Key": client_key},
            timeout=timeout,
            verify=verify,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ReviewClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        try:
            message = response.json().get("error") or response.reason_phrase
        except ValueError:
            message = response.text or response.reason_phrase
        raise ReviewClientError(response.status_code, message)

    def submit_review(self, request: ReviewRequest | dict, ado_token: str | None = None) -> str:
        """Submit a review request; returns the new job id."""
        body = request.to_wire() if isinstance(request, ReviewRequest) else request
        headers = {"X-Ado-Token": ado_token} if ado_token else None
        r = self._check(self._http.post("/reviews", json=body, headers=headers))
        return r.json()["jobId"]

    def get_review_status(self, job_id: str) -> dict:
        r = self._check(self._http.get(f"/reviews/{job_id}"))
        return r.json()

    def list_reviews(self) -> list[dict]:
        """All jobs, most recent first."""
        r = self._check(self._http.get("/reviews"))
        return r.json()

    def wait_for_completion(self, job_id: str, interval: float = 5.0, timeout: float = 300.0) -> dict:
        """Poll ``job_id`` until it reaches a terminal status.

        Raises:
            TimeoutError: the job is still running after ``timeout`` seconds.
        """
        deadline = time.monotonic() + timeout
        while True:
            status = self.get_review_status(job_id)
            if JobStatus(status["status"]).is_terminal:
                return status
            if time.monotonic() >= deadline:
                raise TimeoutError(f"Job {job_id} still {status['status']} after {timeout}s")
            time.sleep(interval)
