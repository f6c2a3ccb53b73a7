from __future__ import annotations
from typing import Any, Dict, List, Optional

import httpx
import structlog
from pydantic import ValidationError

from sre_assessment.core.errors import SubmissionError
from sre_assessment.core.questionnaire import Questionnaire, parse_questionnaire
from sre_assessment.core.submissions import Submission, SubmissionPayload, SubmissionUpdate

logger = structlog.get_logger()

FAILURE_MESSAGE = "Failed to submit assessment. Please try again."


class SubmissionClient:
    """Talks to the assessment backend. Every failure surfaces as SubmissionError."""

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "SubmissionClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._http.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "client.request_rejected",
                method=method,
                url=url,
                status=exc.response.status_code,
                body=exc.response.text[:200],
            )
            raise SubmissionError(f"{method} {url} failed with status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("client.request_failed", method=method, url=url, error=str(exc))
            raise SubmissionError(f"{method} {url} failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("client.bad_response", method=method, url=url, body=response.text[:200])
            raise SubmissionError(f"{method} {url} returned a body that is not JSON") from exc

    def _submission(self, url: str, data: Any) -> Submission:
        try:
            return Submission.model_validate(data)
        except ValidationError as exc:
            logger.warning("client.bad_response", url=url, error=str(exc))
            raise SubmissionError(f"{url} returned an unexpected submission shape") from exc

    def _submissions(self, url: str, data: Any) -> List[Submission]:
        if not isinstance(data, list):
            logger.warning("client.bad_response", url=url, error="expected a list")
            raise SubmissionError(f"{url} did not return a list of submissions")
        return [self._submission(url, d) for d in data]

    def submit(self, payload: SubmissionPayload) -> Submission:
        url = "/api/submissions"
        return self._submission(url, self._request("POST", url, json=payload.model_dump(mode="json")))

    def update(self, payload: SubmissionUpdate) -> Submission:
        url = f"/api/submissions/{payload.id}"
        return self._submission(url, self._request("PUT", url, json=payload.model_dump(mode="json")))

    def fetch(self, submission_id: int) -> Submission:
        url = f"/api/submissions/{submission_id}"
        return self._submission(url, self._request("GET", url))

    def list(self, search: Optional[str] = None, limit: int = 100) -> List[Submission]:
        params: Dict[str, Any] = {"limit": limit}
        if search:
            params["search"] = search
        url = "/api/submissions"
        return self._submissions(url, self._request("GET", url, params=params))

    def top(self, limit: int = 10) -> List[Submission]:
        url = "/api/submissions/top"
        return self._submissions(url, self._request("GET", url, params={"limit": limit}))

    def questionnaire(self) -> Questionnaire:
        url = "/api/questionnaire"
        data = self._request("GET", url)
        try:
            return parse_questionnaire(data)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            # ConfigurationError is a ValueError: an empty table from the backend lands here too
            logger.warning("client.bad_response", url=url, error=str(exc))
            raise SubmissionError(f"{url} returned an unusable questionnaire") from exc
