"""
Korekton: a QTI custom operator that delegates scoring to a remote service.

The operator takes a single sub-expression with single cardinality and a
string or identifier base type (NULL is read as an empty string). That value
is the candidate response. It is posted, together with the identifier of the
item being processed, to the Korekton ``scoreItem`` endpoint, and the float
found in the first ``<score>`` element of the reply is returned with single
cardinality and float base type.
"""

import re
import time
import xml.etree.ElementTree as ET
from typing import Callable, Optional, Sequence
from xml.sax.saxutils import escape

import requests

from .config import EndpointConfig
from .errors import OperatorProcessingError, ScoringServiceError
from .logger import StructuredLogger, get_logger
from .schema import validate_operands
from .values import Operand, ScoreResult

NAMESPACE = "http://www.taotesting.com/xsd/korektonv1p0"
CONTENT_TYPE = "application/xml"
CHUNK_SIZE = 8192

# Plain decimal notation: no nan/inf, no underscores, "." as separator
_DECIMAL = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?$")


def build_request_body(item_id: str, response: str) -> bytes:
    """Serialize a scoreItemRequest document as UTF-8 bytes."""
    body = '<?xml version="1.0" encoding="UTF-8"?>\n'
    body += f'<scoreItemRequest xmlns="{NAMESPACE}">\n'
    body += f"<itemID>{escape(item_id)}</itemID>\n"
    body += f"<response>{escape(response)}</response>\n"
    body += "</scoreItemRequest>"
    return body.encode("utf-8")


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def parse_score(payload) -> float:
    """Extract the score from a scoreItemResponse payload.

    The payload must be well-formed XML. Only the first element whose local
    name is exactly ``score`` is read, in any namespace.

    Raises:
        ScoringServiceError: When the payload is not XML, holds no score
            element, or the score text is not a decimal number.
    """
    if not payload:
        raise ScoringServiceError("Korekton service returned an empty response body")

    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise ScoringServiceError(f"Korekton response is not well-formed XML: {e}", cause=e) from e

    score_el = next((el for el in root.iter() if _local_name(el.tag) == "score"), None)
    if score_el is None:
        raise ScoringServiceError("Korekton response has no <score> element")

    text = "".join(score_el.itertext()).strip()
    try:
        if not _DECIMAL.match(text):
            raise ValueError(f"not a decimal number: {text!r}")
        return float(text)
    except ValueError as e:
        raise ScoringServiceError(f"Korekton score is not a number: {text!r}", cause=e) from e


class KorektonOperator:
    """Remote scoring operator bound to one endpoint configuration.

    Instances hold no per-call state and may be shared between concurrent
    evaluations. ``session`` lets callers supply the HTTP transport; without
    one, a fresh ``requests.Session`` is used for each call.

    ``config.timeout`` bounds the whole call, from sending the request to
    reading the last byte of the reply, not only each socket operation.
    """

    def __init__(
        self,
        config: EndpointConfig,
        session=None,
        logger: Optional[StructuredLogger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.session = session
        self.logger = logger or get_logger()
        self.clock = clock

    def evaluate(self, operands: Sequence[Optional[Operand]], item_id: str) -> ScoreResult:
        """Score the candidate response held by ``operands`` for ``item_id``.

        Raises:
            OperatorProcessingError: A subclass describing the operand problem
                or the scoring service failure.
        """
        try:
            operand = validate_operands(operands)
        except OperatorProcessingError as e:
            self.logger.record_validation_failure(type(e).__name__)
            self.logger.warning("Korekton operands rejected", item_id=item_id, error=str(e))
            raise

        body = build_request_body(item_id, str(operand))
        self.logger.record_scoring_attempt(item_id)
        try:
            payload = self._post(body)
            score = parse_score(payload)
        except ScoringServiceError as e:
            self.logger.record_scoring_failure(item_id, type(e.cause or e).__name__)
            raise

        self.logger.record_scoring_success(item_id)
        self.logger.info("Korekton score received", item_id=item_id, score=score)
        return ScoreResult(score)

    def _post(self, body: bytes) -> bytes:
        url = self.config.score_item_url
        if self.session is not None:
            return self._send(self.session, url, body)
        with requests.Session() as session:
            return self._send(session, url, body)

    def _check_deadline(self, deadline: float, url: str) -> None:
        if self.clock() > deadline:
            raise requests.exceptions.Timeout(
                f"Korekton call exceeded {self.config.timeout}s: {url}"
            )

    def _read_body(self, resp, deadline: float, url: str) -> bytes:
        chunks = []
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            self._check_deadline(deadline, url)
            chunks.append(chunk)
        return b"".join(chunks)

    def _send(self, session, url: str, body: bytes) -> bytes:
        deadline = self.clock() + self.config.timeout
        resp = None
        try:
            resp = session.post(
                url,
                data=body,
                headers={"Content-Type": CONTENT_TYPE},
                auth=self.config.auth,
                timeout=self.config.timeout,
                stream=True,
            )
            self._check_deadline(deadline, url)
            resp.raise_for_status()
            return self._read_body(resp, deadline, url)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            self.logger.error("Korekton request failed", url=url, status=status)
            raise ScoringServiceError(f"Korekton request failed ({status}): {url}", cause=e) from e
        except requests.exceptions.Timeout as e:
            self.logger.warning("Korekton request timed out", url=url, timeout=self.config.timeout)
            raise ScoringServiceError(
                f"Korekton request timed out after {self.config.timeout}s: {url}", cause=e
            ) from e
        except requests.exceptions.RequestException as e:
            self.logger.error("Korekton request error", url=url, error=str(e))
            raise ScoringServiceError(f"Korekton request error: {e}", cause=e) from e
        finally:
            if resp is not None:
                resp.close()


def evaluate(
    operands: Sequence[Optional[Operand]],
    item_id: str,
    config: EndpointConfig,
    session=None,
) -> ScoreResult:
    """One-shot evaluation without keeping an operator around."""
    return KorektonOperator(config, session=session).evaluate(operands, item_id)
