"""Remote classifier backed by Azure OpenAI structured output.

Sends the cleaned text (placeholders intact) with the fixed INSTRUCTION and
asks for an ``ElementList``.  Any failure -- missing credentials, network
error, timeout, non-2xx status, refusal, malformed JSON or a schema violation --
is raised as a ClassificationError so the caller can fall back to the local
engine.  The client is created with ``max_retries=0``: a failed call is never
retried against the endpoint.
"""

import json
import logging
import time

import openai
from openai import OpenAI
from pydantic import TypeAdapter, ValidationError

from smart_format.classify.prompts import INSTRUCTION
from smart_format.cleaning.cleanup import enforce_structure_rules
from smart_format.config import RemoteSettings, load_remote_settings
from smart_format.errors import ClassificationError, MissingCredentialsError, QuotaExceededError
from smart_format.schema import Element, ElementList

logger = logging.getLogger(__name__)

_ELEMENTS_ADAPTER = TypeAdapter(list[Element])


def parse_response_text(raw: str) -> list[Element]:
    """Parse a raw JSON response (array or ``{"elements": [...]}``) into validated Elements."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ClassificationError(f"Remote classifier returned malformed JSON: {exc}") from exc

    if isinstance(data, dict) and "elements" in data:
        data = data["elements"]
    if not isinstance(data, list):
        raise ClassificationError(f"Remote classifier returned {type(data).__name__}, expected a list of elements")

    try:
        return _ELEMENTS_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ClassificationError(f"Remote classifier response failed validation: {exc}") from exc


class RemoteClassifier:
    """Classify text with the remote AI model."""

    name = "remote"

    def __init__(self, settings: RemoteSettings | None = None, client: OpenAI | None = None):
        self.settings = settings or load_remote_settings()
        self._client = client

    def _get_client(self) -> OpenAI:
        """Lazily create the OpenAI client; raises when credentials are missing."""
        if self._client is not None:
            return self._client
        if not self.settings.configured:
            raise MissingCredentialsError(
                "No API key available: set AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY and AZURE_OPENAI_DEPLOYMENT_NAME"
            )
        logger.info("Connecting to Azure OpenAI at %s  (deployment=%s)", self.settings.base_url, self.settings.deployment)
        self._client = OpenAI(
            base_url=self.settings.base_url,
            api_key=self.settings.api_key,
            timeout=self.settings.timeout,
            max_retries=0,
        )
        return self._client

    def classify(self, text: str) -> list[Element]:
        """Send *text* to the remote model and return contract-validated Elements."""
        if not self.settings.enabled:
            raise ClassificationError("Remote classifier is disabled")
        client = self._get_client()

        t0 = time.time()
        try:
            completion = client.chat.completions.parse(
                model=self.settings.deployment,
                messages=[
                    {"role": "system", "content": INSTRUCTION},
                    {"role": "user", "content": text},
                ],
                response_format=ElementList,
                temperature=0.1,
                timeout=self.settings.timeout,
            )
        except openai.RateLimitError as exc:
            raise QuotaExceededError(f"Remote classifier quota exceeded (429): {exc}") from exc
        except openai.OpenAIError as exc:
            raise ClassificationError(f"Remote classifier call failed after {time.time() - t0:.1f}s: {exc}") from exc
        except ValidationError as exc:
            raise ClassificationError(f"Remote classifier response failed validation: {exc}") from exc

        elapsed = time.time() - t0
        logger.debug("Remote classifier responded in %.1fs", elapsed)

        if not completion.choices:
            raise ClassificationError("Remote classifier returned no choices")
        message = completion.choices[0].message
        if message.parsed is not None:
            elements = list(message.parsed.elements)
        elif message.content:
            elements = parse_response_text(message.content)
        else:
            raise ClassificationError(f"Remote classifier returned a refusal or empty result ({elapsed:.1f}s)")

        logger.info("Remote classifier returned %d element(s) in %.1fs", len(elements), elapsed)
        return enforce_structure_rules(elements)
