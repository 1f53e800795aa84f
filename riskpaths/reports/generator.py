"""
Text generation client.

Sends fully-formed prompts to the Mistral chat-completions API and returns the
generated HTML. Models are tried in order of preference:
- 429 responses move to the next model immediately
- other HTTP errors pause briefly, then move to the next model
- connection errors and timeouts are retried per model with exponential backoff
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Protocol
import logging
import time

import requests
from requests import Session
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from riskpaths.config.env import GeneratorConfig, get_generator_config
from riskpaths.reports.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Transient failure of the text-generation collaborator."""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


class MistralGenerator:
    """
    Chat-completions client with model fallback.

    Example:
        generator = MistralGenerator(get_generator_config())
        html = generator.generate(build_report_prompt(report_input(matches)))
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, session: Optional[Session] = None):
        self.config = config if config else get_generator_config()
        self.session = session if session is not None else self._create_session()
        # attempts of the most recent generate() call
        self.attempts: list[dict] = []

    def _create_session(self) -> Session:
        session = Session()
        session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        return session

    def _payload(self, model: str, prompt: str) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((requests.exceptions.ConnectionError,
                                       requests.exceptions.Timeout)),
        reraise=True,
    )
    def _post_chat(self, model: str, prompt: str):
        return self.session.post(
            f"{self.config.base_url}/chat/completions",
            json=self._payload(model, prompt),
            headers={"Authorization": f"Bearer {self.config.api_key}"},
            timeout=self.config.timeout_sec,
        )

    def generate(self, prompt: str) -> str:
        """
        Generate HTML for a prompt.

        Raises:
            GenerationError: no API key configured, or every model failed
        """
        if not self.config.api_key:
            raise GenerationError("MISTRAL_API_KEY not configured")

        attempts: list[dict] = []
        self.attempts = attempts
        models = self.config.models
        last_error: Optional[str] = None
        for idx, model in enumerate(models):
            logger.debug("Attempting generation with model %s", model)
            try:
                response = self._post_chat(model, prompt)
            except requests.exceptions.RequestException as e:
                last_error = f"{model}: {e}"
                attempts.append({"model": model, "success": False, "error": str(e)})
                logger.warning("Model %s failed with exception: %s", model, e)
                continue

            if response.ok:
                try:
                    content = response.json()["choices"][0]["message"]["content"]
                except (KeyError, IndexError, TypeError, ValueError) as e:
                    last_error = f"{model}: unexpected response body ({e})"
                    attempts.append({"model": model, "success": False, "error": last_error})
                    logger.warning("Model %s returned an unexpected body", model)
                    continue
                attempts.append({"model": model, "success": True})
                logger.info("Generated %d characters with model %s", len(content), model)
                return content

            last_error = f"{model}: {response.status_code} - {response.text}"
            attempts.append({"model": model, "success": False, "status_code": response.status_code})
            logger.warning("Model %s failed: %s", model, response.status_code)
            if response.status_code == 429:
                continue
            if idx < len(models) - 1 and self.config.fallback_delay_sec > 0:
                time.sleep(self.config.fallback_delay_sec)

        logger.error("All generation models failed. Last error: %s", last_error)
        raise GenerationError(f"All models failed. {last_error or 'Unknown error'}")
