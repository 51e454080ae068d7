"""Machine translation providers with a per-provider circuit breaker."""
import logging
import threading
import time

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10  # seconds

# Circuit breaker: after N consecutive failures, pause for a cooldown
MAX_CONSECUTIVE_FAILURES = 3
COOLDOWN_SECONDS = 300  # 5 minutes


class ProviderError(Exception):
    """A provider call failed (network, HTTP status, malformed body, circuit open)."""


class TranslationProvider:
    """Base class: ``translate(text, source_lang, target_lang) -> str``.

    Subclasses implement ``_call``. Failure bookkeeping lives here so every
    provider degrades the same way.
    """

    name = 'base'

    def __init__(self, api_key: str = '', timeout: float = DEFAULT_TIMEOUT,
                 max_failures: int = MAX_CONSECUTIVE_FAILURES,
                 cooldown: float = COOLDOWN_SECONDS):
        self.api_key = (api_key or '').strip()
        self.timeout = timeout
        self.max_failures = max_failures
        self.cooldown = cooldown
        self._state_lock = threading.Lock()
        self._consecutive_failures = 0
        self._cooldown_until = 0.0
        self._key_invalid = False

    def is_configured(self) -> bool:
        """True when a credential is present. Absence is a valid state."""
        return bool(self.api_key)

    def is_circuit_open(self) -> bool:
        """Check if we should skip calls due to a bad key or repeated failures."""
        with self._state_lock:
            if self._key_invalid:
                return True
            if self._consecutive_failures >= self.max_failures:
                if time.time() < self._cooldown_until:
                    return True
                self._consecutive_failures = 0
                self._cooldown_until = 0.0
                logger.info(f"{self.name} circuit breaker reset - retrying")
            return False

    def _record_success(self):
        with self._state_lock:
            self._consecutive_failures = 0

    def _record_failure(self, permanent: bool = False):
        with self._state_lock:
            if permanent:
                self._key_invalid = True
                logger.error(f"{self.name} API key is INVALID. Machine translation is now DISABLED.")
                return
            self._consecutive_failures += 1
            if self._consecutive_failures >= self.max_failures:
                self._cooldown_until = time.time() + self.cooldown
                logger.warning(
                    f"{self.name} failed {self._consecutive_failures} times in a row. "
                    f"Pausing for {self.cooldown}s."
                )

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        if not self.is_configured():
            raise ProviderError(f"{self.name} API key not configured")
        if self.is_circuit_open():
            raise ProviderError(f"{self.name} circuit open")

        try:
            translated = self._call(text, source_lang, target_lang)
        except requests.Timeout as e:
            self._record_failure()
            raise ProviderError(f"{self.name} timeout") from e
        except requests.RequestException as e:
            self._record_failure()
            raise ProviderError(f"{self.name} request failed: {e}") from e
        except ProviderError:
            self._record_failure()
            raise

        self._record_success()
        return translated

    def _call(self, text: str, source_lang: str, target_lang: str) -> str:
        raise NotImplementedError


class GoogleTranslateProvider(TranslationProvider):
    """Google Cloud Translation API v2."""

    name = 'google'
    url = 'https://translation.googleapis.com/language/translate/v2'

    def _call(self, text, source_lang, target_lang):
        data = {
            'q': text,
            'source': source_lang,
            'target': target_lang,
            'format': 'text',
            'key': self.api_key,
        }
        response = requests.post(self.url, data=data, timeout=self.timeout)

        try:
            result = response.json()
        except ValueError as e:
            raise ProviderError(f"Google Translate returned non-JSON (HTTP {response.status_code})") from e

        if response.status_code != 200:
            error = result.get('error') if isinstance(result, dict) else None
            if not isinstance(error, dict):
                raise ProviderError(
                    f"Google Translate error (HTTP {response.status_code}): {error or 'unknown'}"
                )
            # Invalid API key: stop calling for the rest of the process
            for detail in error.get('details') or []:
                if isinstance(detail, dict) and detail.get('reason') == 'API_KEY_INVALID':
                    self._record_failure(permanent=True)
                    raise ProviderError("Google Translate API key invalid")
            raise ProviderError(
                f"Google Translate error (HTTP {response.status_code}): "
                f"{error.get('message', 'unknown')}"
            )

        try:
            return result['data']['translations'][0]['translatedText']
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("Google Translate unexpected response format") from e


class DeepLProvider(TranslationProvider):
    """DeepL API (free tier endpoint)."""

    name = 'deepl'
    url = 'https://api-free.deepl.com/v2/translate'

    def _call(self, text, source_lang, target_lang):
        # DeepL uses uppercase language codes
        target = target_lang.upper()
        if target == 'EN':
            target = 'EN-US'

        headers = {'Authorization': f'DeepL-Auth-Key {self.api_key}'}
        data = {
            'text': [text],
            'source_lang': source_lang.upper(),
            'target_lang': target,
        }
        response = requests.post(self.url, headers=headers, data=data, timeout=self.timeout)

        if response.status_code == 403:
            self._record_failure(permanent=True)
            raise ProviderError("DeepL API key rejected")
        if response.status_code != 200:
            raise ProviderError(f"DeepL error (HTTP {response.status_code})")

        try:
            return response.json()['translations'][0]['text']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("DeepL unexpected response format") from e


def create_provider(service: str, google_api_key: str = '', deepl_api_key: str = '',
                    timeout: float = DEFAULT_TIMEOUT) -> TranslationProvider | None:
    """Build the configured provider, or None for an unknown service name."""
    service = (service or '').lower()
    if service == 'google':
        return GoogleTranslateProvider(google_api_key, timeout=timeout)
    if service == 'deepl':
        return DeepLProvider(deepl_api_key, timeout=timeout)
    logger.warning(f"Unknown TRANSLATION_SERVICE '{service}' - machine translation disabled")
    return None
