"""
Logging for tedium.

Everything logs under the ``tedium`` logger. Two children get their own
levels because they are chatty: ``tedium.http`` (one line per API request
and response) and ``tedium.git`` (one line per git command). Both only emit
at DEBUG, and both pass their text through the masking helpers below first,
since remote URLs and auth headers can carry credentials.
"""

import logging
import re
from typing import Any

_root_logger = logging.getLogger("tedium")
_http_logger = logging.getLogger("tedium.http")
_git_logger = logging.getLogger("tedium.git")

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

REDACTED = "[REDACTED]"

_REDACTIONS = [
    # "Authorization: Bearer <value>" and "token <value>"
    (re.compile(r"\b(Bearer|token)\s+[\w.\-]{8,}", re.IGNORECASE), rf"\1 {REDACTED}"),
    # GitHub token formats: classic, oauth, user-to-server, server, refresh, fine-grained
    (re.compile(r"\b(?:gh[pousr]|github_pat)_\w{10,}\b"), "[TOKEN_REDACTED]"),
    # key: "value" / key='value' assignments of secrets
    (
        re.compile(r"(secret|token|password|api_key)[\"']?\s*[:=]\s*[\"'][^\"']+[\"']", re.IGNORECASE),
        rf"\1: {REDACTED}",
    ),
]

# scheme://userinfo@ in URLs
_URL_USERINFO = re.compile(r"\b([a-z][a-z0-9+.\-]*://)[^/@\s]+@", re.IGNORECASE)

SENSITIVE_KEYS = frozenset({"authorization", "token", "password", "secret", "api_key"})


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    git_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the ``tedium`` logger and set levels.

    ``http_level`` and ``git_level`` default to ``level``. Raise them to
    WARNING to keep per-request and per-command lines out of a verbose run,
    or drop them to DEBUG to see them.

    Example:
        ```python
        configure_logging(logging.INFO, http_level=logging.WARNING, git_level=logging.DEBUG)
        ```
    """
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    _root_logger.addHandler(handler)
    _root_logger.setLevel(level)

    for logger, override in ((_http_logger, http_level), (_git_logger, git_level)):
        logger.setLevel(level if override is None else override)


def get_logger(name: str | None = None) -> logging.Logger:
    """``tedium`` itself, or the ``tedium.<name>`` child logger."""
    return _root_logger if name is None else _root_logger.getChild(name)


def mask_url_credentials(text: str) -> str:
    """Replace the ``user:password@`` part of every URL in ``text``."""
    return _URL_USERINFO.sub(rf"\1{REDACTED}@", text)


def mask_sensitive_data(text: str) -> str:
    """
    Redact anything that looks like a credential.

    Covers URL userinfo, bearer and token headers, GitHub token literals and
    ``secret = "..."`` style assignments.
    """
    masked = mask_url_credentials(text)
    for pattern, replacement in _REDACTIONS:
        masked = pattern.sub(replacement, masked)
    return masked


def _is_sensitive(key: str, sensitive_keys: frozenset[str] | set[str]) -> bool:
    lowered = key.lower()
    return any(word in lowered for word in sensitive_keys)


def _redact(value: Any, sensitive_keys: frozenset[str] | set[str]) -> Any:
    if isinstance(value, dict):
        return safe_log_dict(value, sensitive_keys)
    if isinstance(value, list):
        return [_redact(item, sensitive_keys) for item in value]
    return value


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: frozenset[str] | set[str] | None = None
) -> dict[str, Any]:
    """
    Copy ``data`` with the values of sensitive keys replaced by ``[REDACTED]``.

    A key is sensitive when it contains one of ``sensitive_keys``
    (case-insensitively), so ``access_token`` is caught by ``token``. Nested
    dicts and lists of dicts are handled too.
    """
    keys = SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys
    return {
        key: REDACTED if _is_sensitive(key, keys) else _redact(value, keys)
        for key, value in data.items()
    }


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """DEBUG line for an outgoing request, with headers and body redacted."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return
    line = f"{method} {mask_url_credentials(url)}"
    if headers:
        line += f" headers={safe_log_dict(headers)}"
    if body:
        line += f" body={safe_log_dict(body)}"
    _http_logger.debug(line)


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
    from_cache: bool = False,
) -> None:
    """DEBUG line for a response. ``from_cache`` marks a 304 answered locally."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return
    line = f"{status_code} {mask_url_credentials(url)}"
    if elapsed_ms is not None:
        line += f" in {elapsed_ms:.0f}ms"
    if from_cache:
        line += " (cached)"
    _http_logger.debug(line)


def log_git_command(command: list[str], cwd: str | None = None) -> None:
    """DEBUG line for a git invocation, credentials masked."""
    if not _git_logger.isEnabledFor(logging.DEBUG):
        return
    line = mask_sensitive_data(" ".join(command))
    _git_logger.debug(f"{line} (in {cwd})" if cwd else line)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "mask_url_credentials",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_git_command",
]
