import contextvars
import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict

correlation_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    'correlation_id',
    default=None
)

request_metadata_context: contextvars.ContextVar[Dict[str, Any] | None] = contextvars.ContextVar(
    'request_metadata',
    default=None
)

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "correlation_id", "request_method", "request_path", "client_host"}


class CorrelationFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = correlation_id_context.get()
        if correlation_id:
            record.correlation_id = correlation_id

        metadata = request_metadata_context.get()
        if metadata:
            record.request_method = metadata.get("method")
            record.request_path = metadata.get("path")
            if metadata.get("client"):
                record.client_host = metadata["client"].get("host")
            # an explicit extra={"user_id": ...} wins over the request header
            if metadata.get("user_id") and not hasattr(record, "user_id"):
                record.user_id = metadata["user_id"]

        return True


class JSONFormatter(logging.Formatter):
    _SENSITIVE_PATTERNS = [
        # API keys and tokens
        (r'(["\']?(?:api[_-]?)?(?:key|token|secret|password|passwd|pwd)["\']?\s*[:=]\s*["\']?)([^"\']+)(["\']?)',
         r'\1***API_KEY_OR_TOKEN_REDACTED***\3'),
        # Bearer tokens
        (r'(Bearer\s+)([A-Za-z0-9\-_]+)', r'\1***BEARER_TOKEN_REDACTED***'),
        # JWT tokens
        (r'(eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)', r'***JWT_REDACTED***'),
        # MongoDB URLs with credentials
        (r'(mongodb(?:\+srv)?://[^:]+:)([^@]+)(@)', r'\1***MONGODB_REDACTED***\3'),
        # Generic URLs with credentials
        (r'(https?://[^:]+:)([^@]+)(@)', r'\1***URL_CREDS_REDACTED***\3'),
        # Email addresses
        (r'([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})', r'***EMAIL_REDACTED***'),
    ]

    def _sanitize_sensitive_data(self, data: str) -> str:
        """Remove or mask sensitive information from log data."""
        for pattern, replacement in self._SENSITIVE_PATTERNS:
            data = re.sub(pattern, replacement, data, flags=re.IGNORECASE)
        return data

    def format(self, record: logging.LogRecord) -> str:
        message = self._sanitize_sensitive_data(record.getMessage())

        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }

        for attr in ("correlation_id", "request_method", "request_path", "client_host"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_ATTRS or key.startswith("_"):
                continue
            log_data[key] = self._sanitize_sensitive_data(str(value)) if isinstance(value, str) else value

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            log_data['exc_info'] = self._sanitize_sensitive_data(exc_text)

        if record.stack_info:
            stack_text = self.formatStack(record.stack_info)
            log_data['stack_info'] = self._sanitize_sensitive_data(stack_text)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logger(log_level: str = "INFO", name: str = "coursehub") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(JSONFormatter())
    console_handler.addFilter(CorrelationFilter())

    logger.addHandler(console_handler)

    level = getattr(logging, log_level.upper(), logging.DEBUG)
    logger.setLevel(level)

    return logger
