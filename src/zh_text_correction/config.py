# -*- coding: utf-8 -*-
"""
Centralized configuration for the text-correction toolkit.

Two dataclasses live here:

- CorrectionConfig controls the reconciliation engine (validation limits,
  diff thresholds, the category table).
- ServiceConfig carries the iFlytek credentials and request limits used
  by the HTTP client, the CLI and the API service.
"""

import os
from dataclasses import dataclass, field
from typing import Literal, Mapping, Optional

from .categories import CATEGORY_TABLE, ErrorCategory, empty_correction_categories


# Line alignment strategy used by the diff tool
# - "lookahead": greedy scan with a small lookahead window (fast, heuristic)
# - "lcs": longest-common-subsequence alignment (exact, quadratic)
LineAlignment = Literal["lookahead", "lcs"]

NO_ERRORS_MESSAGE = "未发现需要纠正的错误，文本质量良好！"


@dataclass
class CorrectionConfig:
    """
    Configuration for the correction reconciliation engine.

    Attributes:
        max_text_length: Longest input text accepted for correction. Longer
            input is truncated by preprocessing.
        max_field_length: Text fields longer than this raise a warning during
            record validation (the record is still accepted).
        min_record_fields: Records with fewer positional fields are rejected.
        max_record_fields: Records with more positional fields are accepted
            with a warning.
        position_min: Smallest valid offset.

        similarity_threshold: Two lines whose similarity ratio reaches this
            value are reported as "modified" instead of removed + added.
        lookahead_window: How many right-hand lines the lookahead alignment
            scans for an exact match.
        line_alignment: "lookahead" (default) or "lcs".

        categories: Category table consulted for severity, default
            descriptions and the empty-correction flag.
        no_errors_message: Description carried by the informational entry
            returned when nothing needs correcting.
    """

    # Input limits
    max_text_length: int = 2000
    max_field_length: int = 1000

    # Record shape
    min_record_fields: int = 3
    max_record_fields: int = 5
    position_min: int = 0

    # Diff tool
    similarity_threshold: float = 0.6
    lookahead_window: int = 3
    line_alignment: LineAlignment = "lookahead"

    # Categories
    categories: Mapping[str, ErrorCategory] = field(default_factory=lambda: CATEGORY_TABLE)
    no_errors_message: str = NO_ERRORS_MESSAGE

    @property
    def empty_correction_categories(self) -> frozenset[str]:
        """Categories whose empty correction means "delete the original"."""
        return empty_correction_categories(self.categories)

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_text_length < 1:
            raise ValueError(f"max_text_length must be >= 1, got {self.max_text_length}")
        if self.max_field_length < 1:
            raise ValueError(f"max_field_length must be >= 1, got {self.max_field_length}")
        if self.min_record_fields < 3:
            raise ValueError(
                f"min_record_fields must be >= 3, got {self.min_record_fields}"
            )
        if self.max_record_fields < self.min_record_fields:
            raise ValueError(
                f"max_record_fields ({self.max_record_fields}) must be >= "
                f"min_record_fields ({self.min_record_fields})"
            )
        if self.position_min < 0:
            raise ValueError(f"position_min must be >= 0, got {self.position_min}")
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold must be between 0 and 1, "
                f"got {self.similarity_threshold}"
            )
        if self.lookahead_window < 1:
            raise ValueError(f"lookahead_window must be >= 1, got {self.lookahead_window}")
        if self.line_alignment not in ("lookahead", "lcs"):
            raise ValueError(
                f"line_alignment must be 'lookahead' or 'lcs', "
                f"got '{self.line_alignment}'"
            )

    @classmethod
    def strict(cls, **overrides) -> "CorrectionConfig":
        """Create config with tighter limits and exact line alignment.

        Args:
            **overrides: Override any config values

        Returns:
            CorrectionConfig with strict defaults
        """
        defaults = {
            "max_field_length": 200,
            "max_record_fields": 4,
            "similarity_threshold": 0.75,
            "line_alignment": "lcs",
        }
        defaults.update(overrides)
        return cls(**defaults)

    @classmethod
    def lenient(cls, **overrides) -> "CorrectionConfig":
        """Create config that tolerates longer fields and looser line matches.

        Args:
            **overrides: Override any config values

        Returns:
            CorrectionConfig with lenient defaults
        """
        defaults = {
            "max_field_length": 5000,
            "max_record_fields": 8,
            "similarity_threshold": 0.4,
            "lookahead_window": 5,
        }
        defaults.update(overrides)
        return cls(**defaults)


DEFAULT_HOST = "api.xf-yun.com"
DEFAULT_URI = "/v1/private/s9a87e3ec"

ALLOWED_EXTENSIONS = (".txt", ".doc", ".docx", ".pdf")


@dataclass
class ServiceConfig:
    """
    Credentials and limits for the iFlytek text-correction service.

    Attributes:
        app_id: iFlytek application id (IFLYTEK_APPID).
        api_secret: Secret used to sign requests (IFLYTEK_API_SECRET).
        api_key: Key placed in the authorization header (IFLYTEK_API_KEY).
        host: API host name.
        uri: Path of the correction endpoint.
        timeout: Request timeout in seconds.
        uid: User id sent in the request header.
        max_text_length: Longest text sent in one request.
        max_file_size: Largest accepted upload in bytes.
        allowed_extensions: Upload extensions the service accepts.
    """

    app_id: Optional[str] = None
    api_secret: Optional[str] = None
    api_key: Optional[str] = None
    host: str = DEFAULT_HOST
    uri: str = DEFAULT_URI
    timeout: float = 30.0
    uid: str = "user_001"
    max_text_length: int = 2000
    max_file_size: int = 10 * 1024 * 1024
    allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS

    @property
    def has_credentials(self) -> bool:
        """Check that all three vendor credentials are set."""
        return bool(self.app_id and self.api_secret and self.api_key)

    @property
    def missing_credentials(self) -> list[str]:
        """Environment variable names of the credentials that are not set."""
        missing = []
        if not self.app_id:
            missing.append("IFLYTEK_APPID")
        if not self.api_secret:
            missing.append("IFLYTEK_API_SECRET")
        if not self.api_key:
            missing.append("IFLYTEK_API_KEY")
        return missing

    @property
    def url(self) -> str:
        return f"https://{self.host}{self.uri}"

    def __post_init__(self):
        """Validate configuration values."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
        if self.max_text_length < 1:
            raise ValueError(f"max_text_length must be >= 1, got {self.max_text_length}")
        if self.max_file_size < 1:
            raise ValueError(f"max_file_size must be >= 1, got {self.max_file_size}")

    @classmethod
    def from_env(cls, **overrides) -> "ServiceConfig":
        """Create config from IFLYTEK_* environment variables.

        Args:
            **overrides: Override any config values

        Returns:
            ServiceConfig populated from the environment
        """
        defaults = {
            "app_id": os.environ.get("IFLYTEK_APPID"),
            "api_secret": os.environ.get("IFLYTEK_API_SECRET"),
            "api_key": os.environ.get("IFLYTEK_API_KEY"),
        }
        defaults.update(overrides)
        return cls(**defaults)
