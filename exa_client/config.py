# config.py
"""
Environment-based settings for applications embedding the client.
The client itself never reads the environment; `builder_from_env()` does it
once and hands the values to an `ExaClientBuilder`.
"""
import os
from typing import Mapping, Optional

from .builder import ExaClientBuilder

# --- Credentials ---
API_KEY_ENV: str = "EXA_API_KEY"

# --- Network ---
BASE_URL_ENV: str = "EXA_BASE_URL"
TIMEOUT_ENV: str = "EXA_TIMEOUT"


def builder_from_env(environ: Optional[Mapping[str, str]] = None) -> ExaClientBuilder:
    """
    Returns a builder pre-filled from EXA_API_KEY, EXA_BASE_URL and EXA_TIMEOUT.
    Unset variables are left unset so the builder's own defaults and checks apply.
    """
    env = os.environ if environ is None else environ
    builder = ExaClientBuilder()

    api_key = env.get(API_KEY_ENV)
    if api_key:
        builder.with_api_key(api_key)

    base_url = env.get(BASE_URL_ENV)
    if base_url:
        builder.with_base_url(base_url)

    timeout = env.get(TIMEOUT_ENV)
    if timeout:
        try:
            builder.with_timeout(float(timeout))
        except ValueError:
            # Left as the raw string so build() reports InvalidTimeoutError.
            builder.with_timeout(timeout)  # type: ignore[arg-type]

    return builder
