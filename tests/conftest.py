"""
Pytest configuration and shared fixtures.

Tokens are built by hand with :func:`make_token` (so malformed variants are
easy to produce) or minted with PyJWT for real HS256-signed samples.
"""
import base64
import json
import logging

import jwt
import pytest

import jwt_decode.config

# Sample token from jwt.io
EXAMPLE_TOKEN = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ"
    ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
)

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"


def b64url(data) -> str:
    """Unpadded base64url of raw bytes, or of a value's compact JSON."""
    if not isinstance(data, bytes):
        data = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def make_token(header=None, payload=None, signature: str = "c2lnbmF0dXJl") -> str:
    """Assemble header.payload.signature from plain values."""
    if header is None:
        header = {"alg": "HS256", "typ": "JWT"}
    if payload is None:
        payload = {"sub": "1234567890"}
    return f"{b64url(header)}.{b64url(payload)}.{signature}"


def generate_test_token(payload: dict) -> str:
    """Mint a properly signed HS256 token with PyJWT."""
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the user's config and NO_COLOR out of every test."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv(jwt_decode.config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(
        jwt_decode.config, "DEFAULT_CONFIG_PATH", str(tmp_path / "missing" / "config.yaml")
    )


@pytest.fixture
def example_token():
    return EXAMPLE_TOKEN


@pytest.fixture
def config_file(tmp_path):
    """Factory: write YAML text to a temp config file and return its path."""
    def _write(text: str) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
