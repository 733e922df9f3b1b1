"""
Unit tests for token splitting and segment decoding
"""
import json
import logging

import pytest

from jwt_decode import decoder
from jwt_decode.decoder import (
    Base64DecodeError,
    DecodeError,
    JSONParseError,
    MalformedTokenError,
    decode_segment,
    decode_token,
    pad_segment,
    split_token,
)
from tests.conftest import EXAMPLE_TOKEN, b64url, generate_test_token, make_token


class TestSplitToken:
    """Tests for split_token"""

    def test_three_segments(self):
        assert split_token("a.b.c") == ("a", "b", "c")

    def test_surrounding_whitespace_is_stripped(self):
        assert split_token("  a.b.c\n") == ("a", "b", "c")

    @pytest.mark.parametrize("token", ["abc", "abc.def", "a.b.c.d", "a.b.c.d.e"])
    def test_wrong_segment_count(self, token):
        with pytest.raises(MalformedTokenError, match="Invalid JWT format"):
            split_token(token)

    @pytest.mark.parametrize("token", ["", "   ", "\n"])
    def test_empty_token(self, token):
        with pytest.raises(MalformedTokenError, match="empty"):
            split_token(token)

    def test_malformed_token_never_reaches_base64(self, monkeypatch):
        """A structure error must be raised before any segment is decoded"""
        def _boom(*args, **kwargs):
            raise AssertionError("decode_segment should not be called")

        monkeypatch.setattr(decoder, "decode_segment", _boom)
        with pytest.raises(MalformedTokenError) as exc_info:
            decode_token("abc.def")
        assert exc_info.value.label is None

    def test_results_are_independent(self):
        """Mutating one decoded result must not leak into a later decode"""
        first = decode_token(EXAMPLE_TOKEN)
        first.header["alg"] = "none"
        first.payload.clear()

        second = decode_token(EXAMPLE_TOKEN)
        assert second.header == {"alg": "HS256", "typ": "JWT"}
        assert second.payload["name"] == "John Doe"


class TestPadSegment:
    """Padding repair for each residue of len % 4"""

    def test_residue_zero(self):
        assert pad_segment("AAAA") == "AAAA"

    def test_residue_two(self):
        assert pad_segment("AA") == "AA=="

    def test_residue_three(self):
        assert pad_segment("AAA") == "AAA="

    @pytest.mark.parametrize("segment", ["A", "AAAAA", "AAAAAAAAA"])
    def test_residue_one_fails(self, segment):
        with pytest.raises(Base64DecodeError, match="invalid base64 length"):
            pad_segment(segment, "header")

    def test_padding_repair_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="jwt_decode.decoder")
        pad_segment("AA=", "header")
        assert "Padding header: 1 \"=\" stripped, 2 added" in caplog.text

    def test_no_log_when_padding_untouched(self, caplog):
        caplog.set_level(logging.DEBUG, logger="jwt_decode.decoder")
        pad_segment("AAAA", "header")
        assert "Padding" not in caplog.text

    def test_existing_padding_is_recomputed(self):
        assert pad_segment("AA=") == "AA=="
        assert pad_segment("AAA===") == "AAA="
        assert pad_segment("AAAA==") == "AAAA"


class TestDecodeSegment:
    """Tests for decode_segment"""

    @pytest.mark.parametrize("claims,residue", [
        ({"a": 123}, 0),   # 9 bytes of JSON
        ({"a": 1}, 2),     # 7 bytes
        ({"a": 12}, 3),    # 8 bytes
    ])
    def test_decodes_every_valid_residue(self, claims, residue):
        segment = b64url(claims)
        assert len(segment) % 4 == residue
        assert decode_segment(segment, "payload") == claims

    def test_accepts_padded_segment(self):
        segment = b64url({"a": 1}) + "=="
        assert decode_segment(segment) == {"a": 1}

    def test_url_safe_alphabet(self):
        # Any run of five "?" holds an aligned "???", which encodes to "Pz8_"
        claims = {"k": "?????"}
        segment = b64url(claims)
        assert "_" in segment
        assert decode_segment(segment) == claims

    @pytest.mark.parametrize("segment", ["ab+d", "ab/d", "ab$d", "eyJ hIjoxfQ"])
    def test_rejects_characters_outside_base64url(self, segment):
        with pytest.raises(Base64DecodeError, match="illegal base64url character"):
            decode_segment(segment, "header")

    def test_residue_one_segment_fails(self):
        with pytest.raises(Base64DecodeError) as exc_info:
            decode_segment("eyJhb", "header")
        assert exc_info.value.label == "header"
        assert str(exc_info.value).startswith("Failed to decode header:")

    @pytest.mark.parametrize("raw", [b'"hello"', b"[1,2,3]", b"42", b"null", b"true"])
    def test_rejects_non_object_json(self, raw):
        with pytest.raises(JSONParseError, match="expected a JSON object"):
            decode_segment(b64url(raw), "payload")

    def test_rejects_invalid_json(self):
        with pytest.raises(JSONParseError) as exc_info:
            decode_segment(b64url(b"not json"), "payload")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_rejects_non_utf8(self):
        with pytest.raises(JSONParseError, match="not UTF-8"):
            decode_segment(b64url(b'{"a":"\xff\xfe"}'), "payload")

    def test_rejects_nan_constant(self):
        with pytest.raises(JSONParseError):
            decode_segment(b64url(b'{"exp":NaN}'), "payload")

    def test_deeply_nested_json_is_a_parse_error(self):
        raw = b'{"a":' + b"[" * 100000 + b"]" * 100000 + b"}"
        with pytest.raises(JSONParseError, match="nested too deeply"):
            decode_segment(b64url(raw), "payload")

    def test_nested_json_within_parser_limits(self):
        raw = b'{"a":' + b"[" * 600 + b"]" * 600 + b"}"
        claims = decode_segment(b64url(raw), "payload")
        assert list(claims) == ["a"]

    def test_oversized_integer_literal(self):
        with pytest.raises(JSONParseError, match="integer literal of 5000 digits is too large"):
            decode_segment(b64url(b'{"n":' + b"1" * 5000 + b"}"), "payload")

    def test_large_integer_literal_is_kept_exact(self):
        digits = "9" * 400
        claims = decode_segment(b64url(f'{{"n":-{digits}}}'.encode()), "payload")
        assert claims["n"] == -int(digits)

    def test_empty_segment_is_not_json(self):
        with pytest.raises(JSONParseError):
            decode_segment("", "header")

    def test_preserves_key_order(self):
        segment = b64url(b'{"zeta":1,"alpha":2,"mid":3}')
        assert list(decode_segment(segment)) == ["zeta", "alpha", "mid"]

    def test_nested_values(self):
        claims = {"roles": ["admin", "dev"], "meta": {"n": None, "ok": True, "f": 1.5}}
        assert decode_segment(b64url(claims)) == claims

    def test_errors_share_base_class(self):
        for exc_type in (MalformedTokenError, Base64DecodeError, JSONParseError):
            assert issubclass(exc_type, DecodeError)


class TestDecodeToken:
    """End-to-end decoding of whole tokens"""

    def test_example_token(self):
        result = decode_token(EXAMPLE_TOKEN)
        assert result.header == {"alg": "HS256", "typ": "JWT"}
        assert result.payload == {"sub": "1234567890", "name": "John Doe", "iat": 1516239022}
        assert result.signature == "SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"

    def test_round_trip_is_stable(self):
        first = decode_token(make_token({"alg": "none"}, {"sub": "x", "n": [1, 2, {"a": None}]}))
        again = decode_token(make_token(first.header, first.payload, first.signature))
        assert again.header == first.header
        assert again.payload == first.payload

    def test_signature_is_not_decoded(self):
        result = decode_token(make_token(signature="not*base64!"))
        assert result.signature == "not*base64!"

    def test_empty_signature_is_allowed(self):
        result = decode_token(make_token(signature=""))
        assert result.signature == ""

    def test_pyjwt_signed_token(self):
        payload = {"sub": "user-1", "iat": 1700000000, "exp": 1700003600, "scope": "read write"}
        result = decode_token(generate_test_token(payload))
        assert result.payload == payload
        assert result.header["alg"] == "HS256"
        assert result.header["typ"] == "JWT"

    def test_bad_payload_reports_payload_label(self):
        token = f"{b64url({'alg': 'HS256'})}.{b64url(b'[1]')}.sig"
        with pytest.raises(JSONParseError) as exc_info:
            decode_token(token)
        assert exc_info.value.label == "payload"
