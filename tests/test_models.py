"""Tests for IdentificationRequest normalization."""

import base64

import pytest
from pydantic import ValidationError

from core.domain.models import IdentificationRequest, InputKind


class TestIdentificationRequest:
    def test_bytes_are_base64_encoded(self):
        request = IdentificationRequest(payload=b"\xff\xd8jpeg", kind=InputKind.IMAGE)
        assert base64.b64decode(request.image_base64()) == b"\xff\xd8jpeg"

    def test_data_url_prefix_is_stripped(self):
        request = IdentificationRequest(payload="data:image/jpeg;base64,QUJD", kind="image")
        assert request.image_base64() == "QUJD"

    def test_plain_base64_string_is_kept(self):
        request = IdentificationRequest(payload="QUJD", kind=InputKind.IMAGE)
        assert request.image_base64() == "QUJD"

    def test_text_query_is_trimmed(self):
        request = IdentificationRequest(payload="  king cobra ", kind=InputKind.TEXT)
        assert request.query_text() == "king cobra"

    @pytest.mark.parametrize("payload", ["", "   ", b"bytes"])
    def test_text_requests_need_a_query(self, payload):
        with pytest.raises(ValidationError):
            IdentificationRequest(payload=payload, kind=InputKind.TEXT)

    def test_image_requests_need_data(self):
        with pytest.raises(ValidationError):
            IdentificationRequest(payload=b"", kind=InputKind.IMAGE)

    def test_request_is_immutable(self):
        request = IdentificationRequest(payload="king cobra", kind=InputKind.TEXT)
        with pytest.raises(ValidationError):
            request.kind = InputKind.IMAGE

    def test_kind_specific_accessors(self):
        request = IdentificationRequest(payload="king cobra", kind=InputKind.TEXT)
        with pytest.raises(ValueError):
            request.image_base64()
