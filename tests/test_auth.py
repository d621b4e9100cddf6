"""Unit tests for admin API key authentication."""

from unittest.mock import patch

import pytest

from app.core.auth import parse_api_keys, validate_api_key, verify_admin_key
from app.core.errors import AuthenticationAppError


class TestParseAPIKeys:
    def test_parse_multiple_keys_with_whitespace(self) -> None:
        assert parse_api_keys("key1 , key2  ,  key3") == {"key1", "key2", "key3"}

    def test_parse_removes_duplicates(self) -> None:
        assert parse_api_keys("key1,key2,key1") == {"key1", "key2"}

    @pytest.mark.parametrize("value", [None, "", "   ,  ,  "])
    def test_parse_empty_inputs(self, value) -> None:
        assert parse_api_keys(value) == set()


class TestValidateAPIKey:
    @patch("app.core.auth.settings")
    def test_bypassed_when_auth_disabled(self, mock_settings) -> None:
        mock_settings.app.api_key_required = False

        validate_api_key(None)
        validate_api_key("anything")

    @patch("app.core.auth.settings")
    def test_raises_when_no_keys_configured(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = None

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key("some-key")

        assert exc_info.value.code == "api_keys_not_configured"

    @patch("app.core.auth.settings")
    def test_missing_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(None)

        assert exc_info.value.code == "missing_api_key"

    @patch("app.core.auth.settings")
    def test_accepts_any_configured_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = " key1 , key2 "

        validate_api_key("key1")
        validate_api_key("key2")

    @patch("app.core.auth.settings")
    def test_rejects_unknown_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "key1"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(" key1 ")

        assert exc_info.value.code == "invalid_api_key"


class TestVerifyAdminKeyDependency:
    @pytest.mark.asyncio
    @patch("app.core.auth.settings")
    async def test_valid_key_passes(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "my-valid-key"

        await verify_admin_key(x_api_key="my-valid-key")

    @pytest.mark.asyncio
    @patch("app.core.auth.settings")
    async def test_invalid_key_raises(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "my-valid-key"

        with pytest.raises(AuthenticationAppError):
            await verify_admin_key(x_api_key="wrong-key")
