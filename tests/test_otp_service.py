import logging
from urllib.parse import parse_qs

import httpx
import pytest

from vendorhub.core.config import Settings
from vendorhub.core.exceptions import OTPProviderError
from vendorhub.services.otp_service import TwilioVerifyService


def make_service(handler):
    config = Settings(
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="token",
        TWILIO_VERIFY_SID="VA456",
    )
    return TwilioVerifyService(config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_send_code_posts_to_verifications():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(201, json={"status": "pending"})

    status = await make_service(handler).send_code("+15550001")

    assert status == "pending"
    assert requests[0].url.path == "/v2/Services/VA456/Verifications"
    form = parse_qs(requests[0].content.decode())
    assert form == {"To": ["+15550001"], "Channel": ["sms"]}


@pytest.mark.asyncio
async def test_check_code_returns_verdict():
    def handler(request):
        assert request.url.path.endswith("/VerificationCheck")
        form = parse_qs(request.content.decode())
        status = "approved" if form["Code"] == ["123456"] else "pending"
        return httpx.Response(200, json={"status": status})

    service = make_service(handler)

    assert await service.check_code("+15550001", "123456") == "approved"
    assert await service.check_code("+15550001", "000000") == "pending"


@pytest.mark.asyncio
async def test_check_code_without_pending_verification():
    service = make_service(lambda request: httpx.Response(404, json={"code": 20404}))
    assert await service.check_code("+15550001", "123456") == "not_found"


@pytest.mark.asyncio
async def test_provider_error_raises():
    service = make_service(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(OTPProviderError):
        await service.send_code("+15550001")


@pytest.mark.asyncio
async def test_provider_timeout_raises():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(OTPProviderError) as exc_info:
        await make_service(handler).check_code("+15550001", "123456")
    assert exc_info.value.status_code == 500


def test_is_configured():
    assert make_service(lambda request: httpx.Response(200)).is_configured()
    assert not TwilioVerifyService(Settings(TWILIO_ACCOUNT_SID=None)).is_configured()


@pytest.mark.asyncio
async def test_startup_warns_when_otp_provider_is_not_configured(monkeypatch, caplog):
    from vendorhub import main

    async def noop(*args, **kwargs):
        return True

    monkeypatch.setattr(main, "validate_settings", lambda: True)
    monkeypatch.setattr(main, "connect_to_mongo", noop)
    monkeypatch.setattr(main, "create_indexes", noop)
    monkeypatch.setattr(main, "get_database", lambda: None)
    monkeypatch.setattr(main, "check_database_health", noop)
    monkeypatch.setattr(main, "close_mongo_connection", noop)
    monkeypatch.setattr(
        main, "get_otp_provider", lambda: TwilioVerifyService(Settings(TWILIO_ACCOUNT_SID=None))
    )

    with caplog.at_level(logging.WARNING, logger="vendorhub.main"):
        async with main.lifespan(main.app):
            pass

    assert "Twilio Verify is not configured" in caplog.text
