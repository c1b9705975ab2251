"""Email and Telegram delivery channels."""

import json

import httpx
import pytest

from app.core.config import Settings
from app.services import mailer, telegram
from app.services.mailer import EmailSender
from app.services.telegram import TelegramNotifier

RealAsyncClient = httpx.AsyncClient


@pytest.fixture
def sent_messages(monkeypatch):
    sent = []

    async def fake_send(message, **kwargs):
        sent.append((message, kwargs))

    monkeypatch.setattr(mailer.aiosmtplib, "send", fake_send)
    return sent


@pytest.fixture
def telegram_requests(monkeypatch):
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"ok": True})

    monkeypatch.setattr(
        telegram.httpx,
        "AsyncClient",
        lambda **kwargs: RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs),
    )
    return captured


async def test_email_disabled_without_smtp(sent_messages):
    sender = EmailSender(Settings(smtp_host=None))

    assert await sender.send("a@example.com", "Hi", "<p>Hi</p>") is False
    assert sent_messages == []


async def test_payment_confirmation_email(sent_messages):
    sender = EmailSender(Settings(smtp_host="smtp.example.com", smtp_port=2525))

    ok = await sender.send_payment_confirmation(
        to="tenant@example.com",
        tenant_name="Robin <Okafor>",
        amount_cents=150000,
        property_name="Maple Court",
        unit_number="101",
        payment_method="DEBIT_CARD",
        transaction_id="pi_1",
    )

    assert ok is True
    message, kwargs = sent_messages[0]
    assert message["To"] == "tenant@example.com"
    assert kwargs["hostname"] == "smtp.example.com"
    assert kwargs["port"] == 2525
    html = message.get_payload()[0].get_payload(decode=True).decode()
    assert "$1,500.00" in html
    assert "Robin &lt;Okafor&gt;" in html


async def test_telegram_disabled_without_token(telegram_requests):
    notifier = TelegramNotifier(Settings(telegram_bot_token=None))

    assert await notifier.send_message("42", "hello") is False
    assert telegram_requests == []


async def test_telegram_payment_message(telegram_requests):
    notifier = TelegramNotifier(Settings(telegram_bot_token="123:abc"))

    ok = await notifier.send_payment_received(
        chat_id="42",
        amount_cents=150000,
        payment_method="ACH",
        property_name="Maple Court",
        unit_number="4-B",
        tenant_name="Robin Okafor",
    )

    assert ok is True
    request = telegram_requests[0]
    assert request.url.path == "/bot123:abc/sendMessage"
    body = json.loads(request.content)
    assert body["chat_id"] == "42"
    assert body["parse_mode"] == "MarkdownV2"
    assert "*Amount:* $1,500\\.00" in body["text"]
    assert "*Unit:* 4\\-B" in body["text"]


async def test_telegram_failure_is_reported(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"ok": False, "description": "chat not found"})

    monkeypatch.setattr(
        telegram.httpx,
        "AsyncClient",
        lambda **kwargs: RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs),
    )
    notifier = TelegramNotifier(Settings(telegram_bot_token="123:abc"))

    assert await notifier.send_message("42", "hello") is False
