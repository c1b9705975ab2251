"""Telegram Bot API notifier for landlords."""

import logging
import re
from typing import Optional

import httpx

from app.core.config import Settings, get_settings
from app.services.formatting import format_currency, format_label

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"

PRIORITY_EMOJI = {
    "EMERGENCY": "🚨",
    "HIGH": "⚠️",
    "MEDIUM": "📋",
    "LOW": "📝",
}

CATEGORY_EMOJI = {
    "PLUMBING": "🚰",
    "ELECTRICAL": "⚡",
    "HVAC": "❄️",
    "APPLIANCE": "🔌",
    "STRUCTURAL": "🏗️",
    "PEST_CONTROL": "🐛",
    "LANDSCAPING": "🌳",
    "CLEANING": "🧹",
    "SECURITY": "🔒",
}

_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+=|{}.!-])")


def escape_markdown(text: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


class TelegramNotifier:
    """Sends Markdown messages through the Bot API; disabled without a token."""

    def __init__(self, settings: Optional[Settings] = None, base_url: str = TELEGRAM_API_URL):
        self.settings = settings or get_settings()
        self.base_url = base_url

    @property
    def enabled(self) -> bool:
        return bool(self.settings.telegram_bot_token)

    async def send_message(self, chat_id: str, text: str) -> bool:
        if not self.enabled:
            return False

        url = f"{self.base_url}/bot{self.settings.telegram_bot_token}/sendMessage"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    json={
                        "chat_id": chat_id,
                        "text": text,
                        "parse_mode": "MarkdownV2",
                        "link_preview_options": {"is_disabled": True},
                    },
                    timeout=10.0,
                )
        except httpx.HTTPError as e:
            logger.error(f"[TELEGRAM] Send error: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"[TELEGRAM] Send failed: {response.status_code} {response.text}")
            return False
        return True

    async def send_maintenance_request(
        self,
        chat_id: str,
        request_id: str,
        title: str,
        description: str,
        category: str,
        priority: str,
        property_name: str,
        unit_number: str,
        tenant_name: str,
        entry_permission: bool,
    ) -> bool:
        summary = description[:500] + ("..." if len(description) > 500 else "")
        text = "\n".join([
            f"{PRIORITY_EMOJI.get(priority, '📋')} *New Maintenance Request*",
            "",
            f"*Title:* {escape_markdown(title)}",
            f"*Category:* {CATEGORY_EMOJI.get(category, '🔧')} {escape_markdown(format_label(category))}",
            f"*Priority:* {escape_markdown(format_label(priority))}",
            "",
            f"*Property:* {escape_markdown(property_name)}",
            f"*Unit:* {escape_markdown(unit_number)}",
            f"*Tenant:* {escape_markdown(tenant_name)}",
            "",
            "*Description:*",
            escape_markdown(summary),
            "",
            f"*Entry Permission:* {'✅ Yes' if entry_permission else '❌ No'}",
            "",
            f"[View Request]({self.settings.app_url}/landlord/maintenance/{request_id})",
        ])
        return await self.send_message(chat_id, text)

    async def send_payment_received(
        self,
        chat_id: str,
        amount_cents: int,
        payment_method: str,
        property_name: str,
        unit_number: str,
        tenant_name: str,
    ) -> bool:
        text = "\n".join([
            "💰 *Payment Received*",
            "",
            f"*Amount:* {escape_markdown(format_currency(amount_cents))}",
            f"*Method:* {escape_markdown(format_label(payment_method))}",
            "",
            f"*Property:* {escape_markdown(property_name)}",
            f"*Unit:* {escape_markdown(unit_number)}",
            f"*Tenant:* {escape_markdown(tenant_name)}",
            "",
            f"[View Payment]({self.settings.app_url}/landlord/payments)",
        ])
        return await self.send_message(chat_id, text)

    async def send_lease_signed(
        self,
        chat_id: str,
        tenant_name: str,
        property_name: str,
        unit_number: str,
        start_date: str,
        end_date: str,
        monthly_rent_cents: int,
    ) -> bool:
        text = "\n".join([
            "📝 *New Lease Signed*",
            "",
            f"*Tenant:* {escape_markdown(tenant_name)}",
            f"*Property:* {escape_markdown(property_name)}",
            f"*Unit:* {escape_markdown(unit_number)}",
            "",
            f"*Lease Period:* {escape_markdown(start_date)} \\- {escape_markdown(end_date)}",
            f"*Monthly Rent:* {escape_markdown(format_currency(monthly_rent_cents))}",
            "",
            f"[View Lease]({self.settings.app_url}/landlord/tenants)",
        ])
        return await self.send_message(chat_id, text)
