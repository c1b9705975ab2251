"""Transactional email over SMTP."""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

import aiosmtplib

from app.core.config import Settings, get_settings
from app.services.formatting import format_currency, format_date, format_label

logger = logging.getLogger(__name__)


def _layout(heading: str, body: str) -> str:
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #1f2937;">
        <h2>{escape(heading)}</h2>
        {body}
        <p style="color: #6b7280; font-size: 12px;">Strukture Property Management</p>
    </body>
    </html>
    """


def _button(url: str, label: str) -> str:
    return (
        f'<p><a href="{escape(url)}" style="background: #2563eb; color: #fff; '
        f'padding: 10px 18px; border-radius: 6px; text-decoration: none;">{escape(label)}</a></p>'
    )


class EmailSender:
    """Sends HTML email; disabled (returns False) when SMTP is not configured."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return bool(self.settings.smtp_host)

    async def send(self, to: str, subject: str, html: str) -> bool:
        if not self.enabled:
            logger.debug(f"[EMAIL] SMTP not configured, skipping '{subject}' to {to}")
            return False

        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.settings.email_from
        message["To"] = to
        message.attach(MIMEText(html, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.smtp_host,
                port=self.settings.smtp_port,
                username=self.settings.smtp_username,
                password=self.settings.smtp_password,
                start_tls=self.settings.smtp_use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"[EMAIL] Failed to send '{subject}' to {to}: {e}")
            return False

        logger.info(f"[EMAIL] Sent '{subject}' to {to}")
        return True

    async def send_maintenance_submitted(
        self,
        to: str,
        landlord_name: str,
        tenant_name: str,
        property_name: str,
        unit_number: str,
        title: str,
        description: str,
        category: str,
        priority: str,
        request_id: str,
    ) -> bool:
        urgent = "🚨 URGENT: " if priority == "EMERGENCY" else ""
        body = f"""
        <p>Hello {escape(landlord_name)},</p>
        <p>{escape(tenant_name)} submitted a new maintenance request for
        {escape(property_name)} - Unit {escape(unit_number)}.</p>
        <p><strong>{escape(title)}</strong><br>
        Category: {escape(format_label(category))}<br>
        Priority: {escape(format_label(priority))}</p>
        <p>{escape(description)}</p>
        {_button(f"{self.settings.app_url}/landlord/maintenance/{request_id}", "View Request")}
        """
        return await self.send(to, f"{urgent}New Maintenance Request - {title}", _layout("New Maintenance Request", body))

    async def send_maintenance_update(
        self,
        to: str,
        tenant_name: str,
        title: str,
        new_status: str,
        message: str,
        request_id: str,
    ) -> bool:
        body = f"""
        <p>Hello {escape(tenant_name)},</p>
        <p>Your maintenance request <strong>{escape(title)}</strong> has been updated.</p>
        <p>Status: {escape(format_label(new_status))}</p>
        <p>{escape(message)}</p>
        {_button(f"{self.settings.app_url}/tenant/maintenance/{request_id}", "View Request")}
        """
        return await self.send(to, f"Maintenance Update - {title}", _layout("Maintenance Update", body))

    async def send_payment_confirmation(
        self,
        to: str,
        tenant_name: str,
        amount_cents: int,
        property_name: str,
        unit_number: str,
        payment_method: str,
        transaction_id: str,
    ) -> bool:
        body = f"""
        <p>Hello {escape(tenant_name)},</p>
        <p>We received your payment of <strong>{format_currency(amount_cents)}</strong>
        for {escape(property_name)} - Unit {escape(unit_number)}.</p>
        <p>Method: {escape(format_label(payment_method))}<br>
        Transaction: {escape(transaction_id)}</p>
        {_button(f"{self.settings.app_url}/tenant/payments", "View Payments")}
        """
        return await self.send(
            to, f"Payment Confirmation - {format_currency(amount_cents)}", _layout("Payment Confirmation", body)
        )

    async def send_rent_due_reminder(self, to: str, tenant_name: str, amount_cents: int, due_date) -> bool:
        body = f"""
        <p>Hello {escape(tenant_name)},</p>
        <p>Your rent payment of <strong>{format_currency(amount_cents)}</strong> is due on
        {format_date(due_date)}.</p>
        {_button(f"{self.settings.app_url}/tenant/payments/new", "Pay Now")}
        """
        return await self.send(to, f"Rent Due Reminder - {format_date(due_date)}", _layout("Rent Due Reminder", body))

    async def send_late_payment_notice(
        self, to: str, tenant_name: str, amount_cents: int, days_late: int, late_fee_cents: Optional[int]
    ) -> bool:
        fee = f"<p>A late fee of {format_currency(late_fee_cents)} may apply.</p>" if late_fee_cents else ""
        body = f"""
        <p>Hello {escape(tenant_name)},</p>
        <p>Your rent payment of <strong>{format_currency(amount_cents)}</strong> is
        {days_late} days overdue. Please pay immediately to avoid additional fees.</p>
        {fee}
        {_button(f"{self.settings.app_url}/tenant/payments/new", "Pay Now")}
        """
        return await self.send(
            to, f"URGENT: Late Payment Notice - {days_late} Days Overdue", _layout("Late Payment Notice", body)
        )

    async def send_lease_expiring(
        self, to: str, tenant_name: str, property_name: str, unit_number: str, end_date, days_remaining: int
    ) -> bool:
        body = f"""
        <p>Hello {escape(tenant_name)},</p>
        <p>Your lease for {escape(property_name)} - Unit {escape(unit_number)} ends on
        {format_date(end_date)} ({days_remaining} days). Please contact your property manager about renewal.</p>
        """
        return await self.send(to, f"Lease Expiring in {days_remaining} Days", _layout("Lease Expiring Soon", body))

    async def send_welcome(
        self, to: str, tenant_name: str, property_name: str, unit_number: str, move_in_date, monthly_rent_cents: int
    ) -> bool:
        body = f"""
        <p>Hello {escape(tenant_name)},</p>
        <p>Welcome to {escape(property_name)}! Your lease for Unit {escape(unit_number)} is now active.</p>
        <p>Move-in date: {format_date(move_in_date)}<br>
        Monthly rent: {format_currency(monthly_rent_cents)}</p>
        {_button(f"{self.settings.app_url}/tenant/dashboard", "Open Tenant Portal")}
        """
        return await self.send(to, f"Welcome to {property_name}!", _layout("Welcome!", body))
