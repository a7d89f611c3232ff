"""
Email Sender Module

This module provides a reusable utility for sending HTML emails.
This is a pure infrastructure module - no email content generation logic.

Uses SMTP for email delivery with support for:
- HTML email body
- Display name in the From header ("Staff Alert System" <user@company.com>)
- Implicit TLS on port 465, STARTTLS on every other port
- Multiple recipients with delay between sends
- Environment variable-based configuration
"""

import os
import smtplib
import time
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import List, Optional, Tuple

from residency_reporting.config import (
    DEFAULT_SMTP_PORT,
    EMAIL_DELAY_SECONDS,
    EMAIL_SENDER_DISPLAY,
    SMTP_SSL_PORT
)
from residency_reporting.logger import get_logger

logger = get_logger(__name__)


def _open_smtp_connection(smtp_server: str, smtp_port: int) -> smtplib.SMTP:
    """Connect with implicit TLS on the SSL port, otherwise upgrade with STARTTLS."""
    if smtp_port == SMTP_SSL_PORT:
        return smtplib.SMTP_SSL(smtp_server, smtp_port)

    server = smtplib.SMTP(smtp_server, smtp_port)
    server.starttls()
    return server


def build_message(
    sender: str,
    recipient: str,
    subject: str,
    html_body: str
) -> MIMEMultipart:
    """Build a multipart/alternative message with a UTF-8 HTML part."""
    message = MIMEMultipart('alternative')
    message['From'] = sender
    message['To'] = recipient
    message['Subject'] = subject
    message.attach(MIMEText(html_body, 'html', 'utf-8'))
    return message


def send_email(
    to_emails: List[str],
    subject: str,
    html_body: str,
    sender_display: Optional[str] = None
) -> Tuple[bool, Optional[str]]:
    """
    Send an HTML email to multiple recipients.

    This function:
    1. Validates email addresses
    2. Reads SMTP credentials from environment variables
    3. Sends the email to each recipient with a delay between sends
    4. Returns success status and error message if any

    Args:
        to_emails: List of recipient email addresses
        subject: Email subject line
        html_body: HTML content for email body
        sender_display: Display name for the From header (default: EMAIL_SENDER_DISPLAY)

    Returns:
        Tuple of (success: bool, error_msg: Optional[str])
        - success: True if at least one email was sent successfully, False otherwise
        - error_msg: Error message if sending failed, None if successful

    Environment Variables Required:
        - SMTP_SERVER: SMTP server address (e.g., 'smtp.gmail.com')
        - SMTP_USER: SMTP username/email address
        - SMTP_PASSWORD: SMTP password or app-specific password
        - SMTP_PORT: SMTP port (optional, defaults to 587)

    Example:
        success, error = send_email(
            to_emails=["hr@example.com"],
            subject="Test Email",
            html_body="<h1>Hello</h1><p>This is a test.</p>"
        )
    """
    try:
        # Step 1: Validate inputs
        logger.info(f"Preparing to send email to {len(to_emails) if to_emails else 0} recipient(s)")
        logger.info(f"Subject: {subject}")

        if not to_emails:
            error_msg = "Email recipient list is empty"
            logger.warning(error_msg)
            return False, error_msg

        for email in to_emails:
            if not email or '@' not in email:
                error_msg = f"Invalid email address: {email}"
                logger.error(error_msg)
                return False, error_msg

        # Step 2: Read SMTP configuration from environment variables
        smtp_server = os.getenv('SMTP_SERVER')
        smtp_user = os.getenv('SMTP_USER')
        smtp_password = os.getenv('SMTP_PASSWORD')

        try:
            smtp_port = int(os.getenv('SMTP_PORT', DEFAULT_SMTP_PORT))
        except ValueError:
            error_msg = f"SMTP_PORT environment variable is not a number: {os.getenv('SMTP_PORT')}"
            logger.error(error_msg)
            return False, error_msg

        if not smtp_server:
            error_msg = "SMTP_SERVER environment variable is not set"
            logger.error(error_msg)
            return False, error_msg

        if not smtp_user:
            error_msg = "SMTP_USER environment variable is not set"
            logger.error(error_msg)
            return False, error_msg

        if not smtp_password:
            error_msg = "SMTP_PASSWORD environment variable is not set"
            logger.error(error_msg)
            return False, error_msg

        logger.info(f"SMTP Configuration: {smtp_server}:{smtp_port}")
        logger.debug(f"SMTP User: {smtp_user}")

        sender = formataddr((sender_display or EMAIL_SENDER_DISPLAY, smtp_user))

        # Step 3: Send email to each recipient
        success_count = 0
        failed_recipients = []

        for i, recipient in enumerate(to_emails):
            try:
                logger.info(f"Sending email ({i+1}/{len(to_emails)})")
                logger.debug(f"Recipient: {recipient}")

                message = build_message(sender, recipient, subject, html_body)

                server = _open_smtp_connection(smtp_server, smtp_port)
                try:
                    server.login(smtp_user, smtp_password)
                    server.send_message(message)
                finally:
                    server.quit()

                success_count += 1
                logger.info(f"Email sent successfully ({i+1}/{len(to_emails)})")

                # Add delay between emails (except for last one)
                if i < len(to_emails) - 1:
                    logger.debug(f"Waiting {EMAIL_DELAY_SECONDS} seconds before next email")
                    time.sleep(EMAIL_DELAY_SECONDS)

            except Exception as e:
                error_msg = f"Failed to send email to {recipient}: {str(e)}"
                logger.error(error_msg, exc_info=True)
                failed_recipients.append(recipient)
                # Continue to next recipient even if one fails

        # Step 4: Return result
        if success_count == 0:
            error_msg = f"Failed to send email to all {len(to_emails)} recipient(s)"
            logger.error(error_msg)
            return False, error_msg

        if failed_recipients:
            logger.warning(f"Email sending partially successful: {success_count} sent, "
                           f"{len(failed_recipients)} failed")

        logger.info(f"Email sending completed: {success_count} successful, "
                    f"{len(failed_recipients)} failed")
        return True, None

    except Exception as e:
        error_msg = f"Unexpected error in send_email: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, error_msg
