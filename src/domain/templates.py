"""
Confirmation email content.

Pure functions: no I/O and no shared state. The generation timestamp
is only displayed in the footer.
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape

BRAND = "ScriptChain"


@dataclass(frozen=True)
class ConfirmationContent:
    """Subject plus the HTML and plain-text bodies of a confirmation email."""

    subject: str
    html: str
    text: str


_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Welcome to {brand}</title>
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }}
      .header {{ background-color: #f8f9fa; padding: 20px; text-align: center; border-radius: 8px; margin-bottom: 20px; }}
      .content {{ padding: 20px; background-color: #ffffff; border: 1px solid #e9ecef; border-radius: 8px; }}
      .footer {{ text-align: center; margin-top: 20px; padding: 20px; font-size: 14px; color: #6c757d; }}
      .highlight {{ background-color: #e3f2fd; padding: 10px; border-radius: 4px; margin: 10px 0; font-weight: bold; }}
    </style>
  </head>
  <body>
    <div class="header">
      <h1>Welcome to {brand}!</h1>
    </div>

    <div class="content">
      <h2>Hello {name},</h2>

      <p>Thank you for registering with our email confirmation system!</p>

      <p>We're excited to have you on board. This confirmation email serves as verification that your registration was successful.</p>

      <div class="highlight">
        This confirmation email has been sent to: <strong>{email}</strong>
      </div>

      <p>If you have any questions or need assistance, please don't hesitate to reach out to our support team.</p>

      <p>Best regards,<br>
      <strong>The {brand} Team</strong></p>
    </div>

    <div class="footer">
      <p>This is an automated message from {brand} Email Confirmation System.</p>
      <p>Generated on {generated}</p>
    </div>
  </body>
</html>
"""

_TEXT_TEMPLATE = """Welcome to {brand} Email System, {name}!

Hello {name},

Thank you for registering with our email confirmation system!

We're excited to have you on board. This confirmation email serves as verification that your registration was successful.

This confirmation email has been sent to: {email}

If you have any questions or need assistance, please don't hesitate to reach out to our support team.

Best regards,
The {brand} Team

---
This is an automated message from {brand} Email Confirmation System.
Generated on {generated}
"""


def generate_confirmation(
    name: str, email: str, generated_at: datetime | None = None
) -> ConfirmationContent:
    """
    Build the confirmation email for a newly registered user.

    name and email are HTML-escaped in the HTML body; the subject and
    text body carry them verbatim.

    Args:
        name: Display name of the user
        email: Recipient address
        generated_at: Timestamp shown in the footer (defaults to now)

    Returns:
        ConfirmationContent with subject, html and text
    """
    generated = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return ConfirmationContent(
        subject=f"Welcome to {BRAND} Email System, {name}!",
        html=_HTML_TEMPLATE.format(
            brand=BRAND,
            name=escape(name),
            email=escape(email),
            generated=generated,
        ),
        text=_TEXT_TEMPLATE.format(
            brand=BRAND, name=name, email=email, generated=generated
        ),
    )
