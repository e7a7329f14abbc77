import logging
from flask import current_app
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content

logger = logging.getLogger(__name__)


def verify_sendgrid_credentials():
    """Verify SendGrid credentials are properly configured"""
    if not current_app.config.get('SENDGRID_API_KEY'):
        logger.warning("SendGrid API key not configured")
        return False

    if not current_app.config.get('SENDER_EMAIL'):
        logger.warning("Sender email not configured")
        return False

    return True


def build_reset_link(reset_token):
    frontend_url = current_app.config.get('FRONTEND_URL', '').rstrip('/')
    return f"{frontend_url}/reset-password?token={reset_token}"


def send_password_reset_email(receiver_email, reset_link, ttl_minutes=15):
    """Send the password reset link using SendGrid.

    Returns False instead of raising so the caller can fall back to
    handing the link back directly.
    """
    if not verify_sendgrid_credentials():
        return False

    try:
        sg = SendGridAPIClient(current_app.config['SENDGRID_API_KEY'])

        html_content = f"""
        <html>
            <body style="font-family: Arial, sans-serif; padding: 20px; max-width: 480px; margin: 0 auto;">
                <h2 style="color: #0f172a;">GateFlow</h2>
                <p>We received a request to reset your password. Use the button below to choose a new one.
                This link expires in <strong>{ttl_minutes} minutes</strong>.</p>
                <div style="text-align: center; margin: 28px 0;">
                    <a href="{reset_link}" style="background: #0f172a; color: #ffffff; padding: 10px 28px; border-radius: 8px; text-decoration: none;">
                        Reset Password
                    </a>
                </div>
                <p style="color: #64748b; font-size: 12px;">If you didn't request this, you can safely ignore this email.</p>
            </body>
        </html>
        """

        message = Mail(
            from_email=Email(current_app.config['SENDER_EMAIL']),
            to_emails=To(receiver_email),
            subject='GateFlow - Reset Your Password',
            html_content=Content("text/html", html_content)
        )

        response = sg.send(message)
        logger.info("Password reset email sent to %s (status %s)", receiver_email, response.status_code)
        return response.status_code < 400
    except Exception:
        logger.exception("Failed to send password reset email to %s", receiver_email)
        return False
