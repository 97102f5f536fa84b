"""
Mailjet integration for the BAC Index quiz
Send the result email (and an optional admin copy) via Mailjet
"""
import os
from datetime import datetime
from typing import Dict, Mapping, Optional
from dotenv import load_dotenv
from flask import render_template
from mailjet_rest import Client

from bac_engine import get_summary
from template_helpers import format_diff, get_diff_color, get_diff_emoji, to_number
from logging_config import get_logger, log_email_event

logger = get_logger(__name__)

# Load .env file
load_dotenv()

# Mailjet API credentials (set as environment variables)
MAILJET_API_KEY = os.getenv('MAILJET_API_KEY', '')
MAILJET_API_SECRET = os.getenv('MAILJET_API_SECRET', '')
DEFAULT_FROM_EMAIL = os.getenv('FROM_EMAIL', 'results@bacindex.app')
DEFAULT_FROM_NAME = os.getenv('FROM_NAME', 'BAC Index')

# Optional: every result is copied here when set
ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', '')

RESULT_SUBJECT = 'Your BAC Index Results'
ADMIN_SUBJECT = 'New BAC Index Submission: {name}'

HTML_TEMPLATE = 'emails/bac_email.html'
TEXT_TEMPLATE = 'emails/bac_email.txt'

# Mailjet send client, created on first use
_mailjet = None


class EmailDeliveryError(Exception):
    """Mailjet rejected the message or could not be reached"""

    def __init__(self, message: str, to_email: str = None, status_code: int = None):
        super().__init__(message)
        self.to_email = to_email
        self.status_code = status_code


def get_mailjet_client() -> Client:
    """Return the shared Mailjet v3.1 client"""
    global _mailjet
    if _mailjet is None:
        _mailjet = Client(auth=(MAILJET_API_KEY, MAILJET_API_SECRET), version='v3.1')
    return _mailjet


def get_email_sender() -> Dict[str, str]:
    """Return the {'Email': ..., 'Name': ...} sender dict for Mailjet."""
    return {
        'Email': DEFAULT_FROM_EMAIL,
        'Name': DEFAULT_FROM_NAME
    }


def build_email_context(payload: Mapping) -> Dict:
    """
    Template variables for the result email.

    Args:
        payload: Flat result payload (name, email, company, designation,
                 physAge, bioAge, diff, topFactors, recommendations)
    """
    diff = to_number(payload.get('diff'))
    return {
        'name': payload.get('name') or '',
        'email': payload.get('email') or '',
        'company': payload.get('company') or '',
        'designation': payload.get('designation') or '',
        'physAge': payload.get('physAge'),
        'bioAge': payload.get('bioAge'),
        'diffText': format_diff(diff),
        'diffColor': get_diff_color(diff),
        'emoji': get_diff_emoji(diff),
        'summary': get_summary(diff).text,
        'topFactors': payload.get('topFactors') or [],
        'recommendations': payload.get('recommendations') or [],
        'year': datetime.now().year,
    }


def render_result_email(payload: Mapping) -> Dict:
    """Render the result email. Requires a Flask app context."""
    context = build_email_context(payload)
    return {
        'subject': RESULT_SUBJECT,
        'html': render_template(HTML_TEMPLATE, **context),
        'text': render_template(TEXT_TEMPLATE, **context),
    }


def _send_message(to_email: str, subject: str, rendered: Dict) -> Optional[str]:
    """
    Send one message through Mailjet.

    Returns:
        Mailjet MessageID (or None when the response carries none)

    Raises:
        EmailDeliveryError on transport errors or a non-200 response
    """
    data = {
        'Messages': [
            {
                "From": get_email_sender(),
                "To": [
                    {
                        "Email": to_email
                    }
                ],
                "Subject": subject,
                "TextPart": rendered['text'],
                "HTMLPart": rendered['html']
            }
        ]
    }

    try:
        result = get_mailjet_client().send.create(data=data)
    except Exception as e:
        raise EmailDeliveryError(f"Error sending email to {to_email}: {e}", to_email) from e

    if result.status_code != 200:
        raise EmailDeliveryError(f"Mailjet returned status {result.status_code}",
                                 to_email, result.status_code)

    # Extract message ID for tracking
    try:
        response_data = result.json() or {}
    except ValueError:
        # Accepted, but no parseable body to read the MessageID from
        response_data = {}
    message_id = None
    if 'Messages' in response_data and len(response_data['Messages']) > 0:
        msg = response_data['Messages'][0]
        if 'To' in msg and len(msg['To']) > 0:
            message_id = str(msg['To'][0].get('MessageID', ''))
    return message_id


def send_result_email(payload: Mapping) -> bool:
    """
    Send the BAC Index result to the respondent, then copy the admin.

    The admin copy is only attempted after the respondent's email went
    through and only when ADMIN_EMAIL is configured. There is no retry:
    the first failure propagates.

    Args:
        payload: Flat result payload; payload['email'] is the recipient

    Returns:
        True when every message was accepted

    Raises:
        EmailDeliveryError if Mailjet rejects a message or cannot be reached
    """
    to_email = payload.get('email')
    if not to_email:
        raise EmailDeliveryError('Missing recipient email')

    rendered = render_result_email(payload)

    try:
        message_id = _send_message(to_email, rendered['subject'], rendered)
        log_email_event(logger, 'result_sent', {'message_id': message_id})

        if ADMIN_EMAIL:
            admin_subject = ADMIN_SUBJECT.format(name=payload.get('name') or '')
            admin_message_id = _send_message(ADMIN_EMAIL, admin_subject, rendered)
            log_email_event(logger, 'admin_copy_sent', {'message_id': admin_message_id})
    except EmailDeliveryError as e:
        log_email_event(logger, 'delivery_failed', {
            'status_code': e.status_code,
            'error': str(e),
        })
        raise

    return True


# Test function
def test_mailjet_connection():
    """Check that the Mailjet credentials work"""
    if not MAILJET_API_KEY or not MAILJET_API_SECRET:
        logger.error("Mailjet credentials missing - set MAILJET_API_KEY and MAILJET_API_SECRET")
        return False

    try:
        mailjet_v3 = Client(auth=(MAILJET_API_KEY, MAILJET_API_SECRET), version='v3')
        result = mailjet_v3.contactslist.get()
    except Exception:
        logger.exception("Mailjet connection failed")
        return False

    if result.status_code != 200:
        logger.error(f"Mailjet connection failed with status {result.status_code}")
        return False
    logger.info("Mailjet connection works")
    return True


if __name__ == "__main__":
    # Test connection
    test_mailjet_connection()
