import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import settings

logger = logging.getLogger(__name__)


def send_email_ses(
    to_email: str,
    subject: str,
    html_body: str,
    text_body: str | None = None,
    reply_to: str | None = None,
    sender: str | None = None,
) -> bool:
    """Send one email through SES. Returns False instead of raising."""
    source = sender or settings.SES_SENDER_EMAIL
    if not source:
        logger.error("SES_SENDER_EMAIL is not configured")
        return False

    ses_client = boto3.client(
        "ses",
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )

    body = {"Html": {"Data": html_body, "Charset": "UTF-8"}}
    if text_body:
        body["Text"] = {"Data": text_body, "Charset": "UTF-8"}

    kwargs = {}
    if reply_to:
        kwargs["ReplyToAddresses"] = [reply_to]

    try:
        response = ses_client.send_email(
            Source=source,
            Destination={"ToAddresses": [to_email]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": body,
            },
            **kwargs,
        )
        logger.info("SES email sent to %s: %s", to_email, response.get("MessageId"))
        return True
    except ClientError as e:
        logger.error("SES error: %s", e.response["Error"]["Message"])
        return False
    except BotoCoreError as e:
        logger.error("SES client error: %s", e)
        return False
