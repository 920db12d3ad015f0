"""
Phone verification codes
Issues, sends, expires and redeems one-time SMS codes
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select, update

from .config import CODE_TTL_MINUTES
from .data import shop_settings
from .errors import ConfigError, PersistenceError, TransportError
from .models import VerificationCode

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


def generate_code() -> str:
    """Uniformly random 6-digit code in [100000, 999999]"""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def as_utc(now: datetime) -> datetime:
    # stored timestamps and expiry arithmetic are UTC
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(timezone.utc)


def purge_expired_codes(session: Session, now: datetime) -> int:
    """Delete expired codes. Best-effort: failures are logged, never raised."""
    try:
        expired = session.exec(
            select(VerificationCode).where(VerificationCode.expires_at <= as_utc(now))
        ).all()
        for row in expired:
            session.delete(row)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning(f"Failed to purge expired verification codes: {e}")
        return 0

    if expired:
        logger.info(f"Purged {len(expired)} expired verification codes")
    return len(expired)


def issue_code(session: Session, sms, phone_number: str, country_code: str, now: datetime) -> None:
    """
    Store a fresh code for the number and text it out.
    The code itself never leaves this function except inside the SMS body.
    """
    issued_at = as_utc(now)
    code = generate_code()
    row = VerificationCode(
        phone_number=phone_number,
        country_code=country_code,
        code=code,
        expires_at=issued_at + timedelta(minutes=CODE_TTL_MINUTES),
        is_used=False,
        created_at=issued_at,
    )

    session.add(row)
    try:
        session.commit()
        session.refresh(row)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to store verification code for {country_code}{phone_number}: {e}")
        raise PersistenceError("Failed to store verification code") from e

    purge_expired_codes(session, now)

    message = (
        f"Your {shop_settings['name']} verification code is: {code}. "
        f"This code expires in {CODE_TTL_MINUTES} minutes."
    )
    try:
        sms.send(f"{country_code}{phone_number}", message)
    except (TransportError, ConfigError):
        # Undelivered code: remove it so it cannot be redeemed
        try:
            session.delete(row)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning(f"Failed to discard undelivered verification code {row.id}: {e}")
        raise

    logger.info(f"Verification code {row.id} sent to {country_code}{phone_number}")


def verify_code(session: Session, phone_number: str, country_code: str, code: str, now: datetime) -> bool:
    """
    Redeem a code. The most recent unused, unexpired match is marked used.

    The used flag is flipped with a conditional UPDATE, so of two concurrent
    callers holding the same code only one sees a changed row.

    Returns True if a code was redeemed, False otherwise.
    Raises PersistenceError if the store cannot be read or updated.
    """
    try:
        match = session.exec(
            select(VerificationCode)
            .where(VerificationCode.phone_number == phone_number)
            .where(VerificationCode.country_code == country_code)
            .where(VerificationCode.code == code)
            .where(VerificationCode.is_used == False)  # noqa: E712
            .where(VerificationCode.expires_at > as_utc(now))
            .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
            .limit(1)
            .with_for_update()
        ).first()

        if match is None:
            session.rollback()
            return False

        code_id = match.id
        result = session.exec(
            update(VerificationCode)
            .where(VerificationCode.id == code_id)
            .where(VerificationCode.is_used == False)  # noqa: E712
            .values(is_used=True)
        )
        redeemed = result.rowcount == 1
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to verify code for {country_code}{phone_number}: {e}")
        raise PersistenceError("Failed to verify code") from e

    if not redeemed:
        logger.warning(f"Verification code {code_id} was redeemed concurrently")
        return False

    logger.info(f"Verification code {code_id} redeemed for {country_code}{phone_number}")
    return True
