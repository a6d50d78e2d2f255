import logging

from sqlalchemy.orm import Session

from clubcms.models.admin_model import AdminAccount

logger = logging.getLogger(__name__)


def provision_admin(db: Session, email: str, hashed_secret: str, *, overwrite: bool = False):
    """Create the admin account row, or rotate its secret when ``overwrite``."""
    account = db.query(AdminAccount).filter(AdminAccount.email == email).first()
    if account is None:
        account = AdminAccount(email=email, hashed_secret=hashed_secret, role="admin")
        db.add(account)
        logger.info("Provisioned admin account for %s", email)
    elif overwrite:
        account.hashed_secret = hashed_secret
        logger.info("Rotated admin secret for %s", email)
    else:
        return account
    db.commit()
    db.refresh(account)
    return account
