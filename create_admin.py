#!/usr/bin/env python3
"""
Provision (or rotate) the admin account.

    python create_admin.py admin@example.com 'the admin secret'

Only a hash of the secret is stored. Print it with --print-hash to put it in
ADMIN_SECRET_HASH instead of keeping ADMIN_SECRET in the environment.
"""
import argparse
import logging
import os
import sys

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from clubcms.config import get_settings
from clubcms.controller.admin_controller import provision_admin
from clubcms.cryptography import hash_secret
from clubcms.database import build_engine, build_session_factory, create_tables

logger = logging.getLogger("create_admin")


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email")
    parser.add_argument("secret")
    parser.add_argument("--print-hash", action="store_true", help="also print the secret hash")
    args = parser.parse_args(argv)

    engine = build_engine(get_settings().database_url)
    create_tables(engine)
    session_factory = build_session_factory(engine)

    hashed = hash_secret(args.secret)
    db = session_factory()
    try:
        account = provision_admin(db, args.email, hashed, overwrite=True)
        logger.info("Admin account %s ready (id=%s)", account.email, account.id)
    finally:
        db.close()

    if args.print_hash:
        print(hashed)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(main())
