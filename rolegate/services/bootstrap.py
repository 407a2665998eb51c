"""Startup sequence: schema, fixed roles and the default admin account."""

import logging

from rolegate.core.context import AppContext
from rolegate.core.database import init_schema
from rolegate.core.security import hash_password
from rolegate.services.accounts import (
    ADMIN_ROLE,
    USER_ROLE,
    count_users,
    create_user,
    find_or_create_role,
)

logger = logging.getLogger(__name__)


def bootstrap(context: AppContext) -> None:
    """
    Bring the store to its baseline state. Safe to run on every start.

    Creates missing tables, the 'user' and 'admin' roles, and an admin account
    from ADMIN_LOGIN/ADMIN_PASSWORD when no users exist yet.
    """
    init_schema(context.engine)
    logger.info("Database schema synchronised")

    settings = context.settings
    with context.session_factory() as db:
        find_or_create_role(db, USER_ROLE)
        admin_role = find_or_create_role(db, ADMIN_ROLE)

        if count_users(db) == 0:
            create_user(
                db,
                settings.ADMIN_LOGIN,
                hash_password(settings.ADMIN_PASSWORD.get_secret_value()),
                admin_role.id,
            )
            logger.info("Administrator account '%s' created", settings.ADMIN_LOGIN)
