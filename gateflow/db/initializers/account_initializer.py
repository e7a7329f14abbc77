# db/initializers/account_initializer.py
import logging
import os

from gateflow.models.enums import Role

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = [
    {
        'email': os.getenv('SEED_ADMIN_EMAIL', 'admin@vsu.edu.ph'),
        'password': os.getenv('SEED_ADMIN_PASSWORD', 'admin123'),
        'first_name': 'System',
        'last_name': 'Admin',
        'role': Role.ADMIN,
        'contact_number': '+639001234567'
    },
    {
        'email': os.getenv('SEED_GUARD_EMAIL', 'guard@vsu.edu.ph'),
        'password': os.getenv('SEED_GUARD_PASSWORD', 'guard123'),
        'first_name': 'Juan',
        'last_name': 'Dela Cruz',
        'role': Role.GUARD,
        'contact_number': '+639001234568'
    },
]


def initialize_default_accounts(store, hash_password, accounts=None):
    """Create the operator accounts that cannot self-register, if missing.

    Returns the list of emails that were created.
    """
    created = []
    for account in accounts or DEFAULT_ACCOUNTS:
        if store.find_by_email(account['email']):
            logger.info("Account %s already initialized", account['email'])
            continue
        store.create(
            email=account['email'],
            password_hash=hash_password(account['password']),
            first_name=account['first_name'],
            last_name=account['last_name'],
            role=account['role'],
            contact_number=account.get('contact_number')
        )
        created.append(account['email'])
        logger.info("Initialized %s account %s", account['role'].value, account['email'])
    return created
