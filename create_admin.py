#!/usr/bin/env python3
"""
Create an admin account. Admins cannot be created through public signup;
they are the collaborator that marks confirmed appointments as completed.

Usage: python create_admin.py <email> <name>   (password read from ADMIN_PASSWORD)
"""
import os
import sys

from dotenv import load_dotenv
from sqlmodel import Session

load_dotenv()

from wecare.config import settings
from wecare.database import create_db_and_tables, engine
from wecare.domain.booking import Role
from wecare.application.services.account_service import normalize_email, MIN_PASSWORD_LENGTH
from wecare.infrastructure.security.passlib_hasher import PasslibPasswordHasher
from wecare.infrastructure.persistence.sqlalchemy.repositories.account_repository_sql import SqlAccountRepository


def create_admin(email: str, name: str, password: str) -> str:
    create_db_and_tables()
    with Session(engine) as session:
        accounts = SqlAccountRepository(session)
        email = normalize_email(email)
        if accounts.get_by_email(email):
            raise ValueError(f"An account with email {email} already exists")
        hasher = PasslibPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
        account = accounts.create(name=name, email=email, password_hash=hasher.hash(password), role=Role.ADMIN.value)
        return account.id


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    password = os.environ.get("ADMIN_PASSWORD", "")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"ADMIN_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters")
        sys.exit(2)
    try:
        admin_id = create_admin(sys.argv[1], sys.argv[2], password)
    except ValueError as e:
        print(str(e))
        sys.exit(1)
    print(f"Created admin account {admin_id}")
