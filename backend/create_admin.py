"""Create or reset an admin account.

Usage:
    python -m backend.create_admin EMAIL NAME PASSWORD
"""
import argparse
import sys

from backend.auth.passwords import hash_password
from backend.database import AdminSessionLocal, Base, admin_engine
from backend.models.user import AdminUser


def upsert_admin(db, email: str, name: str, password: str) -> AdminUser:
    normalized_email = email.strip().lower()
    admin = db.query(AdminUser).filter(AdminUser.email == normalized_email).first()
    if admin is None:
        admin = AdminUser(email=normalized_email)
        db.add(admin)

    admin.name = name.strip()
    admin.hashed_password = hash_password(password)
    db.commit()
    db.refresh(admin)
    return admin


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Create or reset an admin account.')
    parser.add_argument('email')
    parser.add_argument('name')
    parser.add_argument('password')
    args = parser.parse_args(argv)

    if len(args.password) < 4:
        print('Password must be at least 4 characters.', file=sys.stderr)
        return 1

    Base.metadata.create_all(bind=admin_engine, tables=[AdminUser.__table__])
    db = AdminSessionLocal()
    try:
        admin = upsert_admin(db, args.email, args.name, args.password)
    finally:
        db.close()

    print(f'Admin {admin.email} (id={admin.id}) is ready.')
    return 0


if __name__ == '__main__':
    sys.exit(main())
