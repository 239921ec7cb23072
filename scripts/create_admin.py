#!/usr/bin/env python3
"""
Create an admin account, or promote an existing account to admin.

Usage:
    python scripts/create_admin.py <email> [password]

A password is required when the account does not exist yet.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def create_or_promote_admin(db, email: str, password: str = None):
    """Returns (user, created)."""
    from powderpro import models
    from powderpro.auth import hash_password

    email = email.strip().lower()
    user = db.query(models.User).filter(models.User.email == email).first()
    if user:
        user.role = models.UserRole.ADMIN
        db.commit()
        db.refresh(user)
        return user, False

    if not password:
        raise ValueError(f"No account for {email}: a password is required to create one")

    user = models.User(
        email=email,
        password_hash=hash_password(password),
        role=models.UserRole.ADMIN,
        is_verified=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, True


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    from powderpro.database import Base, SessionLocal, engine

    email = sys.argv[1]
    password = sys.argv[2] if len(sys.argv) > 2 else None

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user, created = create_or_promote_admin(db, email, password)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()

    action = "Created" if created else "Promoted"
    print(f"{action} admin account: {user.email} (id {user.id})")


if __name__ == "__main__":
    main()
