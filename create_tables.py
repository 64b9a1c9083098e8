# create_tables.py
"""
Drop and recreate every helpdesk table, then create the default admin.
This is the bulk reset: it is the only thing that removes activity rows.
"""

import os

from helpdesk.database import Base, engine, SessionLocal
from helpdesk.models import User, UserType
from helpdesk.utils.security import hash_password

DEFAULT_ADMIN = {
    "username": os.getenv("ADMIN_USERNAME", "admin"),
    "email": os.getenv("ADMIN_EMAIL", "admin@example.com"),
    "password": os.getenv("ADMIN_PASSWORD", "Admin@123"),
}

def create_tables():
    """Create all tables"""
    try:
        # drop_all orders by foreign key dependencies
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        print("✅ All tables created successfully!")

        create_default_admin()

    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise

def create_default_admin():
    """Create a default admin user"""
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.username == DEFAULT_ADMIN["username"]).first()
        if existing:
            print("ℹ️  Admin user already exists")
            return

        db.add(User(
            username=DEFAULT_ADMIN["username"],
            email=DEFAULT_ADMIN["email"],
            name="System Administrator",
            hashed_password=hash_password(DEFAULT_ADMIN["password"]),
            user_type=UserType.ADMIN,
        ))
        db.commit()
        print("✅ Default admin user created!")
        print(f"   Username: {DEFAULT_ADMIN['username']}")
        print(f"   Password: {DEFAULT_ADMIN['password']}")
    except Exception as e:
        db.rollback()
        print(f"❌ Error creating default admin: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_tables()
