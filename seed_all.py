"""
Master Database Seeding Script
Creates database tables and populates with demo users
"""

from create_tables import create_tables
from demo_users import DEMO_USERS, DEMO_PASSWORD
from helpdesk.database import SessionLocal
from helpdesk.models import User, UserType
from helpdesk.utils.security import hash_password

def seed_demo_users():
    """Create demo users in the database"""
    print(f"\n{'='*60}")
    print(f"🚀 Creating Demo Users")
    print(f"{'='*60}")

    session = SessionLocal()
    try:
        hashed_password = hash_password(DEMO_PASSWORD)
        created = 0

        for user_data in DEMO_USERS:
            existing_user = session.query(User).filter(User.username == user_data["username"]).first()
            if existing_user:
                print(f"[SKIP] User {user_data['username']} already exists, skipping...")
                continue

            manager_id = None
            if user_data["manager_username"]:
                manager = session.query(User).filter(User.username == user_data["manager_username"]).first()
                manager_id = manager.id if manager else None

            session.add(User(
                username=user_data["username"],
                email=user_data["email"],
                name=user_data["name"],
                hashed_password=hashed_password,
                user_type=UserType(user_data["user_type"]),
                manager_id=manager_id,
            ))
            # Flush so later users can reference this one as manager
            session.flush()
            created += 1
            print(f"[SUCCESS] Created user: {user_data['username']} ({user_data['user_type']})")

        session.commit()
        print(f"\n[SUCCESS] Successfully created {created} demo users!")
        return True

    except Exception as e:
        print(f"[ERROR] Error creating demo users: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def main():
    create_tables()
    if not seed_demo_users():
        raise SystemExit(1)
    print(f"\nAll demo accounts use the password: {DEMO_PASSWORD}")

if __name__ == "__main__":
    main()
