# create_tables.py
"""Create the schema and make sure a working admin account exists"""
from taskman.config.settings import Settings
from taskman.database import Database
from taskman.models.user import User
from taskman.services.auth_service import normalize_email
from taskman.utils.permissions import Department, Role, default_permissions
from taskman.utils.security import hash_password


def create_tables(database: Database):
    """Create all tables"""
    database.create_all()
    print("✅ All tables created successfully!")


def ensure_admin(database: Database, settings: Settings) -> User:
    """Create the default admin, or reset an existing one to a usable state"""
    email = normalize_email(settings.admin_email)
    db = database.session()
    try:
        admin = db.query(User).filter(User.email == email).first()
        if admin:
            print("Admin user already exists, resetting role, permissions and password...")
        else:
            admin = User(name="Admin", email=email)
            db.add(admin)

        admin.role = Role.ADMIN.value
        admin.department = Department.ADMINISTRATION.value
        admin.permissions = default_permissions(Role.ADMIN.value)
        admin.hashed_password = hash_password(settings.admin_password)

        db.commit()
        db.refresh(admin)
        print(f"✅ Admin user ready: {admin.email}")
        return admin
    finally:
        db.close()


if __name__ == "__main__":
    settings = Settings.from_env()
    database = Database(settings)
    try:
        create_tables(database)
        ensure_admin(database, settings)
    finally:
        database.dispose()
