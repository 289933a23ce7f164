from sqlmodel import Session, select
from core.config import settings
from core.database import engine, create_db_and_tables
from models.user import User, UserRole
from utils.security import hash_password


def seed_user(session: Session, username: str, phone: str, password: str, role: UserRole) -> bool:
    # check if the user already exists
    existing = session.exec(
        select(User).where((User.username == username) | (User.phone_number == phone))
    ).first()
    if existing:
        print(f"✅ {role.value} '{username}' already exists")
        return False

    session.add(
        User(
            username=username,
            phone_number=phone,
            password_hash=hash_password(password),
            role=role,
        )
    )
    session.commit()
    print(f"🎉 {role.value} '{username}' seeded successfully")
    return True


def seed_users():
    create_db_and_tables()
    with Session(engine) as session:
        seed_user(
            session,
            settings.seed_admin_username,
            settings.seed_admin_phone,
            settings.seed_admin_password,
            UserRole.admin,
        )
        seed_user(
            session,
            settings.seed_employee_username,
            settings.seed_employee_phone,
            settings.seed_employee_password,
            UserRole.employee,
        )


if __name__ == "__main__":
    seed_users()
