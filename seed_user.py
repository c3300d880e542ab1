from db.models.user import User, UserRole
from dao import user as user_dao


def seed_users():
    users = [
        # username, full_name, role
        ("admin", "System Admin", UserRole.ADMIN),
        ("power1", "Power User", UserRole.POWER),
        ("manager1", "Store Manager", UserRole.MANAGER),
        ("store1", "Store Keeper", UserRole.STORE),
        ("production1", "Production Lead", UserRole.PRODUCTION),
        ("viewer1", "Read Only", UserRole.VIEWER),
        ("operator1", "Floor Operator", UserRole.OPERATOR),
    ]
    for username, full_name, role in users:
        if User.query.filter_by(username=username).first():
            continue
        user_dao.create_user(username, "1", role, full_name=full_name, actor="seed")

    print("✅ Seeded users with all defined roles")


if __name__ == "__main__":
    from app import create_app

    with create_app().app_context():
        seed_users()
