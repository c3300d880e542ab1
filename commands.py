# commands.py
import click
from configs import db


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Tạo bảng (dev / SQLite). Production dùng alembic."""
        import db.models as _models  # noqa: F401

        db.create_all()
        click.echo("✓ Tables created")

    @app.cli.command("seed")
    def seed():
        """Seed nhà cung cấp + mặt hàng mẫu."""
        from seed import seed_all

        seed_all()

    @app.cli.command("seed-users")
    def seed_users_cmd():
        """Seed user mẫu cho mọi role."""
        from seed_user import seed_users

        seed_users()

    @app.cli.command("resync-balances")
    def resync_balances():
        """Tính lại stock_balance từ toàn bộ sổ movement."""
        from dao import inventory as inv_dao

        changed = inv_dao.sync_balances()
        click.echo(f"✓ {len(changed)} balance(s) corrected")
