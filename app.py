import logging
from flask import Flask
from werkzeug.exceptions import HTTPException
from configs import Config, db, login

from db.models.user import User
from blueprint import blue_print
from admin.setup import init_admin
from commands import register_commands
from signals import ledger_changed
from dao import inventory as inv_dao
from utils.http import fail


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    login.init_app(app)

    @login.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login.unauthorized_handler
    def unauthorized():
        return fail("Vui lòng đăng nhập", 401)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return fail(e.description or e.name, e.code)

    # cảnh báo tồn thấp sau mỗi nghiệp vụ kho
    ledger_changed.connect(inv_dao.warn_low_stock)

    init_admin(app)  # tạo /manage
    blue_print(app)  # đăng ký các blueprint
    register_commands(app)
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
