from index import main_bp
from routes.auth import auth_bp
from routes.item import item_bp
from routes.stock import stock_bp
from routes.goods_receipt import gr_bp
from routes.delivery_note import dn_bp
from routes.production import prod_bp
from routes.supplier import supplier_bp
from routes.user import user_bp
from routes.audit import audit_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(item_bp)
    app.register_blueprint(stock_bp)
    app.register_blueprint(gr_bp)
    app.register_blueprint(dn_bp)
    app.register_blueprint(prod_bp)
    app.register_blueprint(supplier_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(audit_bp)
