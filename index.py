# index.py
from flask import Blueprint
from flask_login import login_required
from dao import dashboard as dashboard_dao
from utils.http import ok

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
@main_bp.route("/dashboard")
@login_required
def home():
    return ok(dashboard=dashboard_dao.build_dashboard())
