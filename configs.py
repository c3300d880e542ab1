# configs.py
import os

from dotenv import load_dotenv
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

load_dotenv()

db = SQLAlchemy()
login = LoginManager()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///stock_manager.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # ledger / dashboard
    AUDIT_DETAILS_MAX_BYTES = int(os.getenv("AUDIT_DETAILS_MAX_BYTES", 16384))
    LOW_STOCK_ALERT_LIMIT = int(os.getenv("LOW_STOCK_ALERT_LIMIT", 6))
    DASHBOARD_DAYS = int(os.getenv("DASHBOARD_DAYS", 14))
    DN_DEFAULT_FROM = os.getenv("DN_DEFAULT_FROM", "Main Warehouse")
