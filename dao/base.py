# dao/base.py
from sqlalchemy.exc import SQLAlchemyError
from configs import db


def commit():
    """Commit session; lỗi DB thì rollback rồi ném lại."""
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
