"""Thin gateway over ``db.session`` used by every feature blueprint.

All driver failures surface as :class:`StoreError` after the session has been
rolled back. Writes commit immediately unless they run inside
:func:`transaction`, in which case the outermost block commits once.
"""
from contextlib import contextmanager

from flask import g
from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreError
from .extensions import db


def _message(exc):
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _fail(exc):
    db.session.rollback()
    return StoreError(_message(exc))


def _in_transaction():
    return g.get("store_depth", 0) > 0


def _commit():
    if not _in_transaction():
        db.session.commit()


@contextmanager
def transaction():
    g.store_depth = g.get("store_depth", 0) + 1
    try:
        yield db.session
        if g.store_depth == 1:
            db.session.commit()
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc
    except Exception:
        db.session.rollback()
        raise
    finally:
        g.store_depth -= 1


def execute(statement, params=None):
    try:
        result = db.session.execute(statement, params)
        _commit()
        return result
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc


def query_all(statement, params=None):
    try:
        return db.session.execute(statement, params).mappings().all()
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc


def query_one(statement, params=None):
    try:
        return db.session.execute(statement, params).mappings().first()
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc


def get(model, ident):
    try:
        return db.session.get(model, ident)
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc


def add(obj):
    try:
        db.session.add(obj)
        db.session.flush()
        _commit()
        return obj
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc


def commit():
    try:
        _commit()
    except SQLAlchemyError as exc:
        raise _fail(exc) from exc
