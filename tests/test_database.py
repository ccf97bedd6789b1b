import threading
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select

from storefront.data.database import Database, get_db
from storefront.data.models.category import CategoryModel
from storefront.data.models.order import OrderModel


def _count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def _request(database):
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(database=database)))


def test_rollback_is_not_undone_by_another_sessions_commit(database):
    writer_done = threading.Event()

    def commit_category():
        with database.exclusive_session() as db:
            db.add(CategoryModel(name="Lamps"))
            db.commit()
        writer_done.set()

    writer = threading.Thread(target=commit_category)

    with database.exclusive_session() as db:
        db.add(OrderModel(user_id=1, total=Decimal("10"), status="pendiente"))
        db.flush()

        writer.start()
        # the writer waits until this session is closed
        assert not writer_done.wait(0.2)

        db.rollback()

    writer.join(timeout=5)
    assert writer_done.is_set()

    with database.session() as db:
        assert _count(db, OrderModel) == 0
        assert _count(db, CategoryModel) == 1


def test_get_db_holds_the_store_until_closed(database):
    dependency = get_db(_request(database))
    db = next(dependency)

    assert db.is_active
    assert database.lock.locked()

    dependency.close()

    assert not database.lock.locked()


def test_get_db_reports_a_busy_store(database, monkeypatch):
    monkeypatch.setattr(database, "acquire", lambda timeout=None: False)

    with pytest.raises(HTTPException) as exc:
        next(get_db(_request(database)))

    assert exc.value.status_code == 503


def test_file_backed_store_is_not_serialized(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'store.db'}")

    assert database.lock is None
    assert database.acquire() is True
    database.release()
    database.dispose()
