import pytest

from orderflow.infrastructure.persistence.engine import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
)
from orderflow.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def session_factory():
    engine = create_engine_from_url("sqlite://")
    create_tables(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def make_uow(session_factory):
    return lambda: SqlAlchemyUnitOfWork(session_factory)
