from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from metadeploy.adapters.sqlalchemy import start_mappers
from metadeploy.adapters.sqlalchemy.migrations import upgrade_head
from metadeploy.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyDeployUnitOfWork,
    shutdown,
    startup,
)
from metadeploy.app import build_deploy_service
from metadeploy.config import DeployConfig

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from metadeploy.domain.deploy import DeployService


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyDeployUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyDeployUnitOfWork:
        return SqlAlchemyDeployUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def deploy_uow(
    sqlite_unit_of_work: Callable[[], SqlAlchemyDeployUnitOfWork],
) -> Iterator[SqlAlchemyDeployUnitOfWork]:
    with sqlite_unit_of_work() as uow:
        yield uow


@pytest.fixture
def deploy_service(deploy_uow: SqlAlchemyDeployUnitOfWork) -> DeployService:
    return build_deploy_service(deploy_uow, config=DeployConfig())
