"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- MFA 配置与固定时钟
- 内存记录存储
- SQLite 内存数据库（StaticPool）上的 ORM 记录存储
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ymfa.config import MFASettings
from ymfa.mfa import UserMfaRecord, setup_mfa
from ymfa.store import MemoryMfaRecordStore, ORMMfaRecordStore, MfaBase


# 2023-11-14 22:13:20 UTC
FIXED_NOW = 1_700_000_000


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, now: float = FIXED_NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


# ==================== 基础 Fixtures ====================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mfa_settings():
    return MFASettings(issuer="ExampleCo")


@pytest.fixture
def memory_store():
    store = MemoryMfaRecordStore()
    store.add_user(UserMfaRecord(id=1, email="alice@example.com"))
    store.add_user(UserMfaRecord(id=2, email="bob@example.com"))
    return store


@pytest.fixture
def mfa_service(memory_store, mfa_settings, clock):
    return setup_mfa(memory_store, mfa_settings, clock=clock)


# ==================== 数据库 Fixtures ====================

@pytest.fixture
def memory_engine():
    """SQLite 内存数据库引擎，所有连接共享同一个库"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    MfaBase.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(memory_engine):
    return sessionmaker(bind=memory_engine, autoflush=False)


@pytest.fixture
def orm_store(session_factory):
    store = ORMMfaRecordStore(session_factory)
    store.add_user(UserMfaRecord(id=1, email="alice@example.com"))
    return store
