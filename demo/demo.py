#!/usr/bin/env python3
"""
Demonstration of reflectdi.

This demo shows:
1. Constructor injection based on type annotations
2. Value, factory and alias providers
3. Multi providers collecting several implementations
4. Child injectors overriding parent providers
5. Self / SkipSelf / Optional lookups
6. Error paths for missing and cyclic dependencies
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated

from reflectdi import (
    ClassProvider,
    CyclicDependencyError,
    ExistingProvider,
    FactoryProvider,
    Inject,
    Injector,
    InjectionToken,
    NoProviderError,
    Optional,
    ReflectiveInjector,
    SkipSelf,
    ValueProvider,
)

# Example domain: a small web service with pluggable components

DATABASE_URL = InjectionToken("database url")


class Database(ABC):
    """Abstract database interface."""

    @abstractmethod
    def query(self, sql: str) -> str:
        pass


class PostgresDB(Database):
    """PostgreSQL implementation."""

    def __init__(self, url: Annotated[str, Inject(DATABASE_URL)]):
        self.url = url

    def query(self, sql: str) -> str:
        return f"PostgreSQL[{self.url}]: {sql}"


class InMemoryDB(Database):
    """In-memory database for testing."""

    def query(self, sql: str) -> str:
        return f"InMemoryDB: {sql}"


@dataclass
class Config:
    """Application configuration."""

    app_name: str
    debug: bool = False


class Metrics:
    """Optional metrics sink."""

    def record(self, name: str) -> None:
        print(f"  metric: {name}")


class UserService:
    """Service for managing users."""

    def __init__(self, database: Database, config: Config, metrics: Metrics | None):
        self.database = database
        self.config = config
        self.metrics = metrics

    def create_user(self, username: str) -> str:
        if self.metrics is not None:
            self.metrics.record("user.created")
        return self.database.query(f"INSERT INTO users (name) VALUES ('{username}')")


class Plugin(ABC):
    @abstractmethod
    def name(self) -> str:
        pass


class AuditPlugin(Plugin):
    def name(self) -> str:
        return "audit"


class CachePlugin(Plugin):
    def name(self) -> str:
        return "cache"


class RequestScope:
    """Per-request object that wants the parent's database, never its own."""

    def __init__(self, database: Annotated[Database, SkipSelf()], injector: Injector):
        self.database = database
        self.injector = injector


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


def make_config() -> Config:
    return Config("demo-app", debug=True)


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    print("=== Constructor injection ===")
    app = ReflectiveInjector.resolve_and_create(
        [
            ValueProvider(DATABASE_URL, "postgres://localhost/app"),
            ClassProvider(Database, PostgresDB),
            FactoryProvider(Config, make_config),
            UserService,
            ExistingProvider("users", UserService),
        ]
    )
    users = app.get(UserService)
    print(users.create_user("alice"))
    print(f"metrics injected: {users.metrics}")
    print(f"alias is same instance: {app.get('users') is users}")

    print("\n=== Multi providers ===")
    plugins = ReflectiveInjector.resolve_and_create(
        [
            ClassProvider(Plugin, AuditPlugin, multi=True),
            ClassProvider(Plugin, CachePlugin, multi=True),
        ]
    )
    print([plugin.name() for plugin in plugins.get(Plugin)])

    print("\n=== Child injectors ===")
    request = app.resolve_and_create_child(
        [ClassProvider(Database, InMemoryDB), Metrics, RequestScope]
    )
    print(request.get(Database).query("SELECT 1"))
    scope = request.get(RequestScope)
    print(f"SkipSelf database: {type(scope.database).__name__}")
    print(f"injector is the child: {scope.injector is request}")
    print(f"display name: {request.display_name}")

    print("\n=== Optional dependencies ===")
    optional_injector = ReflectiveInjector.resolve_and_create(
        [FactoryProvider("greeting", lambda m: m, deps=[[Metrics, Optional()]])]
    )
    print(f"greeting: {optional_injector.get('greeting')}")

    print("\n=== Errors ===")
    try:
        ReflectiveInjector.resolve_and_create([UserService]).get(UserService)
    except NoProviderError as e:
        print(f"NoProviderError: {e}")

    try:
        ReflectiveInjector.resolve_and_create([Chicken, Egg]).get(Chicken)
    except CyclicDependencyError as e:
        print(f"CyclicDependencyError: {e}")


if __name__ == "__main__":
    main()
