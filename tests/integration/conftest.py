"""
Integration fixtures.

Builds the real routers, middleware and error handlers over in-memory
backends injected through the lifespan. No network connections are made.
"""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import install_routes, wire_services
from tests.conftest import FakeBlobStore


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore({"v2/core.js": b"export const core = 1;"})


@pytest.fixture
def test_app(settings, kv_store, license_oracle, email_provider, blob_store, clock):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        wire_services(
            app,
            settings,
            kv_store=kv_store,
            license_oracle=license_oracle,
            email_provider=email_provider,
            blob_store=blob_store,
            clock=clock,
        )
        yield

    app = FastAPI(lifespan=lifespan)
    install_routes(app, settings)
    return app


@pytest.fixture
def client(test_app):
    with TestClient(test_app) as c:
        yield c


@pytest.fixture
def session_token(test_app, client) -> str:
    return test_app.state.token_service.mint("a@example.com").token
