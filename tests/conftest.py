import os
import tempfile

os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_ENV"] = "test"
os.environ["MONGO_TRANSACTIONS"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="gold-invest-uploads-")
os.environ.pop("GOLD_PRICE_API_URL", None)

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from gold_invest_app.db import init_db
from gold_invest_app.gold.utils.price_source import PriceQuote, PriceSource, generate_mock_history, get_price_source
from gold_invest_app.main import app
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.utils.kyc_status import KycStatus
from gold_invest_app.users.utils.password import hash_password
from gold_invest_app.users.utils.token_generate import create_access_token
from gold_invest_app.users.utils.user_role import UserRole


class StubPriceSource(PriceSource):
    """Deterministic price feed that records how often it was asked."""

    def __init__(self, price: float = 2000.0):
        self.price = price
        self.calls = 0

    async def fetch_quote(self) -> PriceQuote:
        self.calls += 1
        return PriceQuote(price=self.price, change_24h=1.5, change_percent_24h=0.08)

    async def history(self, days):
        return generate_mock_history(days)


@pytest.fixture(autouse=True)
async def db():
    client = AsyncMongoMockClient(uuidRepresentation="standard")
    await init_db(client["gold_invest_test"])
    yield client


@pytest.fixture
def price_source():
    return StubPriceSource()


@pytest.fixture
async def client(price_source):
    app.dependency_overrides[get_price_source] = lambda: price_source
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user():
    counter = {"n": 0}

    async def _make_user(role=UserRole.USER, kyc_status=KycStatus.NOT_SUBMITTED, password="secret123", **fields):
        counter["n"] += 1
        user = UserModel(
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", f"User{counter['n']}"),
            email=fields.pop("email", f"user{counter['n']}@example.com"),
            password=hash_password(password),
            role=role,
            kyc_status=kyc_status,
            **fields,
        )
        await user.insert()
        return user

    return _make_user


def auth_headers(user: UserModel) -> dict:
    token = create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers
