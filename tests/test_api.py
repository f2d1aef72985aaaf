import pytest
from fastapi.testclient import TestClient

from cardpoints.api.app import create_app
from cardpoints.presets.registry import CardPresetRegistry
from cardpoints.repository.auth import TokenAuthenticator
from cardpoints.repository.backends import InMemoryRuleBackend
from cardpoints.repository.rule_store import RuleStore
from cardpoints.services.orchestrator import RewardOrchestrator
from cardpoints.tracking.sources import InMemoryTransactionSource
from cardpoints.tracking.spend_tracker import SpendTracker

AUTH = {"Authorization": "Bearer s3cret"}

RULE_BODY = {
    "productId": "card-1",
    "name": "Online 10X",
    "priority": 10,
    "conditions": [{"type": "transaction_type", "operation": "include", "values": ["online"]}],
    "reward": {"baseMultiplier": 1, "bonusMultiplier": 9, "monthlyCap": 2000},
}


class BrokenBackend(InMemoryRuleBackend):
    async def fetch_rules(self, product_id):
        raise OSError("disk gone")


def make_client(backend=None) -> TestClient:
    orchestrator = RewardOrchestrator(
        rule_store=RuleStore(backend or InMemoryRuleBackend(), TokenAuthenticator({"s3cret": "alice"})),
        spend_tracker=SpendTracker(InMemoryTransactionSource()),
        presets=CardPresetRegistry(),
    )
    return TestClient(create_app(orchestrator))


@pytest.fixture
def client():
    with make_client() as test_client:
        yield test_client


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_rule_and_calculate(client) -> None:
    created = client.post("/rules", json=RULE_BODY, headers=AUTH)
    assert created.status_code == 201
    assert created.json()["productId"] == "card-1"

    response = client.post(
        "/calculate",
        json={"amount": 100, "productId": "card-1", "isOnline": True, "usedBonusPoints": 1800},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["basePoints"] == 100
    assert body["bonusPoints"] == 200
    assert body["remainingMonthlyBonus"] == 0
    assert body["appliedRule"]["name"] == "Online 10X"


def test_mutations_require_token(client) -> None:
    missing = client.post("/rules", json=RULE_BODY)
    wrong = client.post("/rules", json=RULE_BODY, headers={"Authorization": "Bearer nope"})

    assert missing.status_code == 401
    assert wrong.status_code == 401


def test_invalid_rule_is_bad_request(client) -> None:
    response = client.post("/rules", json={**RULE_BODY, "priority": -3}, headers=AUTH)

    assert response.status_code == 400


def test_update_and_delete_rule(client) -> None:
    rule_id = client.post("/rules", json=RULE_BODY, headers=AUTH).json()["id"]

    updated = client.put(f"/rules/{rule_id}", json={**RULE_BODY, "name": "Online 5X"}, headers=AUTH)
    listed = client.get("/products/card-1/rules").json()
    deleted = client.delete(f"/rules/{rule_id}", headers=AUTH)
    again = client.delete(f"/rules/{rule_id}", headers=AUTH)

    assert updated.status_code == 204
    assert [rule["name"] for rule in listed["rules"]] == ["Online 5X"]
    assert deleted.status_code == 204
    assert again.status_code == 503
    assert client.get("/products/card-1/rules").json()["rules"] == []


def test_bootstrap_from_preset(client) -> None:
    response = client.post(
        "/products/my-td/bootstrap", json={"presetKey": "td-aeroplan-visa-infinite"}, headers=AUTH
    )
    unknown = client.post("/products/my-td/bootstrap", json={"presetKey": "nope"}, headers=AUTH)

    assert response.status_code == 201
    assert response.json() == {"productId": "my-td", "presetKey": "td-aeroplan-visa-infinite", "rulesCreated": 2}
    assert unknown.status_code == 400
    assert len(client.get("/products/my-td/rules").json()["rules"]) == 2


def test_list_presets(client) -> None:
    presets = client.get("/presets").json()

    td = next(item for item in presets if item["key"] == "td-aeroplan-visa-infinite")
    assert len(presets) == 17
    assert td["ruleCount"] == 2
    assert td["pointsCurrency"] == "Aeroplan Points"


def test_storage_failure_is_service_unavailable() -> None:
    with make_client(BrokenBackend()) as client:
        response = client.post("/calculate", json={"amount": 10, "productId": "card-1"})

    assert response.status_code == 503


def test_bootstrap_twice_keeps_one_rule_set(client) -> None:
    for _ in range(2):
        response = client.post(
            "/products/my-td/bootstrap", json={"presetKey": "td-aeroplan-visa-infinite"}, headers=AUTH
        )
        assert response.status_code == 201

    assert len(client.get("/products/my-td/rules").json()["rules"]) == 2


def test_quick_setup_detects_preset(client) -> None:
    found = client.post(
        "/products/my-neo/quick-setup", json={"issuer": "Neo Financial", "name": "Cathay World Elite"}, headers=AUTH
    )
    missing = client.post("/products/my-chase/quick-setup", json={"issuer": "Chase", "name": "Freedom"}, headers=AUTH)

    assert found.status_code == 200
    assert found.json() == {"productId": "my-neo", "presetKey": "neo-cathay-world-elite", "rulesCreated": 4}
    assert missing.json() == {"productId": "my-chase", "presetKey": None, "rulesCreated": 0}
    assert client.get("/products/my-chase/rules").json()["rules"] == []
