import unittest
from datetime import datetime, timezone

from store_fixtures import FakeHoldingsProvider, holdings_payload, make_store

from models.portfolio import CanonicalHolding, LinkedAccount
from services.errors import ExternalServiceError
from services.plaid.plaid_sync import build_holding_id, normalize_holdings, sync_holdings

SYNCED_AT = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _holding_state(store):
    return [(h.id, h.symbol, h.quantity, h.price, h.value, h.cost_basis) for h in store.read().holdings]


class TestNormalizeHoldings(unittest.TestCase):
    def setUp(self):
        self.linked = LinkedAccount(id="item-1", institution_name="Fidelity", access_token="access-1")

    def test_resolves_account_and_security(self):
        response = holdings_payload(
            account_id="acc-1",
            account_name="Individual",
            positions=[("sec-1", "AAPL", "Apple Inc.", 10, 190.5, 1905.0, 1500.0)],
        )
        [holding] = normalize_holdings(self.linked, response, SYNCED_AT)

        self.assertEqual(holding.id, "item-1:acc-1:sec-1")
        self.assertEqual(holding.item_id, "item-1")
        self.assertEqual(holding.account_name, "Individual")
        self.assertEqual(holding.symbol, "AAPL")
        self.assertEqual(holding.name, "Apple Inc.")
        self.assertEqual(holding.quantity, 10.0)
        self.assertEqual(holding.price, 190.5)
        self.assertEqual(holding.value, 1905.0)
        self.assertEqual(holding.cost_basis, 1500.0)
        self.assertEqual(holding.last_updated, SYNCED_AT)

    def test_missing_lookups_fall_back(self):
        response = {
            "accounts": [],
            "securities": [],
            "holdings": [{"account_id": "ghost", "security_id": "mystery", "quantity": 1}],
        }
        [holding] = normalize_holdings(self.linked, response, SYNCED_AT)
        self.assertEqual(holding.account_name, "Fidelity")
        self.assertEqual(holding.symbol, "N/A")
        self.assertEqual(holding.name, "Unknown security")

    def test_missing_numbers_become_zero(self):
        response = holdings_payload(positions=[("sec-1", "CASH", "Cash", None, None, None, None)])
        [holding] = normalize_holdings(self.linked, response, SYNCED_AT)
        self.assertEqual((holding.quantity, holding.price, holding.value, holding.cost_basis), (0.0, 0.0, 0.0, 0.0))

    def test_accepts_camel_case_keys(self):
        response = {
            "accounts": [{"accountId": "acc-1", "name": "Roth"}],
            "securities": [{"securityId": "sec-1", "tickerSymbol": "VTI", "name": "Vanguard"}],
            "holdings": [{
                "accountId": "acc-1",
                "securityId": "sec-1",
                "quantity": 2,
                "institutionPrice": 250,
                "institutionValue": 500,
                "costBasis": 400,
            }],
        }
        [holding] = normalize_holdings(self.linked, response, SYNCED_AT)
        self.assertEqual(holding.id, build_holding_id("item-1", "acc-1", "sec-1"))
        self.assertEqual(holding.account_name, "Roth")
        self.assertEqual(holding.symbol, "VTI")
        self.assertEqual(holding.value, 500.0)


class TestSyncHoldings(unittest.TestCase):
    def setUp(self):
        self.store = make_store()
        with self.store.transaction() as document:
            document.linked_accounts.append(
                LinkedAccount(id="item-1", institution_name="Fidelity", access_token="access-1")
            )
            document.linked_accounts.append(
                LinkedAccount(id="item-2", institution_name="Schwab", access_token="access-2")
            )
        self.provider = FakeHoldingsProvider({
            "access-1": holdings_payload(
                account_id="acc-1",
                positions=[
                    ("sec-1", "AAPL", "Apple", 10, 100, 1000, 800),
                    ("sec-2", "MSFT", "Microsoft", 2, 300, 600, 500),
                ],
            ),
            "access-2": holdings_payload(
                account_id="acc-9",
                positions=[("sec-3", "VTI", "Vanguard", 1, 250, 250, 200)],
            ),
        })

    def test_sync_replaces_holdings_for_all_linked_accounts(self):
        result = sync_holdings(self.store, self.provider)

        self.assertEqual(result.synced_holdings, 3)
        document = self.store.read()
        self.assertEqual(
            [h.id for h in document.holdings],
            ["item-1:acc-1:sec-1", "item-1:acc-1:sec-2", "item-2:acc-9:sec-3"],
        )
        self.assertEqual(document.last_sync_at, result.synced_at)
        self.assertTrue(all(h.last_updated == result.synced_at for h in document.holdings))
        self.assertEqual(self.provider.calls, ["access-1", "access-2"])

    def test_sync_twice_yields_identical_holdings(self):
        sync_holdings(self.store, self.provider)
        first = _holding_state(self.store)
        sync_holdings(self.store, self.provider)
        self.assertEqual(_holding_state(self.store), first)

    def test_sync_discards_previous_holdings(self):
        with self.store.transaction() as document:
            document.holdings.append(CanonicalHolding(
                id="old:acc:sec",
                item_id="old",
                account_name="Closed",
                symbol="OLD",
                name="Old Holding",
                value=99.0,
                last_updated=SYNCED_AT,
            ))
        sync_holdings(self.store, self.provider)
        self.assertNotIn("old:acc:sec", [h.id for h in self.store.read().holdings])

    def test_failure_on_second_account_leaves_store_unchanged(self):
        sync_holdings(self.store, self.provider)
        before = self.store.read()

        self.provider.failures["access-2"] = ExternalServiceError(
            "Plaid holdings fetch failed", payload={"error_code": "ITEM_LOGIN_REQUIRED"}
        )
        self.provider.responses["access-1"] = holdings_payload(
            account_id="acc-1", positions=[("sec-1", "AAPL", "Apple", 99, 1, 99, 1)]
        )
        with self.assertRaises(ExternalServiceError):
            sync_holdings(self.store, self.provider)

        after = self.store.read()
        self.assertEqual(after.holdings, before.holdings)
        self.assertEqual(after.last_sync_at, before.last_sync_at)

    def test_sync_without_linked_accounts_clears_holdings(self):
        sync_holdings(self.store, self.provider)
        self.provider.calls.clear()
        self.store.write(self.store.read().model_copy(update={"linked_accounts": []}))
        result = sync_holdings(self.store, self.provider)
        self.assertEqual(result.synced_holdings, 0)
        self.assertEqual(self.store.read().holdings, [])
        self.assertEqual(self.provider.calls, [])


if __name__ == "__main__":
    unittest.main()
