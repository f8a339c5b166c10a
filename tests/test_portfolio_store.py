import threading
import unittest

from store_fixtures import make_store

from models.portfolio import LinkedAccount, ManualRecord, PortfolioDocument


class TestPortfolioStore(unittest.TestCase):
    def setUp(self):
        self.store = make_store()

    def test_starts_with_empty_document(self):
        document = self.store.read()
        self.assertEqual(document.linked_accounts, [])
        self.assertEqual(document.holdings, [])
        self.assertEqual(document.manual_records, [])
        self.assertIsNone(document.last_sync_at)

    def test_ensure_does_not_reset_existing_document(self):
        with self.store.transaction() as document:
            document.manual_records.append(ManualRecord(account="A", symbol="X", name="X"))
        self.store.ensure()
        self.assertEqual(len(self.store.read().manual_records), 1)

    def test_write_replaces_whole_document(self):
        with self.store.transaction() as document:
            document.manual_records.append(ManualRecord(account="A", symbol="X", name="X"))
            document.linked_accounts.append(LinkedAccount(access_token="access-1"))

        self.store.write(PortfolioDocument())
        document = self.store.read()
        self.assertEqual(document.manual_records, [])
        self.assertEqual(document.linked_accounts, [])

    def test_round_trips_records(self):
        record = ManualRecord(account="A", symbol="X", name="X", quantity=1.5, price=2.0, cost_basis=3.0)
        with self.store.transaction() as document:
            document.manual_records.append(record)
        [stored] = self.store.read().manual_records
        self.assertEqual(stored.model_dump(), record.model_dump())

    def test_failed_transaction_writes_nothing(self):
        with self.assertRaises(RuntimeError):
            with self.store.transaction() as document:
                document.manual_records.append(ManualRecord(account="A", symbol="X", name="X"))
                raise RuntimeError("boom")
        self.assertEqual(self.store.read().manual_records, [])

    def test_concurrent_transactions_do_not_lose_updates(self):
        def add(i):
            with self.store.transaction() as document:
                document.manual_records.append(ManualRecord(account="A", symbol=f"S{i}", name="N"))

        threads = [threading.Thread(target=add, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(self.store.read().manual_records), 10)


if __name__ == "__main__":
    unittest.main()
