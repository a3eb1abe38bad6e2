# Overview: Pytest coverage for the HTTP API through the Flask test client.

import pytest

from ebucks.models import Voucher
from ebucks.services import auth_service, inventory_service, printer_service

pytestmark = pytest.mark.smoke


class TestSystem:

    def test_health(self, client, db_session):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["status"] == "healthy"

    def test_cors_header_for_known_origin(self, client, db_session):
        resp = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

        resp = client.get("/api/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers


class TestPurchaseRoute:

    def test_purchase_with_change(self, client, db_session, make_user, make_voucher, make_item):
        ada = make_user("Ada")
        snacks = make_item("Snacks", 1250, stock=2)
        ten = make_voucher(1000, owner=ada)
        five = make_voucher(500, owner=ada)

        resp = client.post("/api/purchase", json={
            "voucherIds": [ten.id.lower(), five.id],
            "totalCost": 12.50,
            "cartItems": [{"id": snacks.id, "name": "Snacks", "price": 12.50}],
        })

        assert resp.status_code == 200
        body = resp.json
        assert body["success"] is True
        assert body["change"] == 2.5
        assert body["change_cents"] == 250
        assert db_session.get(Voucher, body["changeId"]).amount_cents == 250
        assert "OFFICIAL CHANGE" in body["printWindow"]

    def test_insufficient_funds(self, client, db_session, make_voucher, make_item):
        snacks = make_item("Snacks", 1250)
        v = make_voucher(500)

        resp = client.post("/api/purchase", json={
            "voucherIds": [v.id],
            "totalCost": 12.50,
            "cartItems": [{"id": snacks.id}],
        })

        assert resp.status_code == 400
        assert resp.json["error"] == "Insufficient Funds"

    def test_invalid_vouchers(self, client, db_session, make_item):
        pen = make_item("Pen", 200)

        resp = client.post("/api/purchase", json={
            "voucherIds": ["NOPE0000"],
            "totalCost": 2,
            "cartItems": [{"id": pen.id}],
        })

        assert resp.status_code == 400
        assert resp.json["error"] == "Invalid Vouchers"

    def test_out_of_stock(self, client, db_session, make_voucher, make_item):
        pen = make_item("Pen", 200, stock=0)
        v = make_voucher(500)

        resp = client.post("/api/purchase", json={
            "voucherIds": [v.id],
            "totalCost": 2,
            "cartItems": [{"id": pen.id}],
        })

        assert resp.status_code == 409

    def test_missing_fields(self, client, db_session):
        resp = client.post("/api/purchase", json={"voucherIds": []})
        assert resp.status_code == 400

    def test_oversized_item_id_is_rejected(self, client, db_session, make_voucher):
        v = make_voucher(500)

        resp = client.post("/api/purchase", json={
            "voucherIds": [v.id],
            "totalCost": 2,
            "cartItems": [{"id": 10**20}],
        })

        assert resp.status_code == 400
        assert "cartItems.id" in resp.json["error"]
        assert db_session.get(Voucher, v.id).is_used is False


class TestTransferRoute:

    def test_transfer(self, client, db_session, make_user, make_voucher):
        ada = make_user("Ada")
        bob = make_user("Bob")
        make_voucher(2000, owner=ada)
        make_voucher(1000, owner=ada)

        resp = client.post("/api/transfer", json={"senderId": ada.id, "receiverId": bob.id, "amount": 18})

        assert resp.status_code == 200
        assert resp.json["fee"] == 5.0
        assert resp.json["change"] == 7.0
        assert db_session.get(Voucher, resp.json["voucherId"]).owner_id == bob.id

    def test_transfer_to_unknown_user(self, client, db_session, make_user, make_voucher):
        ada = make_user("Ada")
        make_voucher(2000, owner=ada)

        resp = client.post("/api/transfer", json={"senderId": ada.id, "receiverId": 999, "amount": 1})
        assert resp.status_code == 404

    def test_oversized_user_ids_are_rejected(self, client, db_session, make_user, make_voucher):
        ada = make_user("Ada")
        make_voucher(2000, owner=ada)

        sender = client.post("/api/transfer", json={"senderId": 10**20, "receiverId": ada.id, "amount": 1})
        receiver = client.post("/api/transfer", json={"senderId": ada.id, "receiverId": 10**20, "amount": 1})

        assert sender.status_code == 400
        assert receiver.status_code == 400
        assert "receiverId" in receiver.json["error"]


class TestMoneyCreationRoutes:

    def test_mint(self, client, db_session, make_user):
        ada = make_user("Ada")

        resp = client.post("/api/mint", json={"amount": 10, "userId": ada.id})

        assert resp.status_code == 200
        assert resp.json["voucher"]["amount_cents"] == 1000
        assert resp.json["voucher"]["owner_id"] == ada.id

    def test_mint_rejects_fractional_cents(self, client, db_session):
        resp = client.post("/api/mint", json={"amount": 1.005})
        assert resp.status_code == 400

    def test_mint_for_deactivated_user(self, client, db_session, make_user):
        ada = make_user("Ada")
        assert client.delete(f"/api/users/{ada.id}").status_code == 200

        resp = client.post("/api/mint", json={"amount": 10, "userId": ada.id})

        assert resp.status_code == 404
        assert db_session.query(Voucher).count() == 0

    def test_mint_oversized_user_id(self, client, db_session):
        resp = client.post("/api/mint", json={"amount": 10, "userId": 10**20})
        assert resp.status_code == 400

    def test_payroll_process(self, client, db_session, make_user, make_timesheet):
        ada = make_user("Ada", rate=15)
        make_timesheet(ada, minutes=210)
        make_timesheet(ada, minutes=240)

        unpaid = client.get("/api/payroll/unpaid")
        assert len(unpaid.json) == 2

        resp = client.post("/api/payroll/process")

        assert resp.status_code == 200
        assert resp.json["count"] == 1
        assert resp.json["paid"][0]["amount"] == 112.5
        assert "PAYROLL" in resp.json["printWindow"]
        assert client.get("/api/payroll/unpaid").json == []

    def test_voucher_lookup(self, client, db_session, make_voucher):
        v = make_voucher(300)

        assert client.get(f"/api/vouchers/{v.id}").json["voucher"]["amount_cents"] == 300
        assert client.get("/api/vouchers/NOPE0000").status_code == 404


class TestPeopleRoutes:

    def test_login(self, client, db_session, make_user):
        make_user("Ada", pin="4821")

        resp = client.post("/api/login", json={"pin": "4821"})
        assert resp.status_code == 200
        assert resp.json["user"]["name"] == "Ada"
        assert "pin_hash" not in resp.json["user"]

        assert client.post("/api/login", json={"pin": "1111"}).status_code == 401

    def test_clock_round_trip(self, client, db_session, make_user):
        make_user("Ada", pin="4821")

        first = client.post("/api/clock", json={"pin": "4821"})
        second = client.post("/api/clock", json={"pin": "4821"})

        assert first.json["action"] == "IN"
        assert second.json["action"] == "OUT"
        assert second.json["hours"] == "0.00"
        assert client.post("/api/clock", json={"pin": "1111"}).status_code == 401

    def test_user_lifecycle(self, client, db_session):
        resp = client.post("/api/users", json={"name": "Ada", "role": "Employee", "pin": "4821", "hourly_rate": 15})
        assert resp.status_code == 201
        user_id = resp.json["user"]["id"]

        dup = client.post("/api/users", json={"name": "Bob", "role": "Employee", "pin": "4821"})
        assert dup.status_code == 409

        details = client.get(f"/api/users/{user_id}/details").json
        assert details["balance_cents"] == 0
        assert details["activeVouchers"] == []

        assert client.delete(f"/api/users/{user_id}").status_code == 200
        assert client.get("/api/users").json == []

    def test_details_unknown_user(self, client, db_session):
        assert client.get("/api/users/999/details").status_code == 404

    def test_non_text_name_is_rejected(self, client, db_session):
        resp = client.post("/api/users", json={"name": 123, "role": "Employee", "pin": "4821"})

        assert resp.status_code == 400
        assert resp.json["error"] == "name must be a string"
        assert client.get("/api/users").json == []

    def test_unexpected_errors_return_500(self, client, db_session, make_user, monkeypatch):
        ada = make_user("Ada")

        def _fail(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(auth_service, "deactivate_user", _fail)
        monkeypatch.setattr(auth_service, "get_user_details", _fail)

        for resp in (client.delete(f"/api/users/{ada.id}"), client.get(f"/api/users/{ada.id}/details")):
            assert resp.status_code == 500
            assert resp.json == {"error": "Internal server error"}


class TestInventoryAndReports:

    def test_inventory_crud(self, client, db_session):
        resp = client.post("/api/inventory", json={"name": "Pen", "price": 2, "stock": 1, "barcode": "111"})
        assert resp.status_code == 201
        item_id = resp.json["id"]

        assert client.get("/api/inventory/barcode/111").json["item"]["id"] == item_id

        restocked = client.post(f"/api/inventory/{item_id}/restock", json={"quantity": 4})
        assert restocked.json["item"]["stock"] == 5

        assert client.delete(f"/api/inventory/{item_id}").status_code == 200
        assert client.get("/api/inventory").json == []

    def test_restock_quantity_is_capped(self, client, db_session, make_item):
        pen = make_item("Pen", 200, stock=3)

        huge = client.post(f"/api/inventory/{pen.id}/restock", json={"quantity": 10**20})
        over_cap = client.post(f"/api/inventory/{pen.id}/restock", json={"quantity": 1_000_001})

        assert huge.status_code == 400
        assert over_cap.status_code == 400
        assert client.get("/api/inventory").json[0]["stock"] == 3

    def test_item_fields_must_be_text(self, client, db_session):
        bad_name = client.post("/api/inventory", json={"name": {"x": 1}, "price": 2})
        huge_stock = client.post("/api/inventory", json={"name": "Pen", "price": 2, "stock": 10**20})

        assert bad_name.status_code == 400
        assert huge_stock.status_code == 400
        assert client.get("/api/inventory").json == []

    def test_inventory_unexpected_errors_return_500(self, client, db_session, make_item, monkeypatch):
        pen = make_item("Pen", 200, barcode="111")

        def _fail(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(inventory_service, "find_by_barcode", _fail)
        monkeypatch.setattr(inventory_service, "restock_item", _fail)
        monkeypatch.setattr(inventory_service, "deactivate_item", _fail)

        responses = [
            client.get("/api/inventory/barcode/111"),
            client.post(f"/api/inventory/{pen.id}/restock", json={"quantity": 1}),
            client.delete(f"/api/inventory/{pen.id}"),
        ]
        for resp in responses:
            assert resp.status_code == 500
            assert resp.json == {"error": "Internal server error"}

    def test_financials_and_stats(self, client, db_session, make_voucher, make_item):
        pen = make_item("Pen", 200)
        v = make_voucher(500)
        client.post("/api/purchase", json={"voucherIds": [v.id], "totalCost": 2, "cartItems": [{"id": pen.id}]})

        history = client.get("/api/financials").json
        assert len(history) == 1
        assert history[0]["items"] == ["Pen"]

        assert client.get("/api/financials?from=2000-01-01&to=2000-01-02").json == []
        assert client.get("/api/financials?from=yesterday").status_code == 400

        stats = client.get("/api/stats").json
        assert stats["circulation_cents"] == 300
        assert stats["lifetime_revenue_cents"] == 200
        assert stats["topItems"] == [{"item_name": "Pen", "count": 1}]

    def test_printers(self, client, db_session):
        resp = client.post("/api/printers", json={"name": "Front", "ip_address": "10.0.0.2", "assignment": "POS"})
        assert resp.status_code == 201

        assert len(client.get("/api/printers").json) == 1
        test = client.post("/api/printers/test", json={"ip": "10.0.0.2"})
        assert test.json["success"] is True
        assert "PRINTER TEST" in test.json["printWindow"]

        assert client.delete(f"/api/printers/{resp.json['id']}").status_code == 200
        assert client.post("/api/printers", json={"name": "X", "assignment": "KITCHEN"}).status_code == 400

    def test_printer_name_must_be_text(self, client, db_session):
        resp = client.post("/api/printers", json={"name": 5, "assignment": "POS"})

        assert resp.status_code == 400
        assert client.get("/api/printers").json == []

    def test_printer_delete_unexpected_error(self, client, db_session, monkeypatch):
        def _fail(printer_id):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(printer_service, "delete_printer", _fail)

        resp = client.delete("/api/printers/1")
        assert resp.status_code == 500
        assert resp.json == {"error": "Internal server error"}
