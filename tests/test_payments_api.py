"""
Payment API: order creation and checkout callback verification.
"""
from datetime import datetime, timedelta

from campaign_desk.models import Campaign, CampaignStatus, Payment, PaymentStatus

from tests.conftest import sign


def create_order(api, client, service, amount=10.50, campaign=None):
    body = {"amount": amount, "clientId": client.id, "serviceId": service.id}
    if campaign is not None:
        body["campaignId"] = campaign.id
    response = api.post("/payment/createOrder", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def verify(api, order_id, payment_id="pay_001", signature=None):
    return api.post("/payment/verify", json={
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature if signature is not None else sign(order_id, payment_id),
    })


def stored_payment(db_session, order_id):
    db_session.expire_all()
    return db_session.query(Payment).filter(Payment.order_id == order_id).one()


def stored_campaign(db_session, campaign_id):
    db_session.expire_all()
    return db_session.query(Campaign).filter(Campaign.id == campaign_id).one()


class TestCreateOrder:

    def test_amount_sent_in_minor_units(self, api, gateway_stub, make_client, make_service):
        body = create_order(api, make_client(), make_service(), amount=10.50)

        assert gateway_stub.orders[0]["amount"] == 1050
        assert body["success"] is True
        assert body["order"]["amount"] == 1050
        record = body["paymentRecord"]
        assert record["orderId"] == body["order"]["id"]
        assert record["status"] == PaymentStatus.CREATED.value
        assert record["currency"] == "USD"
        assert record["serviceHeading"] == "Instagram Growth"
        assert record["clientName"] == {"firstName": "Ada", "lastName": "Lovelace"}

    def test_receipt_generated_when_absent(self, api, gateway_stub, make_client, make_service):
        body = create_order(api, make_client(), make_service())

        assert len(body["paymentRecord"]["receipt"]) == 20
        assert gateway_stub.orders[0]["receipt"] == body["paymentRecord"]["receipt"]

    def test_unknown_client(self, api, gateway_stub, make_service):
        response = api.post("/payment/createOrder", json={
            "amount": 5, "clientId": "missing", "serviceId": make_service().id,
        })

        assert response.status_code == 404
        assert gateway_stub.orders == []

    def test_unknown_campaign(self, api, make_client, make_service):
        response = api.post("/payment/createOrder", json={
            "amount": 5,
            "clientId": make_client().id,
            "serviceId": make_service().id,
            "campaignId": "missing",
        })

        assert response.status_code == 404

    def test_campaign_of_another_client_rejected(
        self, api, db_session, gateway_stub, make_client, make_service, make_campaign
    ):
        owner = make_client()
        payer = make_client(first_name="Eve")
        service = make_service()
        campaign = make_campaign(owner, service)

        response = api.post("/payment/createOrder", json={
            "amount": 0.01,
            "clientId": payer.id,
            "serviceId": service.id,
            "campaignId": campaign.id,
        })

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert gateway_stub.orders == []
        assert db_session.query(Payment).count() == 0

    def test_campaign_of_another_service_rejected(
        self, api, db_session, gateway_stub, make_client, make_service, make_campaign
    ):
        client = make_client()
        paid_service = make_service(heading="Cheap")
        campaign = make_campaign(client, make_service(heading="Expensive"))

        response = api.post("/payment/createOrder", json={
            "amount": 0.01,
            "clientId": client.id,
            "serviceId": paid_service.id,
            "campaignId": campaign.id,
        })

        assert response.status_code == 400
        assert gateway_stub.orders == []
        assert stored_campaign(db_session, campaign.id).status == CampaignStatus.PENDING.value

    def test_non_positive_amount(self, api, make_client, make_service):
        response = api.post("/payment/createOrder", json={
            "amount": 0, "clientId": make_client().id, "serviceId": make_service().id,
        })

        assert response.status_code == 400

    def test_gateway_failure_persists_nothing(self, api, db_session, gateway_stub, make_client, make_service):
        gateway_stub.fail_with = 500

        response = api.post("/payment/createOrder", json={
            "amount": 5, "clientId": make_client().id, "serviceId": make_service().id,
        })

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Payment gateway error"}
        assert db_session.query(Payment).count() == 0


class TestVerifyPayment:

    def test_captured_payment_approves_and_completes_campaign(
        self, api, db_session, mail_stub, make_client, make_service, make_campaign
    ):
        client = make_client(email="ada@example.com")
        service = make_service()
        campaign = make_campaign(client, service)
        order_id = create_order(api, client, service, campaign=campaign)["order"]["id"]

        response = verify(api, order_id)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Payment approved successfully"
        assert body["payment"]["status"] == PaymentStatus.APPROVED.value
        assert body["payment"]["paymentId"] == "pay_001"
        assert body["campaign"]["status"] == CampaignStatus.COMPLETED.value

        payment = stored_payment(db_session, order_id)
        assert payment.status == PaymentStatus.APPROVED.value
        assert payment.gateway_status == "captured"
        assert payment.approved_at is not None
        assert stored_campaign(db_session, campaign.id).status == CampaignStatus.COMPLETED.value
        assert mail_stub.subjects() == ["Payment received"]
        assert mail_stub.sent[0]["to"] == ["ada@example.com"]

    def test_double_verify_is_idempotent(
        self, api, db_session, mail_stub, make_client, make_service, make_campaign
    ):
        client = make_client()
        service = make_service()
        campaign = make_campaign(client, service)
        order_id = create_order(api, client, service, campaign=campaign)["order"]["id"]

        first = verify(api, order_id)
        approved_at = stored_payment(db_session, order_id).approved_at
        second = verify(api, order_id)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["message"] == "Payment already approved"
        assert second.json()["campaign"]["campaignId"] == campaign.id
        assert stored_payment(db_session, order_id).approved_at == approved_at
        assert mail_stub.subjects().count("Payment received") == 1

    def test_invalid_signature_fails_payment(
        self, api, db_session, mail_stub, make_client, make_service, make_campaign
    ):
        client = make_client()
        service = make_service()
        campaign = make_campaign(client, service)
        order_id = create_order(api, client, service, campaign=campaign)["order"]["id"]

        response = verify(api, order_id, signature="0" * 64)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Invalid signature"
        assert body["payment"]["status"] == PaymentStatus.FAILED.value
        assert stored_campaign(db_session, campaign.id).status == CampaignStatus.PENDING.value
        assert "Payment received" not in mail_stub.subjects()

    def test_signature_comparison_is_exact(self, api, make_client, make_service):
        client = make_client()
        service = make_service()
        first = create_order(api, client, service)["order"]["id"]
        second = create_order(api, client, service)["order"]["id"]

        assert verify(api, first, signature=sign(first, "pay_001").upper()).status_code == 400
        assert verify(api, second, signature=sign(second, "pay_001") + " ").status_code == 400

    def test_signature_binds_payment_id(self, api, make_client, make_service):
        order_id = create_order(api, make_client(), make_service())["order"]["id"]

        response = verify(api, order_id, payment_id="pay_other", signature=sign(order_id, "pay_001"))

        assert response.status_code == 400

    def test_uncaptured_payment_fails_with_gateway_status(
        self, api, db_session, gateway_stub, make_client, make_service, make_campaign
    ):
        client = make_client()
        service = make_service()
        campaign = make_campaign(client, service)
        order_id = create_order(api, client, service, campaign=campaign)["order"]["id"]
        gateway_stub.payment_statuses["pay_001"] = "authorized"

        response = verify(api, order_id)

        assert response.status_code == 400
        assert response.json()["message"] == "Payment status: authorized"
        payment = stored_payment(db_session, order_id)
        assert payment.status == PaymentStatus.FAILED.value
        assert payment.gateway_status == "authorized"
        assert stored_campaign(db_session, campaign.id).status == CampaignStatus.PENDING.value

    def test_failed_payment_stays_failed(self, api, db_session, make_client, make_service):
        order_id = create_order(api, make_client(), make_service())["order"]["id"]
        verify(api, order_id, signature="bad")

        response = verify(api, order_id)

        assert response.status_code == 400
        assert response.json()["message"] == "Payment already failed"
        assert stored_payment(db_session, order_id).status == PaymentStatus.FAILED.value

    def test_bad_signature_after_approval_changes_nothing(self, api, db_session, make_client, make_service):
        order_id = create_order(api, make_client(), make_service())["order"]["id"]
        verify(api, order_id)

        response = verify(api, order_id, signature="bad")

        assert response.status_code == 400
        assert stored_payment(db_session, order_id).status == PaymentStatus.APPROVED.value

    def test_missing_campaign_still_approves(self, api, db_session, make_client, make_service):
        order_id = create_order(api, make_client(), make_service())["order"]["id"]

        response = verify(api, order_id)

        assert response.status_code == 200
        assert response.json()["campaign"] is None
        assert stored_payment(db_session, order_id).status == PaymentStatus.APPROVED.value

    def test_falls_back_to_newest_pending_campaign(
        self, api, db_session, make_client, make_service, make_campaign
    ):
        client = make_client()
        service = make_service()
        older = make_campaign(client, service)
        newer = make_campaign(client, service)
        older.created_at = datetime.utcnow() - timedelta(hours=1)
        db_session.commit()
        order_id = create_order(api, client, service)["order"]["id"]

        response = verify(api, order_id)

        assert response.json()["campaign"]["campaignId"] == newer.id
        assert stored_campaign(db_session, older.id).status == CampaignStatus.PENDING.value
        assert stored_campaign(db_session, newer.id).status == CampaignStatus.COMPLETED.value

    def test_recorded_campaign_of_another_client_is_not_completed(
        self, api, db_session, make_client, make_service, make_campaign
    ):
        owner = make_client()
        payer = make_client(first_name="Eve")
        service = make_service()
        campaign = make_campaign(owner, service)
        order_id = create_order(api, payer, service, amount=0.01)["order"]["id"]
        # An order row linked to a foreign campaign, e.g. written before ownership was checked
        stored_payment(db_session, order_id).campaign_id = campaign.id
        db_session.commit()

        response = verify(api, order_id)

        assert response.status_code == 200
        assert response.json()["campaign"] is None
        assert stored_campaign(db_session, campaign.id).status == CampaignStatus.PENDING.value

    def test_unknown_order(self, api):
        response = verify(api, "order_missing")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_missing_fields(self, api):
        response = api.post("/payment/verify", json={"razorpay_order_id": "order_1"})

        assert response.status_code == 400
