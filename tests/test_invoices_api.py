"""
Invoice generation and lookup.
"""
import pytest

from tests.conftest import sign


@pytest.fixture
def paid_campaign(api, make_client, make_service, make_campaign):
    """A campaign whose order has been paid and verified."""
    client = make_client(first_name="Ada", last_name="Lovelace", email="ada@example.com")
    service = make_service()
    campaign = make_campaign(client, service, quantities=(3, 2))
    order = api.post("/payment/createOrder", json={
        "amount": 20,
        "clientId": client.id,
        "serviceId": service.id,
        "campaignId": campaign.id,
    }).json()["order"]
    assert api.post("/payment/verify", json={
        "razorpay_order_id": order["id"],
        "razorpay_payment_id": "pay_001",
        "razorpay_signature": sign(order["id"], "pay_001"),
    }).status_code == 200
    return campaign, order


def generate(api, campaign, order, payment_id="pay_001", signature=None):
    return api.post("/invoice/generate", json={
        "campaignId": campaign.id,
        "razorpay_order_id": order["id"],
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature if signature is not None else sign(order["id"], payment_id),
    })


class TestGenerateInvoice:

    def test_generate(self, api, paid_campaign):
        campaign, order = paid_campaign

        response = generate(api, campaign, order)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        invoice = body["data"]
        assert invoice["invoiceNumber"] == "INV00001"
        assert invoice["campaignId"] == campaign.id
        assert invoice["billTo"] == {"fullName": "Ada Lovelace", "email": "ada@example.com"}
        assert [(i["contentKey"], i["quantity"], i["totalCost"]) for i in invoice["items"]] == [
            ("100 Likes", 3, 15.0),
            ("50 Followers", 2, 5.0),
        ]
        assert invoice["subtotal"] == invoice["total"] == 20.0
        assert invoice["paymentInfo"] == {
            "orderId": order["id"],
            "paymentId": "pay_001",
            "amount": 2000,
            "currency": "USD",
        }
        assert invoice["note"] == "This is a system generated invoice"

    def test_numbers_are_sequential(self, api, paid_campaign):
        campaign, order = paid_campaign

        first = generate(api, campaign, order).json()["data"]["invoiceNumber"]
        second = generate(api, campaign, order).json()["data"]["invoiceNumber"]

        assert (first, second) == ("INV00001", "INV00002")

    def test_invalid_signature(self, api, paid_campaign):
        campaign, order = paid_campaign

        response = generate(api, campaign, order, signature="bad")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid payment signature"

    def test_unpaid_order(self, api, make_client, make_service, make_campaign):
        client = make_client()
        service = make_service()
        campaign = make_campaign(client, service)
        order = api.post("/payment/createOrder", json={
            "amount": 15, "clientId": client.id, "serviceId": service.id,
        }).json()["order"]

        response = generate(api, campaign, order)

        assert response.status_code == 404
        assert response.json()["message"] == "Payment not approved or not found"

    def test_unknown_campaign(self, api, paid_campaign):
        _, order = paid_campaign

        response = api.post("/invoice/generate", json={
            "campaignId": "missing",
            "razorpay_order_id": order["id"],
            "razorpay_payment_id": "pay_001",
            "razorpay_signature": sign(order["id"], "pay_001"),
        })

        assert response.status_code == 404


class TestInvoiceLookup:

    def test_get_by_campaign(self, api, paid_campaign):
        campaign, order = paid_campaign
        generate(api, campaign, order)
        generate(api, campaign, order)

        response = api.post("/invoice/getByCampaign", json={"campaignId": campaign.id})

        assert response.status_code == 200
        invoices = response.json()["data"]["invoices"]
        assert [i["invoiceNumber"] for i in invoices] == ["INV00001", "INV00002"]

    def test_get_by_campaign_without_invoices(self, api, paid_campaign):
        campaign, _ = paid_campaign

        response = api.post("/invoice/getByCampaign", json={"campaignId": campaign.id})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "No invoices found for this campaign"}

    def test_get_by_id(self, api, paid_campaign):
        campaign, order = paid_campaign
        invoice_id = generate(api, campaign, order).json()["data"]["invoiceId"]

        response = api.post("/invoice/getById", json={"invoiceId": invoice_id})

        assert response.status_code == 200
        assert response.json()["data"]["invoiceId"] == invoice_id

    def test_get_missing(self, api):
        response = api.post("/invoice/getById", json={"invoiceId": "missing"})

        assert response.status_code == 404
