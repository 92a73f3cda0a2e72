"""Basic health check tests."""
import json


def test_health_endpoint(client):
    """Test the health endpoint returns ok."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_graphql_endpoint(client):
    """The billing schema is served over HTTP."""
    response = client.post(
        "/graphql",
        data=json.dumps({"query": '{ extractTax(total: "115") { ... on TaxSplitType { subtotal tax } } }'}),
        content_type="application/json",
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"extractTax": {"subtotal": "100.00", "tax": "15.00"}}
