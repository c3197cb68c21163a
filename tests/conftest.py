import pytest
import requests

from cloudfeed.clients.http_client import JsonHttpClient
from cloudfeed.utils.config import FeedConfig

EC2_URL = "https://pricing.test/ec2/{region}.json"
S3_URL = "https://pricing.test/s3.json"
DT_URL = "https://pricing.test/dt.json"
FX_URL = "https://fx.test/latest/USD"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body_error=None):
        self.status_code = status_code
        self._payload = payload
        self._body_error = body_error

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body_error:
            raise self._body_error
        return self._payload


class FakeSession:
    """Routes GETs by exact URL. Values are payloads, (status, payload) tuples or exceptions."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if url not in self.routes:
            return FakeResponse(404, {"message": "not found"})
        route = self.routes[url]
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, FakeResponse):
            return route
        if isinstance(route, tuple):
            status, payload = route
            return FakeResponse(status, payload)
        return FakeResponse(200, route)

    def close(self):
        self.closed = True


def compute_product(instance_type, **overrides):
    attributes = {
        "operatingSystem": "Linux",
        "tenancy": "Shared",
        "preInstalledSw": "NA",
        "capacitystatus": "Used",
        "vcpu": "2",
        "memory": "8 GiB",
        "instanceType": instance_type,
    }
    attributes.update(overrides)
    return {"productFamily": "Compute Instance", "attributes": attributes}


def price_dimension(usd, begin_range="0", end_range="Inf"):
    return {
        "unit": "Hrs",
        "beginRange": begin_range,
        "endRange": end_range,
        "pricePerUnit": {"USD": usd},
    }


def on_demand_term(sku, *dimensions):
    return {
        f"{sku}.JRTCKXETXF": {
            "priceDimensions": {
                f"{sku}.JRTCKXETXF.{i}": dimension for i, dimension in enumerate(dimensions)
            }
        }
    }


def build_offer(entries):
    """entries: list of (sku, product, term-or-None)."""
    offer = {"products": {}, "terms": {"OnDemand": {}}}
    for sku, product, term in entries:
        product = dict(product, sku=sku)
        offer["products"][sku] = product
        if term is not None:
            offer["terms"]["OnDemand"][sku] = term
    return offer


@pytest.fixture
def offers():
    """Builders for AWS offer file fragments."""
    class Builders:
        compute = staticmethod(compute_product)
        dimension = staticmethod(price_dimension)
        term = staticmethod(on_demand_term)
        offer = staticmethod(build_offer)
    return Builders


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def http_client(fake_session):
    return JsonHttpClient("aws", session=fake_session)


@pytest.fixture
def feed_config(tmp_path):
    return FeedConfig(
        target_regions=["ap-south-1", "us-east-1"],
        output_dir=tmp_path / "data",
        ec2_offer_url_template=EC2_URL,
        s3_offer_url=S3_URL,
        data_transfer_offer_url=DT_URL,
        fx_url=FX_URL,
    )


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def make_response():
    return FakeResponse
