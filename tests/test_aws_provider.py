import asyncio

import pytest

from cloudfeed.clients.aws_provider import (
    AwsProvider,
    extract_instance_prices,
    find_first_priced_sku,
    is_s3_standard_storage,
    select_on_demand_price,
    warn_unknown_regions,
)
from cloudfeed.clients.provider_interface import ProviderError
from cloudfeed.models.enums import Provider


@pytest.fixture
def provider(feed_config, http_client):
    return AwsProvider(feed_config, http_client=http_client)


def test_example_row_matches_published_shape(offers):
    offer = offers.offer([
        ("SKU1", offers.compute("m5.large"), offers.term("SKU1", offers.dimension("0.0960000000"))),
    ])

    rows, stats = extract_instance_prices(offer, "ap-south-1")

    assert [row.to_feed_row() for row in rows] == [{
        "provider": "aws",
        "region": "ap-south-1",
        "type": "m5.large",
        "vCPU": 2,
        "RAM_GB": 8.0,
        "usd_per_hour": 0.096,
    }]
    assert stats.rows_emitted == 1


@pytest.mark.parametrize("overrides", [
    {"operatingSystem": "Windows"},
    {"tenancy": "Dedicated"},
    {"tenancy": "Host"},
    {"preInstalledSw": "SQL Web"},
    {"capacitystatus": "AllocatedCapacityReservation"},
    {"capacitystatus": "UnusedCapacityReservation"},
])
def test_non_matching_offers_are_filtered(offers, overrides):
    offer = offers.offer([
        ("SKU1", offers.compute("m5.large", **overrides), offers.term("SKU1", offers.dimension("0.096"))),
    ])

    rows, stats = extract_instance_prices(offer, "us-east-1")

    assert rows == []
    assert stats.items_filtered_out == 1


def test_non_compute_families_are_filtered(offers):
    product = offers.compute("m5.large")
    product["productFamily"] = "Dedicated Host"
    offer = offers.offer([("SKU1", product, offers.term("SKU1", offers.dimension("1.5")))])

    rows, _ = extract_instance_prices(offer, "us-east-1")

    assert rows == []


def test_absent_optional_attributes_are_kept(offers):
    product = offers.compute("t3.micro", vcpu="2", memory="1 GiB")
    del product["attributes"]["preInstalledSw"]
    del product["attributes"]["capacitystatus"]
    offer = offers.offer([("SKU1", product, offers.term("SKU1", offers.dimension("0.0104")))])

    rows, _ = extract_instance_prices(offer, "us-east-1")

    assert [row.type for row in rows] == ["t3.micro"]


def test_offers_without_positive_price_are_dropped(offers):
    offer = offers.offer([
        ("NOTERMS", offers.compute("m5.xlarge"), None),
        ("ZERO", offers.compute("m5.2xlarge"), offers.term("ZERO", offers.dimension("0.0000000000"))),
        ("NOUSD", offers.compute("m5.4xlarge"), {"T": {"priceDimensions": {"D": {"pricePerUnit": {"CNY": "1"}}}}}),
        ("OK", offers.compute("m5.large"), offers.term("OK", offers.dimension("0.096"))),
    ])

    rows, stats = extract_instance_prices(offer, "us-east-1")

    assert [row.type for row in rows] == ["m5.large"]
    assert stats.items_without_price == 3
    assert stats.items_seen == 4


def test_unparseable_specs_become_null(offers):
    offer = offers.offer([
        ("SKU1", offers.compute("mac1.metal", vcpu="0", memory="NA"), offers.term("SKU1", offers.dimension("1.083"))),
        ("SKU2", offers.compute("t4g.nano", vcpu="0.5"), offers.term("SKU2", offers.dimension("0.0042"))),
    ])

    rows, _ = extract_instance_prices(offer, "us-east-1")

    assert [row.type for row in rows] == ["mac1.metal", "t4g.nano"]
    assert rows[0].vCPU is None
    assert rows[0].RAM_GB is None
    assert rows[1].vCPU is None
    assert rows[1].RAM_GB == 8.0


def test_price_selection_prefers_entry_tier_then_cheapest(offers):
    same_tier = offers.term(
        "A",
        offers.dimension("0.0"),
        offers.dimension("0.2"),
        offers.dimension("0.1"),
    )
    tiered = offers.term(
        "B",
        offers.dimension("0.022", begin_range="51200"),
        offers.dimension("0.023", begin_range="0", end_range="51200"),
    )

    assert select_on_demand_price(same_tier) == pytest.approx(0.1)
    assert select_on_demand_price(tiered) == pytest.approx(0.023)
    assert select_on_demand_price({}) is None


def test_instance_pricing_combines_regions_sorted_by_type(provider, fake_session, feed_config, offers):
    fake_session.routes[feed_config.ec2_offer_url("ap-south-1")] = offers.offer([
        ("A1", offers.compute("t3.micro"), offers.term("A1", offers.dimension("0.0112"))),
        ("A2", offers.compute("c5.large"), offers.term("A2", offers.dimension("0.085"))),
    ])
    fake_session.routes[feed_config.ec2_offer_url("us-east-1")] = offers.offer([
        ("U1", offers.compute("m5.large"), offers.term("U1", offers.dimension("0.096"))),
        ("U2", offers.compute("a1.medium"), offers.term("U2", offers.dimension("0.0255"))),
    ])

    forward = asyncio.run(provider.get_instance_pricing(["ap-south-1", "us-east-1"]))
    backward = asyncio.run(provider.get_instance_pricing(["us-east-1", "ap-south-1"]))

    types = [row.type for row in forward]
    assert types == sorted(types) == ["a1.medium", "c5.large", "m5.large", "t3.micro"]
    assert [(row.type, row.region) for row in backward] == [(row.type, row.region) for row in forward]
    assert all(row.usd_per_hour > 0 for row in forward)
    assert {row.provider for row in forward} == {Provider.AWS}


def test_instance_pricing_fails_if_any_region_fails(provider, fake_session, feed_config, offers):
    fake_session.routes[feed_config.ec2_offer_url("ap-south-1")] = offers.offer([
        ("A1", offers.compute("t3.micro"), offers.term("A1", offers.dimension("0.0112"))),
    ])
    fake_session.routes[feed_config.ec2_offer_url("us-east-1")] = (503, {"message": "unavailable"})

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.get_instance_pricing(["ap-south-1", "us-east-1"]))

    assert "us-east-1" in exc_info.value.message
    assert list(exc_info.value.details) == ["us-east-1"]
    assert isinstance(exc_info.value.__cause__, ProviderError)


def test_non_object_offer_file_is_an_error(provider, fake_session, feed_config):
    fake_session.routes[feed_config.ec2_offer_url("us-east-1")] = ["not", "an", "offer"]

    with pytest.raises(ProviderError):
        provider.fetch_region_instances("us-east-1")


def s3_product(storage_class, family="Storage"):
    return {"productFamily": family, "attributes": {"storageClass": storage_class}}


def test_storage_price_from_first_matching_sku(provider, fake_session, feed_config, offers):
    fake_session.routes[feed_config.s3_offer_url] = offers.offer([
        ("GLACIER", s3_product("Archive"), offers.term("GLACIER", offers.dimension("0.004"))),
        ("STD", s3_product("Amazon S3 Standard"), offers.term(
            "STD",
            offers.dimension("0.021", begin_range="512000"),
            offers.dimension("0.023", begin_range="0", end_range="51200"),
            offers.dimension("0.022", begin_range="51200", end_range="512000"),
        )),
        ("STD2", s3_product("Amazon S3 Standard"), offers.term("STD2", offers.dimension("0.5"))),
    ])

    price = asyncio.run(provider.get_storage_price())

    assert price.provider == Provider.AWS
    assert price.usd_per_gb_month == pytest.approx(0.023)


def test_storage_price_falls_back_without_match(provider, fake_session, feed_config, offers):
    fake_session.routes[feed_config.s3_offer_url] = offers.offer([
        ("GP", s3_product("General Purpose"), offers.term("GP", offers.dimension("0.025"))),
        ("REQ", s3_product("Amazon S3 Standard", family="API Request"), offers.term("REQ", offers.dimension("0.005"))),
    ])

    price = asyncio.run(provider.get_storage_price())

    assert price.usd_per_gb_month == 0.023


def test_storage_price_falls_back_when_match_has_no_terms(provider, fake_session, feed_config, offers):
    fake_session.routes[feed_config.s3_offer_url] = offers.offer([
        ("STD", s3_product("Amazon S3 Standard"), None),
        ("STD2", s3_product("Amazon S3 Standard"), offers.term("STD2", offers.dimension("0.5"))),
    ])

    lookup = provider.find_storage_price(fake_session.routes[feed_config.s3_offer_url])

    assert not lookup.is_found
    assert "STD" in lookup.reason
    assert lookup.or_default(0.023) == 0.023


def test_malformed_offer_is_not_found_rather_than_an_error():
    lookup = find_first_priced_sku({"products": ["broken"]}, is_s3_standard_storage, "S3 Standard storage")

    assert not lookup.is_found
    assert lookup.reason.startswith("error while searching")


def test_egress_price_skips_free_tier(provider, fake_session, feed_config, offers):
    product = {
        "productFamily": "Data Transfer",
        "attributes": {
            "usagetype": "DataTransfer-Out-Bytes (Internet Out)",
            "group": "AWS Outbound Data Transfer to Internet",
        },
    }
    inbound = {
        "productFamily": "Data Transfer",
        "attributes": {"usagetype": "DataTransfer-In-Bytes", "group": "AWS Inbound Data Transfer"},
    }
    fake_session.routes[feed_config.data_transfer_offer_url] = offers.offer([
        ("IN", inbound, offers.term("IN", offers.dimension("0.01"))),
        ("OUT", product, offers.term(
            "OUT",
            offers.dimension("0.0", begin_range="0", end_range="1"),
            offers.dimension("0.09", begin_range="1", end_range="10240"),
            offers.dimension("0.085", begin_range="10240", end_range="51200"),
        )),
    ])

    price = asyncio.run(provider.get_egress_price())

    assert price.usd_per_gb == pytest.approx(0.09)


def test_egress_price_falls_back_without_match(provider, fake_session, feed_config, offers):
    fake_session.routes[feed_config.data_transfer_offer_url] = offers.offer([])

    price = asyncio.run(provider.get_egress_price())

    assert price.usd_per_gb == 0.09


def test_catalog_fetch_failure_is_not_swallowed(provider, fake_session, feed_config, connection_error):
    fake_session.routes[feed_config.s3_offer_url] = connection_error

    with pytest.raises(ProviderError):
        asyncio.run(provider.get_storage_price())


def test_warn_unknown_regions(caplog):
    unknown = warn_unknown_regions(["us-east-1", "moon-base-1"])

    assert unknown == ["moon-base-1"]
    assert "moon-base-1" in caplog.text
