"""Tests for adapter registries and factory functions."""

import pytest

from smm_gateway.adapters import (
    build_payment_registry,
    build_provider_registry,
    create_provider_adapter,
)
from smm_gateway.adapters.implementations.payments import CryptomusAdapter, KorapayAdapter
from smm_gateway.adapters.implementations.providers import MockProviderAdapter, RestJsonProviderAdapter
from smm_gateway.core.exceptions import AdapterNotFoundError, UnsupportedProviderTypeError
from smm_gateway.domain.models.payment import PaymentCapability
from smm_gateway.domain.models.provider import ProviderType


def test_rest_json_config_builds_rest_json_adapter(provider_config):
    adapter = create_provider_adapter(provider_config())

    assert isinstance(adapter, RestJsonProviderAdapter)
    assert adapter.name == "Acme Panel"


@pytest.mark.parametrize("provider_type", [ProviderType.REST_XML, ProviderType.SOAP])
def test_unimplemented_types_are_rejected(provider_config, provider_type):
    with pytest.raises(UnsupportedProviderTypeError) as exc_info:
        create_provider_adapter(provider_config(type=provider_type))

    assert exc_info.value.provider_type == provider_type.value
    assert exc_info.value.code == "unsupported_provider_type"


def test_provider_registry_rejects_duplicates():
    registry = build_provider_registry()

    assert registry.is_registered(ProviderType.REST_JSON)
    assert registry.list() == [ProviderType.REST_JSON]
    with pytest.raises(ValueError):
        registry.register(ProviderType.REST_JSON, MockProviderAdapter)


def test_provider_registry_rejects_non_adapters():
    registry = build_provider_registry()

    with pytest.raises(ValueError):
        registry.register(ProviderType.SOAP, dict)


@pytest.mark.parametrize("name", ["korapay", "Korapay", "KORAPAY"])
def test_payment_lookup_is_case_insensitive(settings, name):
    registry = build_payment_registry(settings)

    assert isinstance(registry.get(name), KorapayAdapter)


def test_payment_registry_holds_both_rails(settings):
    registry = build_payment_registry(settings)

    assert sorted(registry.names()) == ["cryptomus", "korapay"]
    assert isinstance(registry.get("Cryptomus"), CryptomusAdapter)
    assert len(registry.all()) == 2


def test_unknown_payment_adapter_raises(settings):
    registry = build_payment_registry(settings)

    with pytest.raises(AdapterNotFoundError) as exc_info:
        registry.get("paypal")

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Payment adapter not found for provider: paypal"


def test_rails_do_not_advertise_refunds(settings):
    for adapter in build_payment_registry(settings).all():
        assert adapter.supports_refunds() is False
        assert PaymentCapability.REFUNDS not in adapter.get_capabilities()
        assert PaymentCapability.WEBHOOKS in adapter.get_capabilities()
