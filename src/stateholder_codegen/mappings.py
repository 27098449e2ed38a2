"""Shared-state lookup tables for consumer classes.

Injected state holder parameters are resolved from the consumer object that
requests the holder. Each consumer exposes shared-state fields; a parameter is
satisfied by the field whose type matches the parameter's type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from stateholder_codegen.descriptors import (
    ClassDescriptor,
    ConsumerDescriptor,
    ConsumerMapping,
)
from stateholder_codegen.type_signatures import (
    GenericType,
    NullableType,
    ParseFailure,
    SimpleType,
    TypeSignature,
    parse_type_signature,
    type_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SharedStateLookup:
    """Map canonical type keys to shared-state field names for one consumer."""

    consumer_type: str
    fields_by_type_key: dict[str, str] = field(default_factory=dict)
    """Canonical type key to field name; the first declared field wins."""
    fields_by_simple_name: dict[str, str] = field(default_factory=dict)
    """Simple type name to field name, only for names declared exactly once."""

    @classmethod
    def from_mapping(cls, mapping: ConsumerMapping) -> SharedStateLookup:
        """Build the lookup table for a consumer mapping.

        Args:
            mapping: Consumer class and the shared fields it exposes.

        """
        fields_by_type_key: dict[str, str] = {}
        simple_name_candidates: dict[str, list[str]] = {}

        for shared_property in mapping.shared_properties:
            key = type_key(shared_property.type_signature)
            fields_by_type_key.setdefault(key, shared_property.property_name)

            parsed = parse_type_signature(shared_property.type_signature)
            if isinstance(parsed, SimpleType):
                simple_name_candidates.setdefault(parsed.simple_name, []).append(
                    shared_property.property_name,
                )

        fields_by_simple_name = {
            name: candidates[0]
            for name, candidates in simple_name_candidates.items()
            if len(candidates) == 1
        }
        return cls(
            consumer_type=mapping.consumer_type,
            fields_by_type_key=fields_by_type_key,
            fields_by_simple_name=fields_by_simple_name,
        )

    def find_field(self, type_signature: str) -> str | None:
        """Return the field holding a value of the given type, if any.

        Exact canonical matches win. Otherwise a simple type matches a field
        whose simple type name is unique within the consumer, so
        ``UserSharedState`` matches ``com.example.UserSharedState``. A nullable
        parameter also accepts a field of its non-null type.

        Args:
            type_signature: Declared type of the injected parameter.

        """
        matched = self.fields_by_type_key.get(type_key(type_signature))
        if matched is not None:
            return matched

        parsed = parse_type_signature(type_signature)
        if isinstance(parsed, NullableType):
            matched = self.fields_by_type_key.get(str(parsed.inner))
            if matched is not None:
                return matched
            parsed = parsed.inner
        if isinstance(parsed, SimpleType):
            return self.fields_by_simple_name.get(parsed.simple_name)
        return None


def build_consumer_mappings(
    holders: Iterable[ClassDescriptor],
    consumers: Iterable[ConsumerDescriptor],
) -> dict[str, tuple[ConsumerMapping, ...]]:
    """Find, for each registration-enabled holder, the consumers that use it.

    A consumer uses a holder when one of its properties has the holder's
    qualified name as its type, or as the first type argument of a generic
    property type (e.g. a ``StateHolderDelegate<UserStateHolder>`` delegate).

    Args:
        holders: State holder descriptors.
        consumers: Consumer class descriptors.

    Returns:
        Mappings keyed by holder qualified name, in consumer input order. Holders
        without consumers map to an empty tuple.

    """
    consumer_list = tuple(consumers)
    mappings: dict[str, tuple[ConsumerMapping, ...]] = {}

    for holder in holders:
        if not holder.is_registration_enabled:
            continue
        holder_name = holder.qualified_name
        matching = tuple(
            consumer.to_mapping()
            for consumer in consumer_list
            if _consumer_uses_holder(consumer=consumer, holder_name=holder_name)
        )
        for mapping in matching:
            logger.debug("Mapping added: %s -> %s", mapping.consumer_type, holder_name)
        mappings[holder_name] = matching

    return mappings


def _consumer_uses_holder(*, consumer: ConsumerDescriptor, holder_name: str) -> bool:
    for property_type in consumer.property_types:
        parsed = parse_type_signature(property_type)
        if isinstance(parsed, ParseFailure):
            continue
        if _referenced_type_name(parsed) == holder_name:
            return True
        if isinstance(parsed, NullableType):
            parsed = parsed.inner
        if isinstance(parsed, GenericType) and parsed.type_arguments:
            first_argument = parsed.type_arguments[0]
            if isinstance(first_argument, (SimpleType, NullableType)) and (
                _referenced_type_name(first_argument) == holder_name
            ):
                return True
    return False


def _referenced_type_name(signature: TypeSignature) -> str | None:
    if isinstance(signature, NullableType):
        return _referenced_type_name(signature.inner)
    if isinstance(signature, SimpleType):
        return signature.qualified_name
    return None


__all__ = ["SharedStateLookup", "build_consumer_mappings"]
