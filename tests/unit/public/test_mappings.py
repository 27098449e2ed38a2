from __future__ import annotations

from stateholder_codegen.descriptors import (
    ClassDescriptor,
    ConsumerDescriptor,
    ConsumerMapping,
    SharedPropertyDescriptor,
)
from stateholder_codegen.mappings import SharedStateLookup, build_consumer_mappings


def test_lookup_matches_exact_canonical_type() -> None:
    lookup = SharedStateLookup.from_mapping(
        ConsumerMapping(
            consumer_type="com.example.UserViewModel",
            shared_properties=(
                SharedPropertyDescriptor(property_name="items", type_signature="Map<String,Item>"),
            ),
        ),
    )

    assert lookup.find_field("Map<String, Item>") == "items"
    assert lookup.find_field("Map<String, Other>") is None


def test_lookup_first_declared_field_wins() -> None:
    lookup = SharedStateLookup.from_mapping(
        ConsumerMapping(
            consumer_type="com.example.UserViewModel",
            shared_properties=(
                SharedPropertyDescriptor(property_name="first", type_signature="UserState"),
                SharedPropertyDescriptor(property_name="second", type_signature="UserState"),
            ),
        ),
    )

    assert lookup.find_field("UserState") == "first"


def test_lookup_falls_back_to_unique_simple_name() -> None:
    lookup = SharedStateLookup.from_mapping(
        ConsumerMapping(
            consumer_type="com.example.UserViewModel",
            shared_properties=(
                SharedPropertyDescriptor(property_name="user", type_signature="com.example.UserState"),
            ),
        ),
    )

    assert lookup.find_field("UserState") == "user"


def test_lookup_ignores_ambiguous_simple_names() -> None:
    lookup = SharedStateLookup.from_mapping(
        ConsumerMapping(
            consumer_type="com.example.UserViewModel",
            shared_properties=(
                SharedPropertyDescriptor(property_name="a", type_signature="com.a.UserState"),
                SharedPropertyDescriptor(property_name="b", type_signature="com.b.UserState"),
            ),
        ),
    )

    assert lookup.find_field("UserState") is None
    assert lookup.find_field("com.b.UserState") == "b"


def test_build_consumer_mappings_matches_direct_and_delegate_properties(
    user_holder: ClassDescriptor,
    user_view_model: ConsumerDescriptor,
) -> None:
    delegating = ConsumerDescriptor(
        class_name="ProfileViewModel",
        package_name="com.example.profile",
        property_types=("StateHolderDelegate<com.example.user.UserStateHolder>",),
    )
    unrelated = ConsumerDescriptor(
        class_name="SettingsViewModel",
        package_name="com.example.settings",
        property_types=("com.example.settings.SettingsStateHolder", "List<"),
    )

    mappings = build_consumer_mappings([user_holder], [user_view_model, unrelated, delegating])

    assert list(mappings) == ["com.example.user.UserStateHolder"]
    assert [mapping.consumer_type for mapping in mappings["com.example.user.UserStateHolder"]] == [
        "com.example.user.UserViewModel",
        "com.example.profile.ProfileViewModel",
    ]
    assert mappings["com.example.user.UserStateHolder"][0].shared_properties == (
        user_view_model.shared_properties
    )


def test_build_consumer_mappings_accepts_nullable_property_types(user_holder: ClassDescriptor) -> None:
    consumer = ConsumerDescriptor(
        class_name="LazyViewModel",
        package_name="com.example",
        property_types=("com.example.user.UserStateHolder?",),
    )

    mappings = build_consumer_mappings([user_holder], [consumer])

    assert [mapping.consumer_type for mapping in mappings[user_holder.qualified_name]] == [
        "com.example.LazyViewModel",
    ]


def test_build_consumer_mappings_skips_disabled_holders_and_keeps_unused(
    user_view_model: ConsumerDescriptor,
) -> None:
    disabled = ClassDescriptor(
        class_name="UserStateHolder",
        package_name="com.example.user",
        is_registration_enabled=False,
    )
    unused = ClassDescriptor(class_name="CartStateHolder", package_name="com.example.cart")

    mappings = build_consumer_mappings([disabled, unused], [user_view_model])

    assert mappings == {"com.example.cart.CartStateHolder": ()}


def test_lookup_nullable_parameter_matches_non_null_field() -> None:
    lookup = SharedStateLookup.from_mapping(
        ConsumerMapping(
            consumer_type="com.example.UserViewModel",
            shared_properties=(
                SharedPropertyDescriptor(property_name="userState", type_signature="com.example.UserState"),
                SharedPropertyDescriptor(property_name="items", type_signature="List<Item>"),
            ),
        ),
    )

    assert lookup.find_field("com.example.UserState?") == "userState"
    assert lookup.find_field("UserState?") == "userState"
    assert lookup.find_field("List<Item>?") == "items"
    assert lookup.find_field("Other?") is None
