"""This module contains functions to order and choose VM types from a
catalog. They are used by the allocation strategies."""

from .model import VmType


def price_per_mips(vm_type: VmType) -> float:
    """Returns the hourly price in usd of one MIPS of the VM type."""
    return vm_type.price.to("usd/h").magnitude / vm_type.mips


def get_types_ordered_by_price_asc(catalog: tuple[VmType, ...]) -> list[VmType]:
    """Returns the VM types ordered by increasing price. If they have the same
    price, it orders them by decreasing MIPS."""
    return sorted(catalog, key=lambda vm_type: (vm_type.price, -vm_type.mips))


def get_types_ordered_by_mips_desc(catalog: tuple[VmType, ...]) -> list[VmType]:
    """Returns the VM types ordered by decreasing MIPS. If they have the same
    MIPS, it orders them by price."""
    return sorted(catalog, key=lambda vm_type: (-vm_type.mips, vm_type.price))


def get_types_ordered_by_price_per_mips(
    catalog: tuple[VmType, ...]
) -> list[VmType]:
    """Sorts the VM types according to their price per MIPS, and in case of
    match, by their MIPS."""
    return sorted(
        catalog, key=lambda vm_type: (price_per_mips(vm_type), vm_type.mips)
    )


def compute_cheapest_type(catalog: tuple[VmType, ...]) -> VmType:
    """Returns the VM type with the lowest hourly price."""
    return get_types_ordered_by_price_asc(catalog)[0]


def compute_fastest_type(catalog: tuple[VmType, ...]) -> VmType:
    """Returns the VM type with the highest MIPS."""
    return get_types_ordered_by_mips_desc(catalog)[0]


def get_type_by_name(catalog: tuple[VmType, ...], name: str) -> VmType:
    """Returns the VM type with that name. Raises KeyError if there is none."""
    for vm_type in catalog:
        if vm_type.name == name:
            return vm_type
    raise KeyError(name)
