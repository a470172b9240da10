"""Shared data models: metamodel entities, object populations and DL axioms."""

from .entity_model import (
    UNBOUNDED,
    AssociationEntity,
    AttributeEntity,
    ClassEntity,
    ConstraintAnnotation,
    EntityModel,
    EnumEntity,
    OperationEntity,
    ParameterEntity,
    ReferenceEntity,
    ResolvedType,
    TypeKind,
    link_opposites,
)
from .instance_model import Instance, InstancePool, InstanceRef, LinkPool, association_key

__all__ = [
    "UNBOUNDED",
    "AssociationEntity",
    "AttributeEntity",
    "ClassEntity",
    "ConstraintAnnotation",
    "EntityModel",
    "EnumEntity",
    "OperationEntity",
    "ParameterEntity",
    "ReferenceEntity",
    "ResolvedType",
    "TypeKind",
    "link_opposites",
    "Instance",
    "InstancePool",
    "InstanceRef",
    "LinkPool",
    "association_key",
]
