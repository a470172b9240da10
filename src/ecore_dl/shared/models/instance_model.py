"""
Object population used by the closed-world instance extension.

``InstancePool`` groups instances by type name, registering every instance
under its most specific class and under each of its supertypes, so the
group of a type holds all of its instances. ``LinkPool`` records, per
association end, which targets each source instance is linked to.

Targets may be given as instances or as positional references
(``InstanceRef("Item", 2)`` is the third instance grouped under ``Item``),
the way XMI serializations address objects.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ecore_dl.constants import NamingConfig
from ecore_dl.shared.models.entity_model import ClassEntity, ReferenceEntity

AssociationKey = Tuple[str, str]
"""``(declaring class name, reference name)``."""


@dataclass(eq=False)
class Instance:
    """
    A concrete object.

    Attributes:
        id: Identifier, unique within the pool.
        type: Most specific class of the object.
    """
    id: str
    type: ClassEntity = field(repr=False)

    @property
    def type_name(self) -> str:
        return self.type.name or ""


@dataclass(frozen=True)
class InstanceRef:
    """Positional reference to an instance of a type group."""
    type_name: str
    position: int


LinkTarget = Union[Instance, InstanceRef]


def association_key(reference: ReferenceEntity) -> AssociationKey:
    """Key of an association end in the link pool."""
    owner = reference.owner.name if reference.owner is not None else ""
    return (owner or "", reference.name or "")


class InstancePool:
    """
    Typed instances grouped by the inheritance closure of their type.

    Example:
        >>> pool = InstancePool()
        >>> dog = pool.add(dog_class)          # id "Object0"
        >>> pool.instances_of("Animal")        # includes dog when Dog <: Animal
    """

    def __init__(self):
        self._instances: List[Instance] = []
        self._by_id: Dict[str, Instance] = {}
        self._by_type: Dict[str, List[Instance]] = {}

    def add(self, cls: ClassEntity, instance_id: Optional[str] = None) -> Instance:
        """
        Register a new instance of ``cls``.

        Args:
            cls: Most specific type of the instance.
            instance_id: Identifier; ``Object<n>`` is generated when omitted.

        Raises:
            ValueError: If the identifier is already used.
        """
        if instance_id is None:
            instance_id = f"{NamingConfig.OBJECT_ID_PREFIX}{len(self._instances)}"
        if instance_id in self._by_id:
            raise ValueError(f"Duplicate instance id: {instance_id}")

        instance = Instance(instance_id, cls)
        self._instances.append(instance)
        self._by_id[instance_id] = instance
        for type_cls in [cls] + cls.all_supertypes():
            self._by_type.setdefault(type_cls.name or "", []).append(instance)
        return instance

    def get(self, instance_id: str) -> Instance:
        return self._by_id[instance_id]

    def instances_of(self, type_name: str) -> List[Instance]:
        """All instances of a type, including instances of its subtypes."""
        return list(self._by_type.get(type_name, []))

    def direct_instances_of(self, type_name: str) -> List[Instance]:
        return [i for i in self._instances if i.type_name == type_name]

    def type_names(self) -> List[str]:
        return list(self._by_type)

    def resolve(self, target: LinkTarget) -> Instance:
        """
        Resolve a link target to an instance.

        Raises:
            KeyError: If a positional reference points outside its type group.
        """
        if isinstance(target, Instance):
            return target
        group = self._by_type.get(target.type_name, [])
        if not 0 <= target.position < len(group):
            raise KeyError(f"No instance at position {target.position} of type {target.type_name}")
        return group[target.position]

    def __iter__(self) -> Iterator[Instance]:
        return iter(self._instances)

    def __len__(self) -> int:
        return len(self._instances)


class LinkPool:
    """
    Links per association end.

    Each association key maps source instances to their ordered targets.
    A source present in the map "has links", even with an empty target list.
    """

    def __init__(self):
        self._links: Dict[AssociationKey, Dict[Instance, List[LinkTarget]]] = {}

    def link(
        self,
        association: Union[ReferenceEntity, AssociationKey],
        source: Instance,
        *targets: LinkTarget,
    ) -> None:
        """Record that ``source`` is linked to ``targets`` through ``association``."""
        key = association_key(association) if isinstance(association, ReferenceEntity) else association
        self._links.setdefault(key, {}).setdefault(source, []).extend(targets)

    def links_for(self, association: Union[ReferenceEntity, AssociationKey]) -> Dict[Instance, List[LinkTarget]]:
        key = association_key(association) if isinstance(association, ReferenceEntity) else association
        return self._links.get(key, {})
