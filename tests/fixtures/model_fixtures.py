"""
Metamodel builders for the test suite.

Every builder returns a fresh model, since the well-formedness check
repairs names in place.
"""

from ecore_dl.shared.models import (
    UNBOUNDED,
    AttributeEntity,
    ClassEntity,
    EntityModel,
    EnumEntity,
    OperationEntity,
    ParameterEntity,
    ReferenceEntity,
    link_opposites,
)

PACKAGE = "shop"


# =============================================================================
# Shop Model
# =============================================================================

def build_shop_model() -> EntityModel:
    """
    Order, Item and Category with:

    - Order.number EInt [1..1], Order.notes EString [0..*],
      Order.codes EInt [2..5], Order.status Status [0..1]
    - Order.items [0..*] <-> Item.order [1..1]
    - Category.children [0..*] <-> Category.parent [0..1]
    - Item.active and Category.active EBoolean
    - Order.total(): EDouble and Order.addItem(item: Item, qty: EInt): EBoolean
    - Status = {OPEN, CLOSED}
    """
    status = EnumEntity("Status", ["OPEN", "CLOSED"])
    order = ClassEntity("Order")
    item = ClassEntity("Item")
    category = ClassEntity("Category")

    order.add_attribute(AttributeEntity("number", "EInt", lower=1, upper=1))
    order.add_attribute(AttributeEntity("notes", "EString", lower=0, upper=UNBOUNDED))
    order.add_attribute(AttributeEntity("codes", "EInt", lower=2, upper=5))
    order.add_attribute(AttributeEntity("status", status, lower=0, upper=1))
    item.add_attribute(AttributeEntity("active", "EBoolean", lower=1, upper=1))
    category.add_attribute(AttributeEntity("active", "EBoolean", lower=0, upper=1))

    order.add_operation(OperationEntity("total", "EDouble"))
    order.add_operation(OperationEntity(
        "addItem",
        "EBoolean",
        [ParameterEntity("item", item), ParameterEntity("qty", "EInt")],
    ))

    items = ReferenceEntity("items", target=item, lower=0, upper=UNBOUNDED)
    order_end = ReferenceEntity("order", target=order, lower=1, upper=1)
    link_opposites(items, order_end)
    order.add_reference(items)
    item.add_reference(order_end)

    children = ReferenceEntity("children", target=category, lower=0, upper=UNBOUNDED)
    parent = ReferenceEntity("parent", target=category, lower=0, upper=1)
    link_opposites(children, parent)
    category.add_reference(children)
    category.add_reference(parent)

    return EntityModel(PACKAGE, classes=[order, item, category], enumerations=[status])


# =============================================================================
# Animal Model
# =============================================================================

def build_animal_model() -> EntityModel:
    """Animal <- Dog, Cat; Person.pets [0..*] <-> Animal.owner [0..1]."""
    animal = ClassEntity("Animal", abstract=True)
    dog = ClassEntity("Dog", supertypes=[animal])
    cat = ClassEntity("Cat", supertypes=[animal])
    person = ClassEntity("Person")

    animal.add_attribute(AttributeEntity("name", "EString", lower=1, upper=1))

    pets = ReferenceEntity("pets", target=animal, lower=0, upper=UNBOUNDED)
    owner = ReferenceEntity("owner", target=person, lower=0, upper=1)
    link_opposites(pets, owner)
    person.add_reference(pets)
    animal.add_reference(owner)

    return EntityModel(PACKAGE, classes=[animal, dog, cat, person])


# =============================================================================
# Association Model
# =============================================================================

def build_association_model(opposite_lower: int, opposite_upper: int) -> EntityModel:
    """A.r -> B [0..*] with opposite B.rOpposite -> A [opposite_lower..opposite_upper]."""
    a = ClassEntity("A")
    b = ClassEntity("B")
    r = ReferenceEntity("r", target=b, lower=0, upper=UNBOUNDED)
    r_opposite = ReferenceEntity("rOpposite", target=a, lower=opposite_lower, upper=opposite_upper)
    link_opposites(r, r_opposite)
    a.add_reference(r)
    b.add_reference(r_opposite)
    return EntityModel(PACKAGE, classes=[a, b])
