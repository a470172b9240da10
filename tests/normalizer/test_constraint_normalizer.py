"""
Tests for constraint normalization and resolution to class expressions.

Run with:
    pytest tests/normalizer/test_constraint_normalizer.py -v
"""

import pytest

from ecore_dl.core.exceptions import (
    ConstraintError,
    ConstraintSyntaxError,
    FixpointNotReachedError,
    UnsupportedConstraintError,
)
from ecore_dl.formats.ocl import ConstraintParser
from ecore_dl.formats.ocl.ast import OperationKind
from ecore_dl.normalizer import (
    ConstraintNormalizer,
    IteratorFrame,
    OperationFrame,
    PropertyFrame,
    ScopeBuilder,
    resolve,
)
from ecore_dl.shared.models.axioms import (
    NOTHING,
    THING,
    DataSomeValuesFrom,
    ObjectSomeValuesFrom,
    complement_of,
    intersection_of,
    union_of,
)


@pytest.fixture
def normalizer(shop_model, naming):
    return ConstraintNormalizer(shop_model, naming)


@pytest.fixture
def order(shop_model):
    return shop_model.find_class("Order")


@pytest.fixture
def category(shop_model):
    return shop_model.find_class("Category")


# =============================================================================
# NORMALIZATION
# =============================================================================

@pytest.mark.unit
class TestNormalize:
    """Rewrite loop up to the printed fixpoint."""

    def test_already_normal_text(self, normalizer):
        result = normalizer.normalize("self.items->isEmpty()")
        assert result.text == "self.items->isEmpty()"
        assert result.iterations == 0
        assert result.source == "self.items->isEmpty()"

    def test_for_all_needs_one_round(self, normalizer):
        result = normalizer.normalize("self.children->forAll(c | c.active)")
        assert result.text == "self.children->select(c | not c.active)->isEmpty()"
        assert result.iterations == 1

    def test_chained_selects_need_one_round(self, normalizer):
        result = normalizer.normalize("self.items->select(i | i.active)->select(j | not j.active)->isEmpty()")
        assert result.text == "self.items->select(i | i.active and not i.active)->isEmpty()"
        assert result.iterations == 1

    def test_normal_form_is_stable(self, normalizer):
        first = normalizer.normalize("self.children->forAll(c | c.children->exists(d | d.active))")
        second = normalizer.normalize(first.text)
        assert second.text == first.text
        assert second.iterations == 0

    def test_expression_matches_text(self, normalizer):
        result = normalizer.normalize("self.items->exists(i | i.active)")
        assert result.expression == ConstraintParser().parse(result.text)

    @pytest.mark.parametrize("text", [
        "self.children->forAll(c | c.active)",
        "self.items->exists(i | i.active)",
        "self.items->reject(i | i.active)->notEmpty()",
        "not (self.items->size() > 0)",
        "self.children->forAll(c | c.children->forAll(d | not d.active))",
        "self.items->select(i | i.active)->select(j | j.active)->select(k | not k.active)->isEmpty()",
    ])
    def test_supported_rewrites_converge_quickly(self, shop_model, naming, text):
        result = ConstraintNormalizer(shop_model, naming, max_iterations=4).normalize(text)
        assert result.iterations <= 3

    def test_iteration_cap(self, shop_model, naming):
        limited = ConstraintNormalizer(shop_model, naming, max_iterations=1)
        with pytest.raises(FixpointNotReachedError) as exc_info:
            limited.normalize("self.children->forAll(c | c.active)")
        assert exc_info.value.iterations == 1
        assert exc_info.value.expression == "self.children->forAll(c | c.active)"

    def test_oscillation_is_detected(self, normalizer, monkeypatch):
        a = ConstraintParser().parse("self.a")
        b = ConstraintParser().parse("self.b")
        monkeypatch.setattr(
            "ecore_dl.normalizer.constraint_normalizer.rewrite",
            lambda expr, **options: b if expr == a else a,
        )
        with pytest.raises(FixpointNotReachedError, match="oscillates"):
            normalizer.normalize("self.a")

    def test_syntax_error(self, normalizer):
        with pytest.raises(ConstraintSyntaxError):
            normalizer.normalize("self.items->")


# =============================================================================
# SCOPES
# =============================================================================

@pytest.mark.unit
class TestScopeBuilder:

    def test_frames_of_normalized_for_all(self, shop_model, naming, normalizer, category):
        normalized = normalizer.normalize("self.children->forAll(c | c.active)")
        root = ScopeBuilder(shop_model, naming, category).build(normalized.expression)

        assert [type(f) for f in root.frames] == [PropertyFrame, IteratorFrame, OperationFrame]
        assert root.frames[0].role == naming.object_role("Category", "children")
        assert root.frames[2].kind == OperationKind.IS_EMPTY

        nested = root.frames[1].nested
        assert nested.variable == "c"
        assert nested.depth == 1
        assert nested.parent is root
        assert nested.frames[0] == PropertyFrame(naming.data_role("Category", "active"))
        assert nested.frames[0].is_data
        assert nested.frames[1].kind == OperationKind.NOT

    def test_resolution_is_repeatable(self, shop_model, naming, normalizer, category):
        normalized = normalizer.normalize("self.children->forAll(c | c.active)")
        root = ScopeBuilder(shop_model, naming, category).build(normalized.expression)
        assert resolve(root) == resolve(root)

    def test_scope_depth_limit(self, shop_model, naming, category):
        shallow = ConstraintNormalizer(shop_model, naming, max_depth=1)
        text = "self.children->select(c | c.children->select(d | d.active)->notEmpty())->notEmpty()"
        with pytest.raises(UnsupportedConstraintError):
            shallow.to_class_expression(text, category)


# =============================================================================
# RESOLUTION
# =============================================================================

@pytest.mark.unit
class TestResolution:
    """Normalized constraints resolved to class expressions."""

    def test_is_empty(self, normalizer, naming, order):
        expression = normalizer.to_class_expression("self.items->isEmpty()", order)
        assert expression == complement_of(ObjectSomeValuesFrom(naming.object_role("Order", "items"), THING))

    def test_counting_size_comparison_follows_rewrite_table(self, normalizer, order):
        assert normalizer.to_class_expression("self.items->size() > 3", order) == (
            normalizer.to_class_expression("self.items->notEmpty()", order)
        )
        assert normalizer.to_class_expression("self.items->size() = 2", order) == (
            normalizer.to_class_expression("self.items->isEmpty()", order)
        )

    @pytest.mark.parametrize("text", [
        "self.items->size() > 3",
        "self.items->size() = 2",
    ])
    def test_sound_size_rewrite_rejects_counting(self, shop_model, naming, order, text):
        sound = ConstraintNormalizer(shop_model, naming, sound_size_rewrite=True)
        with pytest.raises(UnsupportedConstraintError, match="not supported"):
            sound.to_class_expression(text, order)
        assert sound.to_class_expression("self.items->size() >= 1", order) == (
            sound.to_class_expression("self.items->notEmpty()", order)
        )

    def test_not_empty(self, normalizer, naming, order):
        expression = normalizer.to_class_expression("self.items->notEmpty()", order)
        assert expression == ObjectSomeValuesFrom(naming.object_role("Order", "items"), THING)

    def test_for_all(self, normalizer, naming, category):
        expression = normalizer.to_class_expression("self.children->forAll(c | c.active)", category)
        children = naming.object_role("Category", "children")
        active = naming.data_role("Category", "active")
        assert expression == complement_of(ObjectSomeValuesFrom(children, complement_of(DataSomeValuesFrom(active))))
        assert str(expression) == "¬∃shopCategorychildrenrole.¬∃shopCategoryactiverole.rdfs:Literal"

    def test_exists(self, normalizer, naming, order):
        expression = normalizer.to_class_expression("self.items->exists(i | i.active)", order)
        assert expression == ObjectSomeValuesFrom(
            naming.object_role("Order", "items"), DataSomeValuesFrom(naming.data_role("Item", "active"))
        )

    def test_implicit_iterator_variable(self, normalizer, order):
        explicit = normalizer.to_class_expression("self.items->forAll(i | i.active)", order)
        implicit = normalizer.to_class_expression("items->forAll(active)", order)
        assert implicit == explicit

    def test_size_comparison(self, normalizer, order):
        assert normalizer.to_class_expression("self.items->size() > 0", order) == (
            normalizer.to_class_expression("self.items->notEmpty()", order)
        )
        assert normalizer.to_class_expression("self.items->size() = 0", order) == (
            normalizer.to_class_expression("self.items->isEmpty()", order)
        )

    def test_merged_selects(self, normalizer, naming, order):
        expression = normalizer.to_class_expression(
            "self.items->select(i | i.active)->select(j | not j.active)->isEmpty()", order
        )
        active = DataSomeValuesFrom(naming.data_role("Item", "active"))
        assert expression == complement_of(ObjectSomeValuesFrom(
            naming.object_role("Order", "items"), intersection_of(active, complement_of(active))
        ))

    def test_boolean_combinators(self, normalizer, naming, order):
        items = ObjectSomeValuesFrom(naming.object_role("Order", "items"), THING)
        notes = DataSomeValuesFrom(naming.data_role("Order", "notes"))

        assert normalizer.to_class_expression(
            "self.items->isEmpty() or self.notes->notEmpty()", order
        ) == union_of(complement_of(items), notes)

        assert normalizer.to_class_expression(
            "self.items->notEmpty() and self.notes->notEmpty()", order
        ) == intersection_of(items, notes)

        assert normalizer.to_class_expression(
            "self.items->notEmpty() implies self.notes->notEmpty()", order
        ) == union_of(complement_of(items), notes)

        assert normalizer.to_class_expression(
            "self.items->notEmpty() xor self.notes->notEmpty()", order
        ) == union_of(
            intersection_of(items, complement_of(notes)),
            intersection_of(complement_of(items), notes),
        )

    def test_enumeration_attribute_is_an_object_role(self, normalizer, naming, order):
        expression = normalizer.to_class_expression("self.status->notEmpty()", order)
        assert expression == ObjectSomeValuesFrom(naming.object_role("Order", "status"), THING)

    def test_boolean_literals(self, normalizer, order):
        assert normalizer.to_class_expression("true", order) == THING
        assert normalizer.to_class_expression("false", order) == NOTHING


@pytest.mark.unit
class TestTypeOperations:
    """oclIsTypeOf, oclIsKindOf and oclAsType over the animal hierarchy."""

    @pytest.fixture
    def animal_normalizer(self, animal_model, naming):
        return ConstraintNormalizer(animal_model, naming)

    def test_type_test_replaces_filler(self, animal_normalizer, animal_model, naming):
        person = animal_model.find_class("Person")
        expression = animal_normalizer.to_class_expression(
            "self.pets->select(p | p.oclIsTypeOf(Dog))->notEmpty()", person
        )
        assert expression == ObjectSomeValuesFrom(naming.object_role("Person", "pets"), naming.class_concept("Dog"))

    def test_kind_test_on_navigation(self, animal_normalizer, animal_model, naming):
        person = animal_model.find_class("Person")
        expression = animal_normalizer.to_class_expression("self.pets.oclIsKindOf(Cat)", person)
        assert expression == ObjectSomeValuesFrom(naming.object_role("Person", "pets"), naming.class_concept("Cat"))

    def test_cast_intersects_filler(self, animal_normalizer, animal_model, naming):
        person = animal_model.find_class("Person")
        expression = animal_normalizer.to_class_expression(
            "self.pets->select(p | p.oclAsType(Dog).name->notEmpty())->notEmpty()", person
        )
        name = DataSomeValuesFrom(naming.data_role("Animal", "name"))
        assert expression == ObjectSomeValuesFrom(
            naming.object_role("Person", "pets"), intersection_of(naming.class_concept("Dog"), name)
        )

    def test_inherited_attribute_uses_declaring_class(self, animal_normalizer, animal_model, naming):
        dog = animal_model.find_class("Dog")
        expression = animal_normalizer.to_class_expression("self.name->notEmpty()", dog)
        assert expression == DataSomeValuesFrom(naming.data_role("Animal", "name"))

    def test_unknown_type_argument(self, animal_normalizer, animal_model):
        person = animal_model.find_class("Person")
        with pytest.raises(UnsupportedConstraintError, match="Fish"):
            animal_normalizer.to_class_expression("self.pets.oclIsKindOf(Fish)", person)


@pytest.mark.unit
class TestUnsupportedConstraints:
    """Constraints outside the resolvable fragment raise ConstraintError."""

    @pytest.mark.parametrize("text", [
        "self.items->collect(i | i.active)->notEmpty()",
        "self.missing->isEmpty()",
        "self.status = Status::OPEN",
        "self.number.digits->notEmpty()",
        "self.items->select(i | self.notes->notEmpty())->notEmpty()",
        "self.notes.size()",
    ])
    def test_unsupported(self, normalizer, order, text):
        with pytest.raises(UnsupportedConstraintError) as exc_info:
            normalizer.to_class_expression(text, order)
        assert exc_info.value.expression == text

    def test_errors_share_a_base_class(self, normalizer, order):
        with pytest.raises(ConstraintError):
            normalizer.to_class_expression("self.items->", order)
