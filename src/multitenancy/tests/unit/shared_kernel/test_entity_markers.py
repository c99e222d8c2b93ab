"""Unit tests for global entity markers."""

from shared_kernel.entity_markers import GlobalEntity, global_entity, is_marked_global


class TestGlobalEntityMarkers:
    """Tests for the GlobalEntity mixin and @global_entity decorator."""

    def test_mixin_marks_class_and_subclasses(self):
        """Test that the mixin marker is inherited."""

        class Country(GlobalEntity):
            pass

        class Region(Country):
            pass

        assert is_marked_global(Country)
        assert is_marked_global(Region)

    def test_decorator_returns_same_class(self):
        """Test that the decorator marks the class in place."""

        class Currency:
            pass

        assert global_entity(Currency) is Currency
        assert is_marked_global(Currency)

    def test_unmarked_class(self):
        """Test that ordinary classes are not global."""

        class Order:
            pass

        assert not is_marked_global(Order)
