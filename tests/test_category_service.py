"""
Category CRUD against categories.csv.
"""
import pytest

from circuit_pricing.engine.models import Category
from circuit_pricing.services.category_service import CategoryService


@pytest.fixture
def service(settings):
    return CategoryService(settings.categories_csv)


def test_list_keeps_file_order(service):
    names = [c.name for c in service.list_categories()]
    assert names == ["Fiber Internet", "Cable Broadband", "Fixed Wireless", "Copper DSL", "Legacy T1"]
    assert len(service.list_categories(include_inactive=False)) == 4


def test_missing_file_lists_nothing(tmp_path):
    assert CategoryService(tmp_path / "nope.csv").list_categories() == []


def test_create_generates_id_and_persists(service):
    created = service.create_category(Category(name="Satellite", type="Network", minimum_markup=30))

    assert created.id == "CAT-6"
    reloaded = service.get_category("CAT-6")
    assert reloaded.name == "Satellite"
    assert reloaded.minimum_markup == 30.0
    assert reloaded.is_active is True
    # New categories go to the end of the match order
    assert service.list_categories()[-1].id == "CAT-6"


def test_create_rejects_duplicate_name(service):
    with pytest.raises(ValueError, match="already exists"):
        service.create_category(Category(name="fiber internet", minimum_markup=10))


def test_create_rejects_duplicate_id(service):
    with pytest.raises(ValueError, match="CAT-1"):
        service.create_category(Category(name="Satellite", minimum_markup=10, id="CAT-1"))


def test_create_rejects_negative_markup(service):
    with pytest.raises(ValueError, match="negative"):
        service.create_category(Category(name="Satellite", minimum_markup=-1))


def test_update_changes_only_given_fields(service):
    updated = service.update_category("CAT-2", {"minimum_markup": 22.5})

    assert updated.minimum_markup == 22.5
    assert updated.name == "Cable Broadband"
    assert service.get_category("CAT-2").minimum_markup == 22.5


def test_update_can_deactivate(service):
    service.update_category("CAT-1", {"is_active": False})
    assert service.get_category("CAT-1").is_active is False
    assert "CAT-1" not in [c.id for c in service.list_categories(include_inactive=False)]


def test_update_unknown_raises_key_error(service):
    with pytest.raises(KeyError):
        service.update_category("CAT-404", {"minimum_markup": 5})


def test_update_rename_to_existing_name_rejected(service):
    with pytest.raises(ValueError, match="already exists"):
        service.update_category("CAT-2", {"name": "Fiber Internet"})
    # Keeping its own name is fine
    assert service.update_category("CAT-2", {"name": "Cable Broadband"}).id == "CAT-2"


def test_delete(service):
    assert service.delete_category("CAT-3") is True
    assert service.get_category("CAT-3") is None
    with pytest.raises(KeyError):
        service.delete_category("CAT-3")


def test_validate_warnings(service):
    result = service.validate_category(Category(name="Hosted PBX", type="Telephony"))

    assert result.valid
    assert result.errors == []
    assert "No minimum markup: agents will see carrier cost" in result.warnings
    assert any("Unknown category type 'Telephony'" in w for w in result.warnings)


def test_validate_requires_name(service):
    result = service.validate_category(Category(name="  ", minimum_markup=10))
    assert not result.valid
    assert "Name is required" in result.errors


def test_stats(service):
    stats = service.get_stats()

    assert stats["total"] == 5
    assert stats["active"] == 4
    assert stats["inactive"] == 1
    assert stats["with_markup"] == 3
    assert stats["by_type"] == {"Circuit": 4, "Network": 1}
