from __future__ import annotations

from pathlib import Path

from vaporec.recommendations.config import CatalogConfig
from vaporec.recommendations.data_store import get_catalog, get_item, load_catalog


def test_bundled_catalog_loads():
    items = load_catalog()
    assert len(items) == 8
    assert len({item.id for item in items}) == len(items)


def test_tag_columns_are_resolved_to_tags():
    mighty = next(item for item in load_catalog() if item.name == "Mighty+")
    assert [t.name for t in mighty.moods] == ["calm", "peaceful", "soothed"]
    assert [t.id for t in mighty.moods] == [1, 2, 3]
    assert mighty.current_price == 399.0
    assert mighty.heating_method == "hybrid"
    assert mighty.temp_control == "digital"
    assert mighty.slug == "mighty+"


def test_missing_values_become_none():
    dynavap = next(item for item in load_catalog() if item.name == "DynaVap M 7")
    assert dynavap.temp_control is None
    assert dynavap.slug == "dynavap-m-7"


def test_minimal_csv(tmp_path: Path):
    csv_path = tmp_path / "catalog.csv"
    csv_path.write_text(
        "id,name,moods,heating_method\n"
        '10,Test Device,"Calm, calm ,relaxed",CONVECTION\n'
        "11,Bare Device,,\n"
    )

    items = load_catalog(csv_path)

    assert [i.name for i in items] == ["Test Device", "Bare Device"]
    assert [t.name for t in items[0].moods] == ["calm", "relaxed"]
    assert items[0].heating_method == "convection"
    assert items[0].current_price is None
    assert items[1].moods == ()
    assert items[1].heating_method is None


def test_get_catalog_returns_copy():
    first = get_catalog()
    first.clear()
    assert len(get_catalog()) == 8


def test_get_item():
    assert get_item(3).name == "Volcano Hybrid"
    assert get_item(12345) is None


def test_catalog_config_override():
    assert CatalogConfig(override_path="").catalog_path.name == "vaporizers.csv"
    assert CatalogConfig(override_path="/tmp/other.csv").catalog_path == Path("/tmp/other.csv")
