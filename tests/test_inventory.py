import pytest

from stockexchange.inventory import Inventory, StockItem


def _inventory(*triples):
    inventory = Inventory()
    for triple in triples:
        inventory.insert(StockItem(*triple))
    return inventory


def test_find_existing_and_missing():
    inventory = _inventory((5, 10, 100), (2, 3, 40), (9, 1, 7))
    assert inventory.find(2) == StockItem(2, 3, 40)
    assert inventory.find(9).price == 7
    assert inventory.find(4) is None
    assert len(inventory) == 3


def test_iteration_is_in_id_order():
    inventory = _inventory((5, 10, 100), (2, 3, 40), (9, 1, 7), (1, 0, 0))
    assert [item.stock_id for item in inventory] == [1, 2, 5, 9]


def test_duplicate_ids_keep_insertion_order():
    first = StockItem(3, 1, 10)
    second = StockItem(3, 2, 20)
    inventory = _inventory((1, 1, 1))
    inventory.insert(first)
    inventory.insert(second)
    assert inventory.find(3) is first
    assert [item for item in inventory if item.stock_id == 3] == [first, second]


def test_find_returns_live_item():
    inventory = _inventory((1, 10, 100))
    inventory.find(1).left_stock -= 4
    assert inventory.find(1).left_stock == 6


def test_listing_format():
    inventory = _inventory((2, 5, 300), (1, 10, 100))
    assert inventory.listing() == "1 10 100\n2 5 300\n"


def test_empty_listing():
    assert Inventory().listing() == ""


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "stock.txt"
    inventory = _inventory((4, 8, 16), (1, 2, 3), (7, 0, 50))
    inventory.save(path)
    loaded = Inventory.load(path)
    assert list(loaded) == list(inventory)
    assert path.read_text() == inventory.listing()


def test_load_stops_at_malformed_token(tmp_path):
    path = tmp_path / "stock.txt"
    path.write_text("1 2 3\n4 5 x\n7 8 9\n")
    loaded = Inventory.load(path)
    assert list(loaded) == [StockItem(1, 2, 3)]


def test_load_ignores_incomplete_triple(tmp_path):
    path = tmp_path / "stock.txt"
    path.write_text("1 2 3\n4 5\n")
    loaded = Inventory.load(path)
    assert [item.stock_id for item in loaded] == [1]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Inventory.load(tmp_path / "absent.txt")