"""Tests for the cart: merge-on-duplicate, direct edits, blank lines."""

import math

import pytest

from billing.models.cart import Cart, CartLine
from billing.models.product import Product


class TestAddProduct:
    def test_first_add_appends_line_with_sale_price(self, products):
        cart = Cart()
        cart.add_product(products[0])

        assert cart.lines == [CartLine("b1", 1, 10.0)]

    @pytest.mark.parametrize("times", [1, 2, 7])
    def test_same_product_merges_into_one_line(self, products, times):
        cart = Cart()
        for _ in range(times):
            cart.add_product(products[0])

        assert len(cart) == 1
        assert cart.lines[0].quantity == times

    def test_distinct_products_keep_insertion_order(self, products):
        cart = Cart()
        cart.add_product(products[1])
        cart.add_product(products[0])
        cart.add_product(products[1])

        assert [l.product_id for l in cart.lines] == ["b2", "b1"]
        assert [l.quantity for l in cart.lines] == [2, 1]

    def test_unit_price_stays_pinned_after_catalog_change(self, products):
        cart = Cart()
        cart.add_product(products[0])
        repriced = Product(id="b1", sku="TOTE-01", name="Canvas Tote", sale_price=99.0)
        cart.add_product(repriced)

        assert cart.lines[0].unit_price == 10.0
        assert cart.lines[0].quantity == 2

    def test_add_after_typed_quantity_keeps_counting(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.set_line_field(0, "quantity", "3")
        cart.add_product(products[0])

        assert len(cart) == 1
        assert cart.lines[0].quantity == 4

    def test_add_after_garbage_quantity_gives_nan(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.set_line_field(0, "quantity", "abc")
        cart.add_product(products[0])

        assert math.isnan(cart.lines[0].quantity)


class TestSetLineField:
    def test_add_twice_then_overwrite_quantity(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.add_product(products[0])
        cart.set_line_field(0, "quantity", 5)

        assert len(cart) == 1
        assert cart.lines[0].quantity == 5

    def test_accepts_negative_and_non_numeric_values(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.set_line_field(0, "unit_price", -3)
        cart.set_line_field(0, "quantity", "abc")

        assert cart.lines[0].unit_price == -3
        assert cart.lines[0].quantity == "abc"

    def test_can_switch_product_id(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.set_line_field(0, "product_id", "b2")

        assert cart.lines[0].product_id == "b2"
        # price is not re-synced to the new product
        assert cart.lines[0].unit_price == 10.0

    def test_unknown_field_is_rejected(self, products):
        cart = Cart()
        cart.add_product(products[0])
        with pytest.raises(KeyError):
            cart.set_line_field(0, "discount", 1)

    def test_bad_index_raises(self):
        with pytest.raises(IndexError):
            Cart().set_line_field(0, "quantity", 1)

    def test_negative_index_raises(self, products):
        cart = Cart()
        cart.add_product(products[0])
        with pytest.raises(IndexError):
            cart.set_line_field(-1, "quantity", 9)

        assert cart.lines[0].quantity == 1


class TestBlankLineAndReset:
    def test_blank_line_uses_first_catalog_product(self, products):
        cart = Cart()
        cart.append_blank_line(products)

        assert cart.lines == [CartLine("b1", 1, 10.0)]

    def test_blank_line_without_catalog(self):
        cart = Cart()
        cart.append_blank_line([])

        assert cart.lines == [CartLine(None, 1, 0)]

    def test_blank_line_does_not_merge(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.append_blank_line(products)

        assert len(cart) == 2

    def test_remove_line(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.add_product(products[1])
        removed = cart.remove_line(0)

        assert removed.product_id == "b1"
        assert [l.product_id for l in cart.lines] == ["b2"]

    @pytest.mark.parametrize("index", [-1, 1])
    def test_remove_outside_the_cart_raises(self, products, index):
        cart = Cart()
        cart.add_product(products[0])
        with pytest.raises(IndexError):
            cart.remove_line(index)

        assert len(cart) == 1

    def test_reset_clears_everything(self, products):
        cart = Cart()
        cart.add_product(products[0])
        cart.append_blank_line()
        cart.reset()

        assert len(cart) == 0

    def test_wire_format(self, products):
        cart = Cart()
        cart.add_product(products[1])

        assert cart.to_api() == [{"bag_id": "b2", "quantity": 1, "unit_price": 5.0}]
