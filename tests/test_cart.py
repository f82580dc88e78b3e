"""Tests for the fertilizer catalog and the cart."""

from decimal import Decimal

import pytest

from app.cart.service import CartService, line_total
from app.common.exceptions import NotFoundException


class TestFertilizerCatalog:
    def test_public_list_hides_unavailable(self, client, make_fertilizer):
        make_fertilizer(name="Compost")
        make_fertilizer(name="Bone meal", available=False)

        response = client.get("/api/v1/fertilizers")
        assert response.status_code == 200
        names = [f["name"] for f in response.json()["fertilizers"]]
        assert names == ["Compost"]

    def test_admin_crud(self, client, admin_headers):
        response = client.post(
            "/api/v1/fertilizers/admin",
            json={"name": "Vermicompost", "price": "450.00", "unit": "bag"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        fertilizer_id = response.json()["id"]

        response = client.patch(
            f"/api/v1/fertilizers/admin/{fertilizer_id}",
            json={"price": "425.50"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert Decimal(response.json()["price"]) == Decimal("425.50")

        response = client.delete(
            f"/api/v1/fertilizers/admin/{fertilizer_id}", headers=admin_headers
        )
        assert response.status_code == 204
        assert client.get(f"/api/v1/fertilizers/{fertilizer_id}").status_code == 404

    def test_admin_rejects_non_positive_price(self, client, admin_headers):
        response = client.post(
            "/api/v1/fertilizers/admin",
            json={"name": "Free", "price": "0", "unit": "kg"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_users_cannot_manage_catalog(self, client, auth_headers):
        response = client.post(
            "/api/v1/fertilizers/admin",
            json={"name": "Vermicompost", "price": "450.00", "unit": "bag"},
            headers=auth_headers,
        )
        assert response.status_code == 403


class TestCartService:
    def test_line_total(self):
        assert line_total(Decimal("12.50"), 3) == Decimal("37.50")

    def test_add_snapshots_price(self, db_session, user_id, make_fertilizer):
        fertilizer = make_fertilizer(price="80.00")
        service = CartService(db_session)

        item = service.add_to_cart(user_id, fertilizer.id, 3)

        fertilizer.price = Decimal("95.00")
        db_session.commit()
        db_session.refresh(item)
        assert item.fertilizer_unit_price == Decimal("80.00")
        assert item.total_amount == Decimal("240.00")

    def test_each_add_is_a_new_line(self, db_session, user_id, make_fertilizer):
        fertilizer = make_fertilizer()
        service = CartService(db_session)
        service.add_to_cart(user_id, fertilizer.id, 1)
        service.add_to_cart(user_id, fertilizer.id, 2)
        assert len(service.get_user_cart_items(user_id)) == 2

    def test_unavailable_fertilizer(self, db_session, user_id, make_fertilizer):
        fertilizer = make_fertilizer(available=False)
        with pytest.raises(NotFoundException):
            CartService(db_session).add_to_cart(user_id, fertilizer.id, 1)

    @pytest.mark.parametrize("quantity", [1, 2, 7, 25])
    def test_update_recomputes_total(self, db_session, user_id, make_fertilizer, quantity):
        fertilizer = make_fertilizer(price="33.33")
        service = CartService(db_session)
        item = service.add_to_cart(user_id, fertilizer.id, 1)

        updated = service.update_cart_item_quantity(user_id, item.id, quantity)

        assert updated.quantity == quantity
        assert updated.total_amount == quantity * updated.fertilizer_unit_price

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_removes(self, db_session, user_id, make_fertilizer, quantity):
        fertilizer = make_fertilizer()
        service = CartService(db_session)
        item = service.add_to_cart(user_id, fertilizer.id, 2)

        assert service.update_cart_item_quantity(user_id, item.id, quantity) is None
        assert service.get_user_cart_items(user_id) == []

    def test_other_users_item_not_found(self, db_session, user_id, make_fertilizer):
        fertilizer = make_fertilizer()
        service = CartService(db_session)
        item = service.add_to_cart(user_id, fertilizer.id, 1)

        with pytest.raises(NotFoundException):
            service.remove_from_cart(user_id + 1000, item.id)

    def test_clear_cart(self, db_session, user_id, make_fertilizer):
        fertilizer = make_fertilizer()
        service = CartService(db_session)
        for _ in range(3):
            service.add_to_cart(user_id, fertilizer.id, 1)

        assert service.clear_cart(user_id) == 3
        assert service.get_user_cart_items(user_id) == []


class TestCartAPI:
    def test_cart_total(self, client, auth_headers, make_fertilizer):
        compost = make_fertilizer(name="Compost", price="100.00")
        urea = make_fertilizer(name="Bio urea", price="45.25")
        client.post(
            "/api/v1/cart/items",
            json={"fertilizer_id": compost.id, "quantity": 2},
            headers=auth_headers,
        )
        client.post(
            "/api/v1/cart/items",
            json={"fertilizer_id": urea.id, "quantity": 4},
            headers=auth_headers,
        )

        response = client.get("/api/v1/cart", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert Decimal(data["total_amount"]) == Decimal("381.00")
        # Most recently added first
        assert data["items"][0]["fertilizer_name"] == "Bio urea"

    def test_summary_quotes_discount(self, client, auth_headers, user_id, make_fertilizer, grant_points):
        fertilizer = make_fertilizer(price="100.00")
        grant_points(user_id, 1000)
        client.post(
            "/api/v1/cart/items",
            json={"fertilizer_id": fertilizer.id, "quantity": 1},
            headers=auth_headers,
        )

        response = client.get("/api/v1/cart/summary", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["available_points"] == 1000
        assert Decimal(data["max_discount"]) == Decimal("50.00")
        assert data["points_required"] == 17

    def test_zero_quantity_update_returns_no_content(self, client, auth_headers, make_fertilizer):
        fertilizer = make_fertilizer()
        item = client.post(
            "/api/v1/cart/items",
            json={"fertilizer_id": fertilizer.id, "quantity": 2},
            headers=auth_headers,
        ).json()

        response = client.patch(
            f"/api/v1/cart/items/{item['id']}", json={"quantity": 0}, headers=auth_headers
        )
        assert response.status_code == 204
        assert client.get("/api/v1/cart", headers=auth_headers).json()["count"] == 0

    def test_add_requires_positive_quantity(self, client, auth_headers, make_fertilizer):
        fertilizer = make_fertilizer()
        response = client.post(
            "/api/v1/cart/items",
            json={"fertilizer_id": fertilizer.id, "quantity": 0},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_clear(self, client, auth_headers, make_fertilizer):
        fertilizer = make_fertilizer()
        client.post(
            "/api/v1/cart/items", json={"fertilizer_id": fertilizer.id}, headers=auth_headers
        )

        response = client.delete("/api/v1/cart", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"removed": 1}
