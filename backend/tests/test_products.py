from gympro.models.order import Order, OrderItem


async def test_public_listing_hides_inactive_products(client, create_product):
    await create_product("Whey Protein", is_featured=True)
    await create_product("Creatine")
    retired = await create_product("Old Belt", is_active=False)

    resp = await client.get("/api/products")
    assert resp.status_code == 200
    page = resp.json()["data"]
    assert page["total"] == 2
    assert page["limit"] == 12
    assert {p["name"] for p in page["data"]} == {"Whey Protein", "Creatine"}

    assert (await client.get(f"/api/products/{retired.id}")).status_code == 404
    assert (await client.get("/api/products/by-slug/old-belt")).status_code == 404

    featured = await client.get("/api/products/featured")
    assert [p["name"] for p in featured.json()["data"]] == ["Whey Protein"]


async def test_listing_sort_search_and_limit_cap(client, create_product):
    await create_product("Shaker", price="14.99")
    await create_product("Dumbbells", price="299.99")
    await create_product("Gloves", price="19.99")

    resp = await client.get("/api/products", params={"sort": "price", "order": "asc"})
    assert [p["name"] for p in resp.json()["data"]["data"]] == ["Shaker", "Gloves", "Dumbbells"]

    resp = await client.get("/api/products", params={"search": "dumb"})
    assert [p["name"] for p in resp.json()["data"]["data"]] == ["Dumbbells"]

    resp = await client.get("/api/products", params={"limit": 1000})
    assert resp.json()["data"]["limit"] == 100


async def test_categories_include_product_counts(client, create_product):
    await create_product("Whey Protein")
    await create_product("Creatine")

    resp = await client.get("/api/products/categories")
    assert resp.status_code == 200
    [category] = resp.json()["data"]
    assert category["slug"] == "supplements"
    assert category["productCount"] == 2


async def test_admin_creates_product(client, admin, create_product):
    existing = await create_product("Whey Protein")
    category_id = create_product.state["category_id"]

    payload = {
        "name": "Lifting Belt",
        "slug": "lifting-belt",
        "price": 59.99,
        "categoryId": category_id,
        "stock": 7,
    }
    resp = await client.post("/api/products", headers=admin["headers"], json=payload)
    assert resp.status_code == 201, resp.text
    product = resp.json()["data"]
    assert product["isActive"] is True
    assert product["isFeatured"] is False
    assert product["stock"] == 7

    resp = await client.post("/api/products", headers=admin["headers"], json={**payload, "slug": existing.slug})
    assert resp.status_code == 409

    resp = await client.post("/api/products", headers=admin["headers"], json={**payload, "slug": "Bad Slug"})
    assert resp.status_code == 422

    resp = await client.post("/api/products", headers=admin["headers"], json={
        **payload, "slug": "other-belt", "categoryId": "missing",
    })
    assert resp.status_code == 404


async def test_plain_user_cannot_manage_products(client, user, create_product):
    product = await create_product("Whey Protein")
    resp = await client.delete(f"/api/products/{product.id}", headers=user["headers"])
    assert resp.status_code == 403


async def test_category_with_products_cannot_be_deleted(client, admin, create_product):
    await create_product("Whey Protein")
    category_id = create_product.state["category_id"]

    resp = await client.delete(f"/api/products/categories/{category_id}", headers=admin["headers"])
    assert resp.status_code == 400


async def test_category_conflicts(client, admin):
    body = {"name": "Apparel", "slug": "apparel"}
    assert (await client.post("/api/products/categories", headers=admin["headers"], json=body)).status_code == 201
    resp = await client.post("/api/products/categories", headers=admin["headers"], json=body)
    assert resp.status_code == 409
    resp = await client.post(
        "/api/products/categories", headers=admin["headers"], json={"name": "Apparel", "slug": "apparel-2"},
    )
    assert resp.status_code == 409


async def test_ordered_product_cannot_be_deleted(client, admin, create_product, session_factory):
    product = await create_product("Whey Protein")
    async with session_factory() as session:
        order = Order(
            user_id=admin["id"], total=product.price, status="CONFIRMED",
            shipping_address="1 Test Road", contact_phone="5550000000",
        )
        session.add(order)
        await session.flush()
        session.add(OrderItem(order_id=order.id, product_id=product.id, quantity=1, price=product.price))
        await session.commit()

    resp = await client.delete(f"/api/products/{product.id}", headers=admin["headers"])
    assert resp.status_code == 400
    assert "Deactivate it instead" in resp.json()["error"]

    resp = await client.put(f"/api/products/{product.id}", headers=admin["headers"], json={"isActive": False})
    assert resp.status_code == 200
    assert resp.json()["data"]["isActive"] is False


async def test_partial_update_rejects_null_for_required_fields(client, admin, create_product):
    product = await create_product("Whey Protein", stock=5)

    for body in ({"stock": None}, {"name": None}, {"price": None}, {"isActive": None}):
        resp = await client.put(f"/api/products/{product.id}", headers=admin["headers"], json=body)
        assert resp.status_code == 422, body
        assert resp.json()["success"] is False

    # optional columns can still be cleared
    resp = await client.put(
        f"/api/products/{product.id}", headers=admin["headers"], json={"description": None, "stock": 3},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["stock"] == 3
    assert resp.json()["data"]["name"] == "Whey Protein"


async def test_category_update_rejects_null_for_required_fields(client, admin):
    resp = await client.post(
        "/api/products/categories", headers=admin["headers"], json={"name": "Apparel", "slug": "apparel"},
    )
    category_id = resp.json()["data"]["id"]

    for body in ({"name": None}, {"slug": None}, {"sortOrder": None}):
        resp = await client.put(f"/api/products/categories/{category_id}", headers=admin["headers"], json=body)
        assert resp.status_code == 422, body

    resp = await client.put(
        f"/api/products/categories/{category_id}", headers=admin["headers"], json={"sortOrder": 4},
    )
    assert resp.json()["data"]["sortOrder"] == 4
    assert resp.json()["data"]["name"] == "Apparel"
