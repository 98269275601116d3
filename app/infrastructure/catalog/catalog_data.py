from app.domain.entities.catalog import ServiceCategory, ServiceExtra, ServiceItem

CATEGORIES = (
    ServiceCategory(id="cat_home", name="Home Cleaning", description="Regular and deep home cleaning", sort_order=1),
    ServiceCategory(id="cat_office", name="Office Cleaning", description="Workspaces and commercial units", sort_order=2),
    ServiceCategory(id="cat_specialty", name="Specialty", description="Carpets, upholstery and post-construction", sort_order=3),
)

ITEMS = (
    ServiceItem(id="svc_standard_room", category_id="cat_home", name="Standard Room Clean", base_price=5000.0, unit="room"),
    ServiceItem(id="svc_deep_room", category_id="cat_home", name="Deep Room Clean", base_price=8500.0, unit="room"),
    ServiceItem(id="svc_bathroom", category_id="cat_home", name="Bathroom Clean", base_price=4000.0, unit="bathroom"),
    ServiceItem(id="svc_kitchen", category_id="cat_home", name="Kitchen Deep Clean", base_price=12000.0, unit="kitchen", max_quantity=2),
    ServiceItem(id="svc_office_unit", category_id="cat_office", name="Office Unit Clean", base_price=15000.0, unit="unit"),
    ServiceItem(id="svc_carpet", category_id="cat_specialty", name="Carpet Shampoo", base_price=7000.0, unit="carpet"),
    ServiceItem(
        id="svc_post_construction",
        category_id="cat_specialty",
        name="Post-Construction Clean",
        base_price=45000.0,
        unit="property",
        max_quantity=1,
    ),
)

EXTRAS = (
    ServiceExtra(id="ext_fridge", name="Inside Fridge", price=2500.0),
    ServiceExtra(id="ext_oven", name="Inside Oven", price=3000.0),
    ServiceExtra(id="ext_windows", name="Interior Windows", price=1500.0),
    ServiceExtra(id="ext_laundry", name="Laundry & Folding", price=2000.0),
)
