# backend/demo_data.py
# Demo catalog and members loaded on startup when SEED_DEMO_DATA is enabled
from models.member import Member
from models.product import Product

CATEGORIES = ["Drinks", "Fruit", "Furniture", "Tickets", "Clothing"]

DEMO_PRODUCTS = [
    Product(
        id="1",
        name="Roost Coffee",
        price=200,
        cost_price=50,
        discount_price=180,
        stock=50,
        category="Drinks",
        description="A hand-brewed house blend with a faint taste of Bells.",
        image_url="https://picsum.photos/200/200?random=1",
    ),
    Product(
        id="2",
        name="Special Apple",
        price=500,
        cost_price=100,
        stock=20,
        category="Fruit",
        description="Looks like an ordinary apple, only shinier.",
        image_url="https://picsum.photos/200/200?random=2",
    ),
    Product(
        id="3",
        name="Simple DIY Workbench",
        price=1500,
        cost_price=800,
        discount_price=1200,
        stock=5,
        category="Furniture",
        description="A sturdy workbench made of wood.",
        image_url="https://picsum.photos/200/200?random=3",
    ),
    Product(
        id="4",
        name="Nook Miles Ticket",
        price=2000,
        cost_price=200,
        stock=100,
        category="Tickets",
        description="The must-have ticket to a deserted island.",
        image_url="https://picsum.photos/200/200?random=4",
    ),
]

DEMO_MEMBERS = [
    Member(id="m1", name="Isabelle", phone="0912345678", points=1200, join_date="2023-01-01"),
    Member(id="m2", name="Timmy", phone="0987654321", points=50, join_date="2023-05-20"),
]
