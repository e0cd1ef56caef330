from decimal import Decimal
from flask import current_app
from models import db, Product, BlogPost, User

SAMPLE_PRODUCTS = [
    {
        "name": "Fresh Duck Eggs (Dozen)",
        "description": "Premium fresh duck eggs from free-range ducks. Rich in nutrients and perfect for baking or cooking.",
        "price": Decimal("6.99"),
        "category": "Eggs",
        "image_url": "https://images.unsplash.com/photo-1587486913049-53fc88980cfc?w=400",
        "stock": 50,
        "nutritional_facts": "High in protein, vitamin B12, and selenium",
    },
    {
        "name": "Organic Duck Eggs (Half Dozen)",
        "description": "Certified organic duck eggs from our pasture-raised ducks. No antibiotics or hormones.",
        "price": Decimal("4.99"),
        "category": "Eggs",
        "image_url": "https://images.unsplash.com/photo-1587486913049-53fc88980cfc?w=400",
        "stock": 30,
        "nutritional_facts": "High in protein, vitamin B12, and selenium",
    },
    {
        "name": "Whole Roasted Duck",
        "description": "Premium whole duck, perfectly seasoned and ready to cook. Approximately 4-5 lbs.",
        "price": Decimal("24.99"),
        "category": "Meat",
        "image_url": "https://images.unsplash.com/photo-1544440892-77831c00c452?w=400",
        "stock": 15,
        "nutritional_facts": "High in protein, iron, and B vitamins",
    },
    {
        "name": "Duck Breast Fillets",
        "description": "Premium duck breast fillets, perfect for grilling or pan-searing. Sold in pairs.",
        "price": Decimal("18.99"),
        "category": "Meat",
        "image_url": "https://images.unsplash.com/photo-1544440892-77831c00c452?w=400",
        "stock": 25,
        "nutritional_facts": "High in protein, iron, and B vitamins",
    },
    {
        "name": "Duck Leg Quarters",
        "description": "Tender duck leg quarters, great for braising or slow cooking. Pack of 2.",
        "price": Decimal("12.99"),
        "category": "Meat",
        "image_url": "https://images.unsplash.com/photo-1544440892-77831c00c452?w=400",
        "stock": 20,
        "nutritional_facts": "High in protein, iron, and B vitamins",
    },
    {
        "name": "Premium Duck Fat",
        "description": "Pure rendered duck fat, perfect for roasting potatoes or cooking. 16oz jar.",
        "price": Decimal("8.99"),
        "category": "Specialty",
        "image_url": "https://images.unsplash.com/photo-1556909045-2a2483435c6e?w=400",
        "stock": 40,
        "nutritional_facts": "Pure duck fat, high in monounsaturated fats",
    },
]

SAMPLE_BLOG_POSTS = [
    {
        "title": "The Benefits of Duck Eggs",
        "slug": "benefits-of-duck-eggs",
        "excerpt": "Discover why duck eggs are becoming the preferred choice for health-conscious consumers and professional chefs alike.",
        "content": (
            "Duck eggs are a nutritional powerhouse that many people haven't discovered yet. "
            "Compared to chicken eggs, duck eggs are larger, richer, and contain more protein and healthy fats. "
            "They're also an excellent source of selenium, vitamin B12, and choline. For bakers, duck eggs are "
            "a secret weapon: their higher fat content and protein levels create fluffier cakes and more tender pastries."
        ),
        "image_url": "https://images.unsplash.com/photo-1587486913049-53fc88980cfc?w=600",
    },
    {
        "title": "Farm-to-Table: Our Sustainable Practices",
        "slug": "sustainable-farming-practices",
        "excerpt": "Learn about our commitment to sustainable farming and how we're working to protect the environment while producing the highest quality products.",
        "content": (
            "Our ducks roam freely on our 50-acre farm, eating a natural diet supplemented with locally-sourced grains. "
            "We use rotational grazing to keep our pastures healthy and productive. Duck manure is composted and used "
            "to fertilize our fields, creating a closed-loop system that benefits both our animals and the environment."
        ),
        "image_url": "https://images.unsplash.com/photo-1500937386664-56d1dfef3854?w=600",
    },
]


def _author_id():
    # seeded posts belong to the first configured admin account
    username, account = next(iter(current_app.config["ADMIN_ACCOUNTS"].items()))
    if db.session.get(User, username) is None:
        db.session.add(User(
            id=username,
            email=account.get("email"),
            first_name=account.get("first_name"),
            last_name=account.get("last_name"),
            is_admin=True,
        ))
    return username


def seed_sample_data():
    """Insert sample products and blog posts into empty tables. Returns (products, posts) added."""
    added_products = added_posts = 0
    if Product.query.count() == 0:
        db.session.add_all(Product(**fields) for fields in SAMPLE_PRODUCTS)
        added_products = len(SAMPLE_PRODUCTS)
    if BlogPost.query.count() == 0:
        author_id = _author_id()
        db.session.add_all(BlogPost(author_id=author_id, **fields) for fields in SAMPLE_BLOG_POSTS)
        added_posts = len(SAMPLE_BLOG_POSTS)
    db.session.commit()
    if added_products or added_posts:
        current_app.logger.info("[seed] added %d products, %d blog posts", added_products, added_posts)
    return added_products, added_posts
