import os

from product_catalog import create_app
from product_catalog.cli import seed_demo_products
from product_catalog.catalog import get_catalog

app = create_app()

if __name__ == "__main__":
    with app.app_context():
        if os.getenv("SEED_DEMO_DATA", "1") == "1" and get_catalog().store.count() == 0:
            seed_demo_products(get_catalog().store)
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8080")))
