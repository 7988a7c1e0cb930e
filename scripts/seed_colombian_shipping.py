from sqlalchemy import select
from storefront.core.logging import configure_logging
from storefront.db.session import session_scope
from storefront.db.model import Store
from storefront.services.shipping.seed import seed_colombian_shipping


# 在容器里运行一次：python -m scripts.seed_colombian_shipping
# （确保 PYTHONPATH 指向 backend/，storefront 才能被导入）。

def main():
    logger = configure_logging()
    with session_scope() as db:
        stores = db.execute(select(Store).order_by(Store.name)).scalars().all()
        if not stores:
            print("No stores found. Please create stores first.")
            return
        for store in stores:
            created = seed_colombian_shipping(db, store)
            logger.info("%s: %s", store.name, created)

if __name__ == "__main__":
    main()
