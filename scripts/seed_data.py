import argparse
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select

from pos_analytics.core.constants import GLOBAL_SETTINGS_TYPE
from pos_analytics.core.logging import setup_logging
from pos_analytics.database import Base, engine, session_scope
from pos_analytics.models import (
    AppSetting,
    Category,
    OperatingExpense,
    OperatingExpenseCategory,
    Product,
    Sale,
    SaleItem,
)


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample POS data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=30,
        help="Number of days of sales history to generate.",
    )
    parser.add_argument(
        "--currency",
        default="USD",
        help="Currency code stored in the global settings row.",
    )
    return parser.parse_args()


def _reset(db):
    for model in (SaleItem, Sale, OperatingExpense, OperatingExpenseCategory, Product, Category, AppSetting):
        db.execute(delete(model))
    db.commit()


def main():
    setup_logging()
    args = parse_args()

    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        if args.reset:
            _reset(db)

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            print("Seed skipped: products already exist.")
            return

        now = datetime.now(timezone.utc)
        db.add(AppSetting(type=GLOBAL_SETTINGS_TYPE, currency=args.currency.upper(), language="en"))

        drinks = Category(name="Drinks")
        bakery = Category(name="Bakery")
        db.add_all([drinks, bakery])
        db.flush()

        products = [
            Product(name="Espresso", price=3.0, purchase_price=0.8, stock=200, min_stock=20,
                    category_id=drinks.id, created_at=now - timedelta(days=120)),
            Product(name="Latte", price=4.5, purchase_price=1.4, stock=150, min_stock=20,
                    category_id=drinks.id, created_at=now - timedelta(days=90)),
            Product(name="Croissant", price=2.5, purchase_price=1.1, stock=8, min_stock=15,
                    category_id=bakery.id, created_at=now - timedelta(days=60)),
            Product(name="Muffin", price=2.0, purchase_price=0.9, stock=0, min_stock=10,
                    category_id=bakery.id, created_at=now - timedelta(days=45)),
        ]
        db.add_all(products)
        db.flush()

        for day in range(args.days):
            moment = (now - timedelta(days=day)).replace(hour=8 + day % 10, minute=15)
            basket = [
                (products[day % 2], 1 + day % 3, 0.0),
                (products[2 + day % 2], 1, 10.0 if day % 5 == 0 else 0.0),
            ]
            sale = Sale(payment_method="cash" if day % 2 else "card", created_at=moment)
            total = 0.0
            for position, (product, quantity, discount) in enumerate(basket):
                sale.sale_items.append(
                    SaleItem(
                        product_id=product.id,
                        position=position,
                        quantity=quantity,
                        price=product.price,
                        discount=discount,
                    )
                )
                total += product.price * quantity * (1 - discount / 100)
            sale.total = round(total, 2)
            db.add(sale)

        rent = OperatingExpenseCategory(name="Rent")
        utilities = OperatingExpenseCategory(name="Utilities")
        db.add_all([rent, utilities])
        db.flush()
        db.add_all(
            [
                OperatingExpense(amount=900.0, description="Monthly rent", category_id=rent.id,
                                 payment_date=now - timedelta(days=3)),
                OperatingExpense(amount=120.0, description="Electricity", category_id=utilities.id,
                                 payment_date=now - timedelta(days=10)),
                OperatingExpense(amount=35.0, description="Cleaning supplies",
                                 payment_date=now - timedelta(days=12)),
            ]
        )
    print("Seed data created.")


if __name__ == "__main__":
    main()
